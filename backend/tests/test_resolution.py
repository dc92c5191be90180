"""
Tests for services/resolution.py

Pure resolution over in-memory rows: weekday mapping, exclusion and completeness.
"""
import uuid
from datetime import date, time

from weekly_slots.models.slot import Slot
from weekly_slots.services.resolution import (
    day_of_week,
    occurrence_in_week,
    resolve_rows,
    slots_for_date,
    start_of_week,
    week_dates,
)

SUNDAY = date(2026, 10, 18)
WEDNESDAY = date(2026, 10, 21)
NEXT_WEDNESDAY = date(2026, 10, 28)


def _template(dow=3, start=time(9, 0), end=time(10, 0), title="Standup"):
    return Slot(
        id=uuid.uuid4(),
        day_of_week=dow,
        start_time=start,
        end_time=end,
        title=title,
        is_exception=False,
        is_deleted=False,
    )


def _exception(template, on_date, is_deleted=False, title=None, original_slot_id="root"):
    return Slot(
        id=uuid.uuid4(),
        day_of_week=template.day_of_week,
        start_time=template.start_time,
        end_time=template.end_time,
        title=title or template.title,
        is_exception=True,
        exception_date=on_date,
        original_slot_id=template.id if original_slot_id == "root" else original_slot_id,
        is_deleted=is_deleted,
    )


class TestCalendarHelpers:
    """Sunday-based weekday numbering."""

    def test_day_of_week_is_sunday_based(self):
        assert day_of_week(SUNDAY) == 0
        assert day_of_week(date(2026, 10, 19)) == 1
        assert day_of_week(WEDNESDAY) == 3
        assert day_of_week(date(2026, 10, 24)) == 6

    def test_start_of_week(self):
        assert start_of_week(WEDNESDAY) == SUNDAY
        assert start_of_week(SUNDAY) == SUNDAY
        assert start_of_week(date(2026, 10, 24)) == SUNDAY

    def test_week_dates(self):
        dates = week_dates(SUNDAY)
        assert len(dates) == 7
        assert dates[0] == SUNDAY
        assert dates[-1] == date(2026, 10, 24)

    def test_occurrence_in_week(self):
        assert occurrence_in_week(3, SUNDAY) == WEDNESDAY
        assert occurrence_in_week(0, SUNDAY) == SUNDAY
        # Week not starting on Sunday still lands inside the 7-day window
        assert occurrence_in_week(0, WEDNESDAY) == date(2026, 10, 25)


class TestResolveRows:
    """Exclusion and overlay of exceptions onto templates."""

    def test_empty_week_has_seven_empty_dates(self):
        result = resolve_rows([], SUNDAY)
        assert list(result) == week_dates(SUNDAY)
        assert all(slots == [] for slots in result.values())

    def test_template_appears_on_its_weekday_only(self):
        t = _template(dow=3)
        result = resolve_rows([t], SUNDAY)
        assert result[WEDNESDAY] == [t]
        assert sum(len(v) for v in result.values()) == 1

    def test_edited_exception_replaces_template(self):
        t = _template()
        e = _exception(t, WEDNESDAY, title="Moved standup")
        assert slots_for_date([t, e], WEDNESDAY) == [e]

    def test_deleted_exception_hides_template(self):
        t = _template()
        e = _exception(t, WEDNESDAY, is_deleted=True)
        assert slots_for_date([t, e], WEDNESDAY) == []

    def test_exception_only_affects_its_own_date(self):
        t = _template()
        e = _exception(t, WEDNESDAY, is_deleted=True)
        assert slots_for_date([t, e], NEXT_WEDNESDAY) == [t]

    def test_templates_come_before_exceptions(self):
        t1 = _template(start=time(14, 0), end=time(15, 0), title="Afternoon")
        t2 = _template(start=time(9, 0), end=time(10, 0), title="Morning")
        e = _exception(t2, WEDNESDAY, title="Morning (moved)")
        assert slots_for_date([t1, t2, e], WEDNESDAY) == [t1, e]

    def test_exception_without_original_excludes_nothing(self):
        t = _template()
        orphan = _exception(t, WEDNESDAY, title="Extra", original_slot_id=None)
        assert slots_for_date([t, orphan], WEDNESDAY) == [t, orphan]

    def test_deleted_template_rows_are_ignored(self):
        t = _template()
        t.is_deleted = True
        assert slots_for_date([t], WEDNESDAY) == []

    def test_cancelled_occurrence_of_missing_template_shows_nothing(self):
        t = _template()
        e = _exception(t, WEDNESDAY, is_deleted=True)
        assert slots_for_date([e], WEDNESDAY) == []

    def test_exception_pointing_at_exception_does_not_hide_root(self):
        # Exclusion uses original_slot_id as stored; a chain is not followed to the root template.
        t = _template()
        first = _exception(t, WEDNESDAY, title="First fork")
        second = _exception(t, NEXT_WEDNESDAY, title="Second fork", original_slot_id=first.id)
        assert slots_for_date([t, first, second], NEXT_WEDNESDAY) == [t, second]
