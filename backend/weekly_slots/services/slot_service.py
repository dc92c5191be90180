"""
Slot mutations: create templates, edit or cancel single occurrences.

Single-date changes are copy-on-write: a template is never modified for one date.
Instead an exception row is forked (original_slot_id -> template) and later changes
to that date go to the same exception row. Each operation runs its lookup and its
write in one transaction.
"""
import logging
import uuid
from datetime import date, datetime, time, timedelta
from typing import Any

from sqlalchemy.orm import Session

from weekly_slots.core.constants import EDITABLE_FIELDS, SATURDAY, SUNDAY
from weekly_slots.core.errors import NotFoundError, ValidationError
from weekly_slots.db.session import transaction
from weekly_slots.models.slot import Slot
from weekly_slots.services import slot_store
from weekly_slots.services.capacity import check_capacity
from weekly_slots.services.resolution import day_of_week as weekday_of, resolve_week, start_of_week

logger = logging.getLogger(__name__)


def _to_time(value: Any, field: str) -> time:
    """Accept time, timedelta (since midnight) or 'HH:MM[:SS]'."""
    if isinstance(value, time):
        return value
    if isinstance(value, timedelta):
        return (datetime.min + value).time()
    if isinstance(value, str):
        try:
            return time.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(field, f"Invalid time {value!r}. Use HH:MM or HH:MM:SS.") from None
    raise ValidationError(field, "A time of day is required.")


def _to_date(value: Any, field: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            raise ValidationError(field, f"Invalid date {value!r}. Use YYYY-MM-DD.") from None
    raise ValidationError(field, "A date is required.")


def _validate_day_of_week(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not SUNDAY <= value <= SATURDAY:
        raise ValidationError("day_of_week", "Must be an integer from 0 (Sunday) to 6 (Saturday).")
    return value


def _validate_time_range(start_time: time, end_time: time) -> None:
    if start_time >= end_time:
        raise ValidationError("end_time", "end_time must be after start_time.")


def _clean_fields(fields: dict[str, Any]) -> dict[str, Any]:
    unknown = sorted(set(fields) - set(EDITABLE_FIELDS))
    if unknown:
        raise ValidationError(unknown[0], f"Field cannot be edited. Editable: {', '.join(EDITABLE_FIELDS)}.")
    cleaned = dict(fields)
    for key in ("start_time", "end_time"):
        if key in cleaned:
            cleaned[key] = _to_time(cleaned[key], key)
    return cleaned


def _locked(db: Session, slot_id: uuid.UUID) -> Slot:
    row = slot_store.get_slot(db, slot_id, for_update=True)
    if row is None:
        raise NotFoundError(slot_id)
    return row


def _existing_exception(db: Session, template: Slot, exception_date: date) -> Slot | None:
    return slot_store.find_exception(db, template.root_id, exception_date, for_update=True)


def _fork_exception(
    db: Session, template: Slot, exception_date: date, fields: dict[str, Any], is_deleted: bool = False
) -> Slot:
    """Copy the template into a new exception row for exception_date, overridden by fields."""
    if weekday_of(exception_date) != template.day_of_week:
        raise ValidationError(
            "exception_date",
            f"{exception_date.isoformat()} is not an occurrence of a slot recurring on day {template.day_of_week}.",
        )
    data = {
        "day_of_week": template.day_of_week,
        "start_time": template.start_time,
        "end_time": template.end_time,
        "title": template.title,
        "description": template.description,
    }
    data.update(fields)
    data.update(
        original_slot_id=template.root_id,
        is_exception=True,
        exception_date=exception_date,
        is_deleted=is_deleted,
    )
    return slot_store.insert_slot(db, **data)


# --- Reads ---


def get_slot(db: Session, slot_id: uuid.UUID) -> Slot:
    with transaction(db):
        row = slot_store.get_slot(db, slot_id)
        if row is None:
            raise NotFoundError(slot_id)
    return row


def list_templates(db: Session, dow: int | None = None) -> list[Slot]:
    """Recurring templates, optionally for one weekday, ordered by start time."""
    if dow is not None:
        _validate_day_of_week(dow)
    with transaction(db):
        return slot_store.find_templates(db, dow)


def get_week_slots(db: Session, week_start: date) -> dict[date, list[Slot]]:
    with transaction(db):
        return resolve_week(db, week_start)


# --- Mutations ---


def create_slot(
    db: Session,
    day_of_week: int,
    start_time: Any,
    end_time: Any,
    title: str | None = None,
    description: str | None = None,
    today: date | None = None,
) -> Slot:
    """
    Create a weekly recurring template.
    Capacity is checked against this weekday's occurrence in the current week (Sunday start).
    """
    dow = _validate_day_of_week(day_of_week)
    start = _to_time(start_time, "start_time")
    end = _to_time(end_time, "end_time")
    _validate_time_range(start, end)
    reference_week = start_of_week(today or date.today())

    with transaction(db):
        slot_store.lock_day(db, dow)
        check_capacity(db, dow, reference_week)
        row = slot_store.insert_slot(
            db,
            day_of_week=dow,
            start_time=start,
            end_time=end,
            title=title,
            description=description,
            is_exception=False,
            is_deleted=False,
        )
    logger.info("Created slot %s (day_of_week=%s %s-%s)", row.id, dow, start, end)
    return row


def edit_occurrence(db: Session, slot_id: uuid.UUID, exception_date: Any, fields: dict[str, Any]) -> Slot:
    """
    Edit one occurrence.
    Exception row: updated in place. Template: the date's exception is updated if one exists
    (and un-cancelled), otherwise a new exception is forked. The template itself is never touched.
    """
    if exception_date is None:
        raise ValidationError("exception_date", "exception_date is required for updates.")
    on_date = _to_date(exception_date, "exception_date")
    changes = _clean_fields(fields)

    with transaction(db):
        row = _locked(db, slot_id)
        existing = None if row.is_exception else _existing_exception(db, row, on_date)
        current = existing or row
        _validate_time_range(
            changes.get("start_time", current.start_time), changes.get("end_time", current.end_time)
        )

        if row.is_exception:
            result = slot_store.update_slot(db, row, changes)
            logger.info("Updated exception %s in place", result.id)
        else:
            if existing is not None:
                result = slot_store.update_slot(db, existing, {**changes, "is_deleted": False})
                logger.info("Updated existing exception %s of slot %s for %s", result.id, row.id, on_date)
            else:
                result = _fork_exception(db, row, on_date, changes)
                logger.info("Forked exception %s from slot %s for %s", result.id, row.id, on_date)
    return result


def cancel_occurrence(db: Session, slot_id: uuid.UUID, exception_date: Any = None) -> None:
    """
    Cancel one occurrence, or the whole recurring slot.

    Exception row: deleted (it only ever represents one date).
    Template + date: that date is suppressed by a deleted exception; other weeks are untouched.
    Template without a date: the template is hard-deleted for every week.
    """
    on_date = _to_date(exception_date, "exception_date") if exception_date is not None else None

    with transaction(db):
        row = _locked(db, slot_id)
        row_id = row.id
        if row.is_exception:
            deleted_date = row.exception_date
            slot_store.delete_slot(db, row)
            logger.info("Deleted exception %s (%s)", row_id, deleted_date)
        elif on_date is not None:
            existing = _existing_exception(db, row, on_date)
            if existing is not None:
                slot_store.update_slot(db, existing, {"is_deleted": True})
                logger.info("Cancelled occurrence %s of slot %s via exception %s", on_date, row.id, existing.id)
            else:
                cancelled = _fork_exception(db, row, on_date, {}, is_deleted=True)
                logger.info("Cancelled occurrence %s of slot %s via new exception %s", on_date, row.id, cancelled.id)
        else:
            slot_store.delete_slot(db, row)
            logger.info("Deleted recurring slot %s for all weeks", row_id)
