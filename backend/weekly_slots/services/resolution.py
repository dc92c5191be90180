"""
Week resolution: overlay date-specific exceptions onto weekly templates.

For each date of the week:
  visible = templates on that weekday whose id no exception of that date overrides
          + that date's exceptions that are not cancelled
A cancelled exception still overrides its template, which is how one occurrence is hidden.
Exclusion matches on original_slot_id as stored; chains are not followed back to the root.
"""
from datetime import date, timedelta

from sqlalchemy.orm import Session

from weekly_slots.core.constants import DAYS_IN_WEEK
from weekly_slots.models.slot import Slot
from weekly_slots.services.slot_store import find_week_rows


def day_of_week(d: date) -> int:
    """Sunday-based weekday: 0 = Sunday .. 6 = Saturday."""
    return (d.weekday() + 1) % DAYS_IN_WEEK


def start_of_week(d: date) -> date:
    """The Sunday on or before d."""
    return d - timedelta(days=day_of_week(d))


def week_dates(week_start: date) -> list[date]:
    return [week_start + timedelta(days=i) for i in range(DAYS_IN_WEEK)]


def occurrence_in_week(dow: int, week_start: date) -> date:
    """Date within the week starting at week_start that falls on weekday dow."""
    return week_start + timedelta(days=(dow - day_of_week(week_start)) % DAYS_IN_WEEK)


def slots_for_date(rows: list[Slot], target: date) -> list[Slot]:
    dow = day_of_week(target)
    templates = [r for r in rows if not r.is_exception and not r.is_deleted and r.day_of_week == dow]
    exceptions = [r for r in rows if r.is_exception and r.exception_date == target]

    excluded = {r.original_slot_id for r in exceptions if r.original_slot_id is not None}
    visible_templates = [r for r in templates if r.id not in excluded]
    visible_exceptions = [r for r in exceptions if not r.is_deleted]
    return visible_templates + visible_exceptions


def resolve_rows(rows: list[Slot], week_start: date) -> dict[date, list[Slot]]:
    """Pure resolution of already-fetched rows. Always 7 keys; empty dates map to []."""
    return {d: slots_for_date(rows, d) for d in week_dates(week_start)}


def resolve_week(db: Session, week_start: date) -> dict[date, list[Slot]]:
    """Resolve the 7 dates starting at week_start (caller normalizes, e.g. start_of_week)."""
    rows = find_week_rows(db, week_start, week_start + timedelta(days=DAYS_IN_WEEK - 1))
    return resolve_rows(rows, week_start)
