"""
Capacity rule: at most MAX_SLOTS_PER_DAY resolved slots on one date.

Only gates template creation; edits and cancellations never add an occurrence.
"""
import logging
from datetime import date

from sqlalchemy.orm import Session

from weekly_slots.core.constants import MAX_SLOTS_PER_DAY
from weekly_slots.core.errors import CapacityExceeded
from weekly_slots.services.resolution import occurrence_in_week, resolve_week

logger = logging.getLogger(__name__)


def count_active_slots(db: Session, dow: int, reference_week_start: date) -> int:
    week = resolve_week(db, reference_week_start)
    return len(week[occurrence_in_week(dow, reference_week_start)])


def check_capacity(db: Session, dow: int, reference_week_start: date) -> None:
    """Raise CapacityExceeded when weekday dow already has MAX_SLOTS_PER_DAY slots in the reference week."""
    active = count_active_slots(db, dow, reference_week_start)
    if active >= MAX_SLOTS_PER_DAY:
        logger.warning(
            "Capacity reached: day_of_week=%s has %s active slots in week of %s",
            dow,
            active,
            reference_week_start.isoformat(),
        )
        raise CapacityExceeded()
