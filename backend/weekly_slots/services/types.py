"""
Typed views of a slot row. One table stores both roles; the API returns one of two shapes.

TemplateSlot:  weekly recurring, no date, no back-reference.
ExceptionSlot: one date's override of a template (is_deleted=True when cancelled).
"""
import uuid
from datetime import date, datetime, time
from typing import Literal

from pydantic import BaseModel, ConfigDict

from weekly_slots.models.slot import Slot


class _SlotView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    day_of_week: int
    start_time: time
    end_time: time
    title: str | None = None
    description: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TemplateSlot(_SlotView):
    is_exception: Literal[False] = False
    exception_date: None = None
    original_slot_id: None = None
    is_deleted: bool = False


class ExceptionSlot(_SlotView):
    is_exception: Literal[True] = True
    exception_date: date
    original_slot_id: uuid.UUID | None = None
    is_deleted: bool = False


def to_slot_view(row: Slot) -> TemplateSlot | ExceptionSlot:
    if row.is_exception:
        return ExceptionSlot.model_validate(row)
    return TemplateSlot.model_validate(row)


def slot_to_dict(row: Slot) -> dict:
    """JSON-ready dict (times as HH:MM:SS, dates as YYYY-MM-DD)."""
    return to_slot_view(row).model_dump(mode="json")


def week_slots_response(resolved: dict[date, list[Slot]]) -> dict[str, list[dict]]:
    """WeekSlotsResponse: {"YYYY-MM-DD": [slot, ...]} for every date of the week, empty or not."""
    return {d.isoformat(): [slot_to_dict(r) for r in rows] for d, rows in resolved.items()}
