"""
Slots API: weekly templates, week view, single-occurrence edit and cancel.

Week view keys are YYYY-MM-DD; every date of the requested week is present.
A weekStart that is not a Sunday is normalized to the Sunday on or before it.
"""
import logging
import uuid
from datetime import date, time
from typing import Any, NoReturn

from fastapi import APIRouter, Depends, Query, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session

from weekly_slots.core.errors import SlotError, ValidationError, slot_error_to_http
from weekly_slots.db.session import get_db
from weekly_slots.services import slot_service
from weekly_slots.services.resolution import start_of_week
from weekly_slots.services.types import slot_to_dict, week_slots_response

router = APIRouter()
logger = logging.getLogger(__name__)


class SlotCreate(BaseModel):
    day_of_week: int
    start_time: time
    end_time: time
    title: str | None = None
    description: str | None = None


class SlotUpdate(BaseModel):
    exception_date: date | None = None
    start_time: time | None = None
    end_time: time | None = None
    title: str | None = None
    description: str | None = None


def _handle_slot_error(exc: SlotError, log_message: str) -> NoReturn:
    logger.info("%s: %s", log_message, exc.message)
    raise slot_error_to_http(exc) from exc


@router.post("/slots", status_code=201)
def create_slot(body: SlotCreate, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Create a weekly recurring slot. Rejected when that weekday already has 2 slots this week."""
    try:
        row = slot_service.create_slot(
            db,
            day_of_week=body.day_of_week,
            start_time=body.start_time,
            end_time=body.end_time,
            title=body.title,
            description=body.description,
        )
    except SlotError as e:
        _handle_slot_error(e, "Create slot rejected")
    return slot_to_dict(row)


@router.get("/slots/week")
def get_week_slots(
    week_start: str | None = Query(None, alias="weekStart"),
    db: Session = Depends(get_db),
) -> dict[str, list[dict]]:
    """Resolved slots for the 7 days of the week containing weekStart (Sunday start)."""
    try:
        if not week_start:
            raise ValidationError("weekStart", "weekStart parameter is required")
        try:
            day = date.fromisoformat(week_start)
        except ValueError:
            raise ValidationError("weekStart", f"Invalid date {week_start}. Use YYYY-MM-DD.") from None
        resolved = slot_service.get_week_slots(db, start_of_week(day))
    except SlotError as e:
        _handle_slot_error(e, "Week view failed")
    return week_slots_response(resolved)


@router.get("/slots")
def list_templates(
    day_of_week: int | None = Query(None),
    db: Session = Depends(get_db),
) -> list[dict]:
    """Recurring templates (optionally one weekday), ordered by start time."""
    try:
        rows = slot_service.list_templates(db, day_of_week)
    except SlotError as e:
        _handle_slot_error(e, "List templates failed")
    return [slot_to_dict(r) for r in rows]


@router.get("/slots/{slot_id}")
def get_slot(slot_id: uuid.UUID, db: Session = Depends(get_db)) -> dict[str, Any]:
    try:
        row = slot_service.get_slot(db, slot_id)
    except SlotError as e:
        _handle_slot_error(e, "Get slot failed")
    return slot_to_dict(row)


@router.put("/slots/{slot_id}")
def update_slot(slot_id: uuid.UUID, body: SlotUpdate, db: Session = Depends(get_db)) -> dict[str, Any]:
    """
    Edit one occurrence (exception_date required).
    Editing a recurring slot creates an exception for that date; the other weeks keep the original.
    Only fields sent in the body change; send null to clear title or description.
    """
    fields = body.model_dump(exclude_unset=True)
    exception_date = fields.pop("exception_date", None)
    try:
        row = slot_service.edit_occurrence(db, slot_id, exception_date, fields)
    except SlotError as e:
        _handle_slot_error(e, "Update slot rejected")
    return slot_to_dict(row)


@router.delete("/slots/{slot_id}", status_code=204)
def delete_slot(
    slot_id: uuid.UUID,
    exception_date: date | None = Query(None),
    db: Session = Depends(get_db),
) -> Response:
    """
    Cancel one occurrence (exception_date given) or delete an exception.
    Without exception_date a recurring slot is removed for every week.
    """
    try:
        slot_service.cancel_occurrence(db, slot_id, exception_date)
    except SlotError as e:
        _handle_slot_error(e, "Delete slot rejected")
    return Response(status_code=204)
