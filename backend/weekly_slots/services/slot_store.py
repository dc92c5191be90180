"""
Slot store: row-level reads and writes on the slots table.

No commits here; callers own the transaction (see db.session.transaction).
"""
import uuid
from datetime import date
from typing import Any

from sqlalchemy import and_, func, or_, text
from sqlalchemy.orm import Session

from weekly_slots.core.constants import CAPACITY_LOCK_NAMESPACE
from weekly_slots.models.slot import Slot


def insert_slot(db: Session, **fields: Any) -> Slot:
    """Insert a row; id, created_at and updated_at are assigned by the store."""
    row = Slot(**fields)
    db.add(row)
    db.flush()
    db.refresh(row)
    return row


def get_slot(db: Session, slot_id: uuid.UUID, for_update: bool = False) -> Slot | None:
    q = db.query(Slot).filter(Slot.id == slot_id)
    if for_update:
        q = q.with_for_update().populate_existing()
    return q.first()


def find_week_rows(db: Session, start_date: date, end_date: date) -> list[Slot]:
    """
    Candidate rows for resolving [start_date, end_date]:
    every live template, plus every exception dated in the window (deleted ones too,
    since a cancelled occurrence must still hide its template).
    """
    return (
        db.query(Slot)
        .filter(
            or_(
                and_(Slot.is_exception.is_(False), Slot.is_deleted.is_(False)),
                and_(
                    Slot.is_exception.is_(True),
                    Slot.exception_date >= start_date,
                    Slot.exception_date <= end_date,
                ),
            )
        )
        .order_by(Slot.day_of_week, Slot.start_time)
        .all()
    )


def find_templates(db: Session, day_of_week: int | None = None) -> list[Slot]:
    """Live recurring templates, optionally for one weekday."""
    q = db.query(Slot).filter(Slot.is_exception.is_(False), Slot.is_deleted.is_(False))
    if day_of_week is not None:
        q = q.filter(Slot.day_of_week == day_of_week)
    return q.order_by(Slot.day_of_week, Slot.start_time).all()


def find_exception(
    db: Session, original_slot_id: uuid.UUID, exception_date: date, for_update: bool = False
) -> Slot | None:
    """Existing exception row for (original_slot_id, exception_date), deleted or not."""
    q = db.query(Slot).filter(
        Slot.is_exception.is_(True),
        Slot.original_slot_id == original_slot_id,
        Slot.exception_date == exception_date,
    )
    if for_update:
        q = q.with_for_update().populate_existing()
    return q.order_by(Slot.created_at).first()


def update_slot(db: Session, row: Slot, fields: dict[str, Any]) -> Slot:
    """Apply fields in place. updated_at is set even when no column value changes."""
    for key, value in fields.items():
        setattr(row, key, value)
    row.updated_at = func.now()
    db.flush()
    db.refresh(row)
    return row


def delete_slot(db: Session, row: Slot) -> None:
    db.delete(row)
    db.flush()


def lock_day(db: Session, day_of_week: int) -> None:
    """
    Serialize template creation for one weekday until the transaction ends, so two
    concurrent creates cannot both pass the capacity check. PostgreSQL only; other
    backends (SQLite) already serialize writers.
    """
    if db.get_bind().dialect.name != "postgresql":
        return
    db.execute(
        text("SELECT pg_advisory_xact_lock(:namespace, :day)"),
        {"namespace": CAPACITY_LOCK_NAMESPACE, "day": day_of_week},
    )
