"""
Slots: weekly recurring templates and date-specific exceptions share one table.

Template:  is_exception=False, exception_date NULL, original_slot_id NULL. Recurs every week on day_of_week.
Exception: is_exception=True, exception_date set, original_slot_id -> the row it overrides.
           is_deleted=True means that one occurrence is cancelled.
"""
import uuid

from sqlalchemy import Boolean, CheckConstraint, Column, Date, DateTime, Index, Integer, Text, Time, Uuid
from sqlalchemy.sql import func

from weekly_slots.db.base import Base


class Slot(Base):
    __tablename__ = "slots"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    day_of_week = Column(Integer, nullable=False, index=True)  # 0 = Sunday .. 6 = Saturday
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    title = Column(Text, nullable=True)
    description = Column(Text, nullable=True)
    is_exception = Column(Boolean, nullable=False, default=False)
    exception_date = Column(Date, nullable=True, index=True)
    # Non-owning back-reference (no FK): exceptions stay in storage if their template is hard-deleted
    original_slot_id = Column(Uuid, nullable=True, index=True)
    is_deleted = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_slots_day_of_week"),
        CheckConstraint("start_time < end_time", name="ck_slots_time_range"),
        Index("ix_slots_is_exception_is_deleted", "is_exception", "is_deleted"),
    )

    @property
    def root_id(self) -> uuid.UUID:
        """Id an exception forked from this row must point at."""
        return self.original_slot_id or self.id

    def __repr__(self) -> str:
        kind = f"exception {self.exception_date}" if self.is_exception else f"template dow={self.day_of_week}"
        return f"<Slot {self.id} {kind} {self.start_time}-{self.end_time}>"
