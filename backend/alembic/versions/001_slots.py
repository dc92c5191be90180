"""Create slots: weekly templates and per-date exceptions in one table.

original_slot_id has no foreign key: exception rows outlive a hard-deleted template.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "slots",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("title", sa.Text(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_exception", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("exception_date", sa.Date(), nullable=True),
        sa.Column("original_slot_id", sa.Uuid(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_slots_day_of_week"),
        sa.CheckConstraint("start_time < end_time", name="ck_slots_time_range"),
    )
    op.create_index("ix_slots_day_of_week", "slots", ["day_of_week"], unique=False)
    op.create_index("ix_slots_exception_date", "slots", ["exception_date"], unique=False)
    op.create_index("ix_slots_original_slot_id", "slots", ["original_slot_id"], unique=False)
    op.create_index("ix_slots_is_exception_is_deleted", "slots", ["is_exception", "is_deleted"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_slots_is_exception_is_deleted", table_name="slots")
    op.drop_index("ix_slots_original_slot_id", table_name="slots")
    op.drop_index("ix_slots_exception_date", table_name="slots")
    op.drop_index("ix_slots_day_of_week", table_name="slots")
    op.drop_table("slots")
