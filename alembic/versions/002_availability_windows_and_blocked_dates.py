"""Weekly availability windows and blocked dates per activity (cascade with the activity)

Revision ID: 002
Revises: 001
Create Date: (run alembic upgrade head)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "002"
down_revision: Union[str, None] = "001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "availability_windows",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("activity_id", sa.String(36), sa.ForeignKey("activities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_of_week", sa.Integer(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False, server_default="10"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_availability_windows_day_of_week"),
        sa.CheckConstraint("capacity > 0", name="ck_availability_windows_capacity"),
        sa.CheckConstraint("end_time >= start_time", name="ck_availability_windows_time_order"),
    )
    op.create_index(
        "ix_availability_windows_activity_day",
        "availability_windows",
        ["activity_id", "day_of_week"],
        unique=False,
    )
    op.create_table(
        "blocked_dates",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("activity_id", sa.String(36), sa.ForeignKey("activities.id", ondelete="CASCADE"), nullable=False),
        sa.Column("blocked_date", sa.Date(), nullable=False),
        sa.Column("reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("activity_id", "blocked_date", name="uq_blocked_dates_activity_date"),
    )


def downgrade() -> None:
    op.drop_table("blocked_dates")
    op.drop_index("ix_availability_windows_activity_day", table_name="availability_windows")
    op.drop_table("availability_windows")
