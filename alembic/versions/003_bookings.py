"""Bookings ledger

The composite index serves the capacity aggregation: activity + slot label, then a day range
on scheduled_at.

Revision ID: 003
Revises: 002
Create Date: (run alembic upgrade head)

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "bookings",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("activity_id", sa.String(36), sa.ForeignKey("activities.id", ondelete="SET NULL"), nullable=True),
        sa.Column("operator_id", sa.String(36), sa.ForeignKey("operators.id", ondelete="SET NULL"), nullable=True),
        sa.Column("legacy_activity_id", sa.String(255), nullable=True),
        sa.Column("city_id", sa.String(64), nullable=True),
        sa.Column("activity_title", sa.String(255), nullable=False),
        sa.Column("activity_image", sa.Text(), nullable=True),
        sa.Column("scheduled_at", sa.DateTime(), nullable=False),
        sa.Column("time_slot", sa.String(5), nullable=True),
        sa.Column("num_people", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("price_per_person", sa.Numeric(12, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("currency", sa.String(8), nullable=False),
        sa.Column("status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("payment_status", sa.String(16), nullable=False, server_default="pending"),
        sa.Column("payment_method", sa.String(32), nullable=True),
        sa.Column("deposit_paid", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("qr_code", sa.Text(), nullable=True),
        sa.Column("customer_name", sa.String(255), nullable=True),
        sa.Column("customer_email", sa.String(255), nullable=True),
        sa.Column("customer_phone", sa.String(64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("operator_reason", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'refused')",
            name="ck_bookings_status",
        ),
        sa.CheckConstraint(
            "payment_status IN ('pending', 'partial', 'paid', 'refunded')",
            name="ck_bookings_payment_status",
        ),
        sa.CheckConstraint("num_people >= 1", name="ck_bookings_num_people"),
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"], unique=False)
    op.create_index("ix_bookings_operator_id", "bookings", ["operator_id"], unique=False)
    op.create_index(
        "ix_bookings_activity_slot_scheduled",
        "bookings",
        ["activity_id", "time_slot", "scheduled_at"],
        unique=False,
    )


def downgrade() -> None:
    op.drop_index("ix_bookings_activity_slot_scheduled", table_name="bookings")
    op.drop_index("ix_bookings_operator_id", table_name="bookings")
    op.drop_index("ix_bookings_user_id", table_name="bookings")
    op.drop_table("bookings")
