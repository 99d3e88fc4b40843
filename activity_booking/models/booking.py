"""Booking ledger row: num_people seats in one activity / date / time slot.

activity_id is set for catalog activities; off-catalog (legacy) bookings keep their free-text id in
legacy_activity_id and are never capacity-checked. The calendar date of scheduled_at is the bookable date.
Rows are never deleted; cancelled and refused bookings simply stop counting against capacity.
"""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, Numeric, String, Text
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import new_id


class Booking(Base):
    __tablename__ = "bookings"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    activity_id = Column(String(36), ForeignKey("activities.id", ondelete="SET NULL"), nullable=True)
    operator_id = Column(String(36), ForeignKey("operators.id", ondelete="SET NULL"), nullable=True, index=True)
    legacy_activity_id = Column(String(255), nullable=True)
    city_id = Column(String(64), nullable=True)
    activity_title = Column(String(255), nullable=False)
    activity_image = Column(Text, nullable=True)
    scheduled_at = Column(DateTime, nullable=False)  # naive wall clock (UTC when the client sent an offset)
    time_slot = Column(String(5), nullable=True)  # "HH:MM", matches a window start label
    num_people = Column(Integer, nullable=False, default=1)
    price_per_person = Column(Numeric(12, 2), nullable=False)
    total_price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(8), nullable=False)
    status = Column(String(16), nullable=False, default="pending")
    payment_status = Column(String(16), nullable=False, default="pending")
    payment_method = Column(String(32), nullable=True)
    deposit_paid = Column(Numeric(12, 2), nullable=False, default=0)
    qr_code = Column(Text, nullable=True)
    customer_name = Column(String(255), nullable=True)
    customer_email = Column(String(255), nullable=True)
    customer_phone = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)
    operator_reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'completed', 'cancelled', 'refused')",
            name="ck_bookings_status",
        ),
        CheckConstraint(
            "payment_status IN ('pending', 'partial', 'paid', 'refunded')",
            name="ck_bookings_payment_status",
        ),
        CheckConstraint("num_people >= 1", name="ck_bookings_num_people"),
        # Capacity aggregation: activity + slot label, then a scheduled_at day range
        Index("ix_bookings_activity_slot_scheduled", "activity_id", "time_slot", "scheduled_at"),
    )
