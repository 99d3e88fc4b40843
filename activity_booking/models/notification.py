"""In-app notification for an operator or a traveler.

recipient_type: 'operator' | 'user'. type: 'new_booking', 'booking_confirmed', ... for filtering in the apps.
data: JSON payload (bookingId, status, activityTitle). Written best-effort; the apps read and mark them.
"""
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, String, Text
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import JSONType, new_id


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(String(36), primary_key=True, default=new_id)
    recipient_type = Column(String(16), nullable=False)
    recipient_id = Column(String(36), nullable=False)
    type = Column(String(32), nullable=False)
    title = Column(String(255), nullable=False)
    message = Column(Text, nullable=False)
    data = Column(JSONType, nullable=False, default=dict)
    is_read = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        CheckConstraint("recipient_type IN ('operator', 'user')", name="ck_notifications_recipient_type"),
        Index("ix_notifications_recipient", "recipient_type", "recipient_id", "is_read"),
    )
