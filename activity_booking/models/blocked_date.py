"""A date on which an activity accepts no bookings, whatever its windows say."""
from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import new_id


class BlockedDate(Base):
    __tablename__ = "blocked_dates"

    id = Column(String(36), primary_key=True, default=new_id)
    activity_id = Column(String(36), ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    blocked_date = Column(Date, nullable=False)
    reason = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    activity = relationship("Activity", back_populates="blocked_dates")

    __table_args__ = (UniqueConstraint("activity_id", "blocked_date", name="uq_blocked_dates_activity_date"),)
