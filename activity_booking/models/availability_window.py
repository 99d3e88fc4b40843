"""Recurring weekly window: bookable from start_time on day_of_week (ISO, Monday=1) for up to `capacity` people.

Capacity is tracked per exact start-time label; overlapping windows on the same day are allowed.
"""
from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index, Integer, String, Time
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import new_id


class AvailabilityWindow(Base):
    __tablename__ = "availability_windows"

    id = Column(String(36), primary_key=True, default=new_id)
    activity_id = Column(String(36), ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    day_of_week = Column(Integer, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    capacity = Column(Integer, nullable=False, default=10)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    activity = relationship("Activity", back_populates="windows")

    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 1 AND 7", name="ck_availability_windows_day_of_week"),
        CheckConstraint("capacity > 0", name="ck_availability_windows_capacity"),
        CheckConstraint("end_time >= start_time", name="ck_availability_windows_time_order"),
        Index("ix_availability_windows_activity_day", "activity_id", "day_of_week"),
    )
