"""Catalog activity. Windows and blocked dates are owned by it and go away with it."""
from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import new_id


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, default=new_id)
    operator_id = Column(String(36), ForeignKey("operators.id", ondelete="CASCADE"), nullable=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(8), nullable=False, default="DZD")
    city_id = Column(String(64), nullable=False)
    max_people = Column(Integer, nullable=False, default=10)
    status = Column(String(16), nullable=False, default="draft")  # draft | active | paused | archived
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    windows = relationship(
        "AvailabilityWindow",
        back_populates="activity",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    blocked_dates = relationship(
        "BlockedDate",
        back_populates="activity",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint("status IN ('draft', 'active', 'paused', 'archived')", name="ck_activities_status"),
    )
