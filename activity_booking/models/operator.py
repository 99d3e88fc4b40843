"""Activity operator (tour company, rental shop). Owns activities and receives booking notifications."""
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import new_id


class Operator(Base):
    __tablename__ = "operators"

    id = Column(String(36), primary_key=True, default=new_id)
    email = Column(String(255), nullable=False, unique=True)
    company_name = Column(String(255), nullable=False)
    contact_name = Column(String(255), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
