"""Bearer-token sessions issued by the login flow (external). Read-only here: token -> user / operator."""
from sqlalchemy import Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import new_id


class UserSession(Base):
    __tablename__ = "sessions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(128), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class OperatorSession(Base):
    __tablename__ = "operator_sessions"

    id = Column(String(36), primary_key=True, default=new_id)
    operator_id = Column(String(36), ForeignKey("operators.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(128), nullable=False, unique=True)
    expires_at = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
