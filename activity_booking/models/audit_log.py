"""Append-only audit trail of mutations (who did what to which entity, with a JSON diff)."""
from sqlalchemy import Column, DateTime, Index, String
from sqlalchemy.sql import func

from activity_booking.db.base import Base
from activity_booking.models._ids import JSONType, new_id


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id = Column(String(36), primary_key=True, default=new_id)
    actor_type = Column(String(16), nullable=False)  # operator | user | guest
    actor_id = Column(String(36), nullable=True)
    action = Column(String(32), nullable=False)  # create | update | replace | delete
    entity_type = Column(String(32), nullable=False)
    entity_id = Column(String(255), nullable=True)
    changes = Column(JSONType, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (Index("ix_audit_logs_entity", "entity_type", "entity_id"),)
