"""
Audit sink: append-only record of mutations (actor, action, entity, JSON changes).

Never read back by the booking subsystem. Like notifications, failures are logged and swallowed.
"""
import json
import logging
from typing import Any

from activity_booking.db.session import SessionLocal
from activity_booking.models.audit_log import AuditLog

logger = logging.getLogger(__name__)


def _jsonable(changes: dict[str, Any]) -> dict[str, Any]:
    """Round-trip through json so dates, times and Decimals are stored as strings."""
    try:
        return json.loads(json.dumps(changes, default=str))
    except (TypeError, ValueError):
        return {"raw": str(changes)[:2000]}


def record_audit(
    actor_type: str,
    actor_id: str | None,
    action: str,
    entity_type: str,
    entity_id: str | None,
    changes: dict[str, Any] | None = None,
) -> bool:
    """Append one audit entry. Returns True if stored."""
    db = SessionLocal()
    try:
        db.add(
            AuditLog(
                actor_type=actor_type,
                actor_id=actor_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                changes=_jsonable(changes or {}),
            )
        )
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.warning("Audit %s %s/%s failed: %s", action, entity_type, entity_id, e, exc_info=True)
        return False
    finally:
        db.close()
