"""
Notification sink: append in-app notifications for operators and travelers.

Best-effort by contract: runs on its own session (usually as a background task after the response)
and never raises. A failed insert is logged and dropped.
"""
import logging
from typing import Any

from activity_booking.db.session import SessionLocal
from activity_booking.models.notification import Notification

logger = logging.getLogger(__name__)

RECIPIENT_OPERATOR = "operator"
RECIPIENT_USER = "user"


def create_notification(
    recipient_type: str,
    recipient_id: str,
    notification_type: str,
    title: str,
    message: str,
    data: dict[str, Any] | None = None,
) -> bool:
    """Insert one notification row. Returns True if stored, False if the insert failed."""
    db = SessionLocal()
    try:
        db.add(
            Notification(
                recipient_type=recipient_type,
                recipient_id=recipient_id,
                type=notification_type,
                title=title,
                message=message,
                data=data or {},
            )
        )
        db.commit()
        return True
    except Exception as e:
        db.rollback()
        logger.warning("Notification %s to %s %s failed: %s", notification_type, recipient_type, recipient_id, e, exc_info=True)
        return False
    finally:
        db.close()
