"""
Booking lifecycle: operator-side status transitions.

    pending | confirmed  ->  confirmed | refused | cancelled | completed
    completed, cancelled, refused are terminal.

payment_status and notes are independent of the state machine and may change at any time.
Capacity is not re-checked here; cancelling or refusing simply stops the booking counting.
"""
import logging
from typing import Any

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from activity_booking.core.constants import (
    BOOKING_STATUSES,
    INITIAL_STATUSES,
    PAYMENT_STATUSES,
    STATUS_NOTIFICATIONS,
    STATUS_PENDING,
    TERMINAL_STATUSES,
)
from activity_booking.core.errors import NotFound, StorageError, ValidationError
from activity_booking.models.booking import Booking
from activity_booking.services.audit import record_audit
from activity_booking.services.booking_ledger import get_booking
from activity_booking.services.notifications import RECIPIENT_USER, create_notification
from activity_booking.services.side_effects import dispatch

logger = logging.getLogger(__name__)


def can_transition(current: str, target: str) -> bool:
    if target == STATUS_PENDING or target not in BOOKING_STATUSES:
        return False
    return current in INITIAL_STATUSES


def status_notification(status: str, title: str, reason: str | None = None) -> tuple[str, str] | None:
    """(title, message) shown to the traveler for a new status, or None if that status is silent."""
    template = STATUS_NOTIFICATIONS.get(status)
    if template is None:
        return None
    heading, body = template
    reason_suffix = f" Reason: {reason}" if reason else ""
    return heading, body.format(title=title, reason_suffix=reason_suffix)


def update_booking_status(
    db: Session,
    booking_id: str,
    *,
    operator_id: str,
    status: str | None = None,
    payment_status: str | None = None,
    notes: str | None = None,
    reason: str | None = None,
    background: BackgroundTasks | None = None,
) -> Booking:
    """
    Apply an operator update. Raises NotFound (unknown booking or another operator's booking)
    and ValidationError (empty update, unknown status, transition out of a terminal state).
    """
    if status is None and payment_status is None and notes is None and reason is None:
        raise ValidationError("No update provided")
    if status is not None and status not in BOOKING_STATUSES:
        raise ValidationError(f"Invalid status {status!r}")
    if payment_status is not None and payment_status not in PAYMENT_STATUSES:
        raise ValidationError(f"Invalid payment status {payment_status!r}")

    booking = get_booking(db, booking_id)
    # Legacy bookings have no operator and stay manageable by any operator
    if booking is None or (booking.operator_id and booking.operator_id != operator_id):
        raise NotFound("Booking not found")

    previous = booking.status
    if status is not None and not can_transition(previous, status):
        if previous in TERMINAL_STATUSES:
            raise ValidationError(f"Booking is already {previous}")
        raise ValidationError(f"Cannot move a {previous} booking to {status}")

    if status is not None:
        booking.status = status
    if payment_status is not None:
        booking.payment_status = payment_status
    if notes is not None:
        booking.notes = notes
    if reason is not None:
        booking.operator_reason = reason
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"update booking {booking_id}: {e}") from e
    db.refresh(booking)
    logger.info("Booking %s updated by operator %s: %s -> %s", booking.id, operator_id, previous, booking.status)

    changes: dict[str, Any] = {
        "status": status,
        "previousStatus": previous,
        "paymentStatus": payment_status,
        "notes": notes,
        "reason": reason,
    }
    dispatch(background, record_audit, "operator", operator_id, "update", "booking", booking.id, changes)

    if booking.user_id and status is not None:
        message = status_notification(status, booking.activity_title, reason)
        if message is not None:
            dispatch(
                background,
                create_notification,
                RECIPIENT_USER,
                booking.user_id,
                f"booking_{status}",
                message[0],
                message[1],
                {"bookingId": booking.id, "status": status, "activityTitle": booking.activity_title},
            )
    return booking
