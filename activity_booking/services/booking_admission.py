"""
Booking admission: validate a request against remaining slot capacity, then insert the booking.

The capacity read and the insert share one transaction (the session's), but nothing locks the
slot: two admissions racing for the last seats can both pass the check. Off-catalog (legacy)
activities are never capacity-checked.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from fastapi import BackgroundTasks
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from activity_booking.core.constants import (
    DEFAULT_BOOKING_STATUS,
    DEFAULT_CURRENCY,
    INITIAL_STATUSES,
    MAX_AMOUNT,
    NOTIFY_NEW_BOOKING,
    PAYMENT_STATUSES,
    PREPAID_PAYMENT_METHODS,
)
from activity_booking.core.errors import DateBlocked, StorageError, ValidationError, capacity_error
from activity_booking.core.time_utils import naive_utc, normalize_slot_label
from activity_booking.models.activity import Activity
from activity_booking.models.booking import Booking
from activity_booking.services import schedule_store
from activity_booking.services.audit import record_audit
from activity_booking.services.availability_service import find_window_for_slot
from activity_booking.services.booking_ledger import booked_seats
from activity_booking.services.catalog import CatalogRef, parse_activity_ref, require_activity
from activity_booking.services.identity import resolve_booking_identity
from activity_booking.services.notifications import RECIPIENT_OPERATOR, create_notification
from activity_booking.services.side_effects import dispatch

logger = logging.getLogger(__name__)


@dataclass
class BookingRequest:
    activity_id: str
    scheduled_at: datetime
    time_slot: str | None = None
    num_people: int = 1
    price: Decimal | float | None = None  # per person
    currency: str | None = None
    city_id: str | None = None
    activity_title: str | None = None
    activity_image: str | None = None
    status: str | None = None
    payment_method: str | None = None
    payment_status: str | None = None
    qr_code: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    is_guest: bool = False


def _initial_status(status: str | None) -> str:
    if not status:
        return DEFAULT_BOOKING_STATUS
    if status not in INITIAL_STATUSES:
        raise ValidationError(f"A new booking can only be {' or '.join(INITIAL_STATUSES)}")
    return status


def _payment_status(payment_status: str | None, payment_method: str | None) -> str:
    if payment_status:
        if payment_status not in PAYMENT_STATUSES:
            raise ValidationError(f"Invalid payment status {payment_status!r}")
        return payment_status
    if (payment_method or "").strip().lower() in PREPAID_PAYMENT_METHODS:
        return "paid"
    return "pending"


def _price(value: Decimal | float | None, activity: Activity | None) -> Decimal:
    if value is None:
        if activity is None:
            raise ValidationError("price is required")
        return Decimal(activity.price)
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise ValidationError(f"Invalid price {value!r}") from None
    if not price.is_finite():
        raise ValidationError(f"Invalid price {value!r}")
    if price < 0:
        raise ValidationError("price must not be negative")
    if price > MAX_AMOUNT:
        raise ValidationError(f"price must not exceed {MAX_AMOUNT}")
    return price.quantize(Decimal("0.01"))


def _total(price: Decimal, num_people: int) -> Decimal:
    total = price * num_people
    if total > MAX_AMOUNT:
        raise ValidationError(f"Total price must not exceed {MAX_AMOUNT}")
    return total


def check_capacity(db: Session, activity_id: str, day: date, slot: str | None, num_people: int) -> int | None:
    """
    Raise if the catalog activity cannot take `num_people` more on (day, slot).
    Returns remaining seats before this booking, or None when the slot is not capacity-managed
    (no slot given, or no active window starts at that label on that weekday).
    """
    if schedule_store.is_blocked(db, activity_id, day):
        raise DateBlocked()
    if slot is None:
        return None
    window = find_window_for_slot(db, activity_id, day, slot)
    if window is None:
        logger.debug("No window for activity %s on %s at %s; admitting without capacity check", activity_id, day, slot)
        return None
    remaining = window.capacity - booked_seats(db, activity_id, day, slot)
    if num_people > remaining:
        raise capacity_error(remaining)
    return remaining


def _new_booking_message(booking: Booking) -> str:
    who = booking.customer_name or "A customer"
    when = booking.scheduled_at.date().isoformat()
    at = f" at {booking.time_slot}" if booking.time_slot else ""
    return f'{who} booked "{booking.activity_title}" for {when}{at} ({booking.num_people} people)'


def create_booking(
    db: Session,
    request: BookingRequest,
    *,
    token: str | None = None,
    background: BackgroundTasks | None = None,
) -> Booking:
    """
    Admit a booking. Raises Unauthenticated, NotFound, ValidationError / DateBlocked,
    SlotFull / InsufficientCapacity (with `remaining`), or StorageError. Nothing is written on error.
    """
    user_id = resolve_booking_identity(db, token, request.is_guest)
    ref = parse_activity_ref(request.activity_id)
    if request.num_people is None or request.num_people < 1:
        raise ValidationError("num_people must be at least 1")
    slot = normalize_slot_label(request.time_slot)
    scheduled_at = naive_utc(request.scheduled_at)
    status = _initial_status(request.status)
    payment_status = _payment_status(request.payment_status, request.payment_method)

    activity: Activity | None = None
    if isinstance(ref, CatalogRef):
        activity = require_activity(db, ref.activity_id)
        check_capacity(db, activity.id, scheduled_at.date(), slot, request.num_people)

    title = (request.activity_title or "").strip() or (activity.title if activity else "")
    if not title:
        raise ValidationError("activity_title is required for off-catalog activities")
    price = _price(request.price, activity)
    total_price = _total(price, request.num_people)

    booking = Booking(
        user_id=user_id,
        activity_id=activity.id if activity else None,
        operator_id=activity.operator_id if activity else None,
        legacy_activity_id=None if activity else ref.legacy_id,
        city_id=request.city_id or (activity.city_id if activity else None),
        activity_title=title,
        activity_image=request.activity_image,
        scheduled_at=scheduled_at,
        time_slot=slot,
        num_people=request.num_people,
        price_per_person=price,
        total_price=total_price,
        currency=request.currency or (activity.currency if activity else DEFAULT_CURRENCY),
        status=status,
        payment_status=payment_status,
        payment_method=request.payment_method,
        qr_code=request.qr_code,
        customer_name=request.customer_name,
        customer_email=request.customer_email,
        customer_phone=request.customer_phone,
    )
    db.add(booking)
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"insert booking: {e}") from e
    db.refresh(booking)
    logger.info(
        "Booking %s admitted: activity=%s on %s at %s, %s people",
        booking.id,
        booking.activity_id or f"legacy:{booking.legacy_activity_id}",
        scheduled_at.date(),
        slot,
        booking.num_people,
    )

    if booking.operator_id:
        dispatch(
            background,
            create_notification,
            RECIPIENT_OPERATOR,
            booking.operator_id,
            NOTIFY_NEW_BOOKING,
            "New booking",
            _new_booking_message(booking),
            {"bookingId": booking.id, "activityTitle": booking.activity_title},
        )
    dispatch(
        background,
        record_audit,
        "user" if user_id else "guest",
        user_id,
        "create",
        "booking",
        booking.id,
        {
            "activityId": booking.activity_id,
            "legacyActivityId": booking.legacy_activity_id,
            "scheduledAt": booking.scheduled_at,
            "timeSlot": booking.time_slot,
            "numPeople": booking.num_people,
            "status": booking.status,
        },
    )
    return booking
