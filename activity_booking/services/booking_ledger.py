"""
Booking ledger: the source of truth for seats already taken, plus traveler / operator listings.

Seats are always recomputed by aggregation (no denormalized counter): bookings with the same
activity, calendar date and slot label, excluding cancelled and refused ones.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from activity_booking.core.constants import RELEASED_STATUSES
from activity_booking.core.time_utils import day_bounds, naive_utc
from activity_booking.models.booking import Booking


def booked_seats(db: Session, activity_id: str, day: date, slot: str) -> int:
    """Sum of num_people holding seats in (activity, day, slot)."""
    start, end = day_bounds(day)
    total = (
        db.query(func.coalesce(func.sum(Booking.num_people), 0))
        .filter(
            Booking.activity_id == activity_id,
            Booking.time_slot == slot,
            Booking.scheduled_at >= start,
            Booking.scheduled_at < end,
            Booking.status.notin_(RELEASED_STATUSES),
        )
        .scalar()
    )
    return int(total or 0)


def get_booking(db: Session, booking_id: str) -> Booking | None:
    return db.query(Booking).filter(Booking.id == booking_id).first()


def list_user_bookings(db: Session, user_id: str) -> list[Booking]:
    """A traveler's bookings, latest scheduled first."""
    return (
        db.query(Booking)
        .filter(Booking.user_id == user_id)
        .order_by(Booking.scheduled_at.desc())
        .all()
    )


def list_operator_bookings(
    db: Session,
    operator_id: str,
    *,
    status: str | None = None,
    from_date: datetime | None = None,
    to_date: datetime | None = None,
    activity_id: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Booking], int]:
    """Operator's bookings, newest first. Returns (page, total matching the filters)."""
    q = db.query(Booking).filter(Booking.operator_id == operator_id)
    if status:
        q = q.filter(Booking.status == status)
    if from_date:
        q = q.filter(Booking.scheduled_at >= naive_utc(from_date))
    if to_date:
        q = q.filter(Booking.scheduled_at <= naive_utc(to_date))
    if activity_id:
        q = q.filter(Booking.activity_id == activity_id)
    total = q.count()
    rows = q.order_by(Booking.created_at.desc(), Booking.id).limit(limit).offset(offset).all()
    return rows, total


def _money(value: Decimal | float | None) -> float:
    return float(value) if value is not None else 0.0


def _iso(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def booking_to_dict(b: Booking) -> dict[str, Any]:
    """API shape for a booking (camelCase, like the rest of the booking endpoints)."""
    return {
        "id": b.id,
        "userId": b.user_id,
        "activityId": b.activity_id,
        "legacyActivityId": b.legacy_activity_id,
        "operatorId": b.operator_id,
        "cityId": b.city_id,
        "activityTitle": b.activity_title,
        "activityImage": b.activity_image,
        "scheduledAt": _iso(b.scheduled_at),
        "timeSlot": b.time_slot,
        "numPeople": b.num_people,
        "pricePerPerson": _money(b.price_per_person),
        "totalPrice": _money(b.total_price),
        "currency": b.currency,
        "status": b.status,
        "paymentStatus": b.payment_status,
        "paymentMethod": b.payment_method,
        "depositPaid": _money(b.deposit_paid),
        "qrCode": b.qr_code,
        "customerName": b.customer_name,
        "customerEmail": b.customer_email,
        "customerPhone": b.customer_phone,
        "notes": b.notes,
        "operatorReason": b.operator_reason,
        "createdAt": _iso(b.created_at),
        "updatedAt": _iso(b.updated_at),
    }
