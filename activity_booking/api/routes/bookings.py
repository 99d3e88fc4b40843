"""
Bookings API: traveler bookings (list, create) and operator bookings (list, status updates).

POST /api/bookings answers 400 {"error", "code", "remaining"} when the slot cannot take the party,
so the app can offer a smaller party size or another slot.
"""
import logging
from datetime import datetime
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from activity_booking.api.deps import current_operator_id, current_user_id, optional_token
from activity_booking.core.constants import OPERATOR_BOOKINGS_DEFAULT_LIMIT, OPERATOR_BOOKINGS_MAX_LIMIT
from activity_booking.db.session import get_db
from activity_booking.services.booking_admission import BookingRequest, create_booking
from activity_booking.services.booking_ledger import booking_to_dict, list_operator_bookings, list_user_bookings
from activity_booking.services.booking_lifecycle import update_booking_status
from activity_booking.services.catalog import normalize_activity_id

router = APIRouter()
logger = logging.getLogger(__name__)


# --- Traveler ---


class CreateBookingRequest(BaseModel):
    activity_id: str = Field(..., description="Catalog UUID, or a free-text id for off-catalog activities")
    scheduled_at: datetime
    time_slot: str | None = Field(None, description="HH:MM, must match a window start to be capacity-checked")
    num_people: int = 1
    price: float | None = Field(None, description="Per person; defaults to the catalog price")
    currency: str | None = None
    city_id: str | None = None
    activity_title: str | None = None
    activity_image: str | None = None
    status: str | None = Field(None, description="pending or confirmed (default)")
    payment_method: str | None = None
    payment_status: str | None = None
    qr_code: str | None = None
    customer_name: str | None = None
    customer_email: str | None = None
    customer_phone: str | None = None
    is_guest: bool = False


@router.get("/bookings")
def my_bookings(
    db: Session = Depends(get_db),
    user_id: str = Depends(current_user_id),
) -> dict[str, Any]:
    """The signed-in traveler's bookings, latest scheduled first."""
    return {"bookings": [booking_to_dict(b) for b in list_user_bookings(db, user_id)]}


@router.post("/bookings")
def post_booking(
    body: CreateBookingRequest,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    token: str | None = Depends(optional_token),
) -> dict[str, Any]:
    """
    Create a booking. Needs a traveler bearer token, or is_guest=true without one.
    Catalog activities are checked against the slot's remaining capacity; off-catalog ids are not.
    """
    booking = create_booking(db, BookingRequest(**body.model_dump()), token=token, background=background)
    return {"booking": booking_to_dict(booking)}


# --- Operator ---


class UpdateStatusRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: str | None = None
    payment_status: str | None = Field(None, alias="paymentStatus")
    notes: str | None = None
    reason: str | None = Field(None, description="Shown to the traveler on refusal / cancellation")


@router.get("/operator/bookings")
def operator_bookings(
    db: Session = Depends(get_db),
    operator_id: str = Depends(current_operator_id),
    status: str | None = Query(None),
    from_date: datetime | None = Query(None),
    to_date: datetime | None = Query(None),
    activity_id: str | None = Query(None),
    limit: int = Query(OPERATOR_BOOKINGS_DEFAULT_LIMIT, ge=1, le=OPERATOR_BOOKINGS_MAX_LIMIT),
    offset: int = Query(0, ge=0),
) -> dict[str, Any]:
    """Bookings on the operator's activities, newest first, with optional filters."""
    rows, total = list_operator_bookings(
        db,
        operator_id,
        status=status,
        from_date=from_date,
        to_date=to_date,
        activity_id=normalize_activity_id(activity_id) if activity_id else None,
        limit=limit,
        offset=offset,
    )
    return {
        "bookings": [booking_to_dict(b) for b in rows],
        "total": total,
        "limit": limit,
        "offset": offset,
    }


@router.patch("/operator/bookings/{booking_id}/status")
def patch_booking_status(
    booking_id: str,
    body: UpdateStatusRequest,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    operator_id: str = Depends(current_operator_id),
) -> dict[str, Any]:
    """Confirm / refuse / cancel / complete a booking, and/or update payment status and notes."""
    booking = update_booking_status(
        db,
        booking_id,
        operator_id=operator_id,
        status=body.status,
        payment_status=body.payment_status,
        notes=body.notes,
        reason=body.reason,
        background=background,
    )
    return {"booking": booking_to_dict(booking)}
