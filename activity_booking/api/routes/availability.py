"""
Availability API: bookable weekdays, slots for a date, and the operator's weekly schedule.

All routes are mounted under /api, e.g. /api/activities/{activity_id}/slots?date=2026-05-04.
"""
import logging
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy.orm import Session

from activity_booking.api.deps import current_operator_id
from activity_booking.core.time_utils import parse_date
from activity_booking.db.session import get_db
from activity_booking.services.availability_service import (
    WindowInput,
    block_date,
    list_available_days,
    list_slots_for_date,
    list_weekly_windows,
    replace_windows,
    unblock_date,
)
from activity_booking.services.catalog import normalize_activity_id

router = APIRouter()
logger = logging.getLogger(__name__)


# --- Traveler reads ---


@router.get("/activities/{activity_id}/available-days")
def available_days(activity_id: str, db: Session = Depends(get_db)) -> dict[str, Any]:
    """Weekdays (1=Monday .. 7=Sunday) with at least one active window, plus upcoming blocked dates."""
    return list_available_days(db, normalize_activity_id(activity_id))


@router.get("/activities/{activity_id}/slots")
def activity_slots(
    activity_id: str,
    date: str | None = Query(None, description="YYYY-MM-DD; omit for the weekly schedule"),
    db: Session = Depends(get_db),
) -> dict[str, Any]:
    """
    With ?date=: slots for that date with booked / remaining seats, or blocked=true.
    Without: the recurring weekly windows.
    """
    activity_id = normalize_activity_id(activity_id)
    if date:
        return list_slots_for_date(db, activity_id, parse_date(date))
    return {"slots": list_weekly_windows(db, activity_id)}


# --- Operator writes ---


class WindowBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    day_of_week: int = Field(..., alias="dayOfWeek", description="1=Monday .. 7=Sunday")
    start_time: str = Field(..., alias="startTime", description="HH:MM")
    end_time: str | None = Field(None, alias="endTime", description="HH:MM; defaults to startTime")
    capacity: int | None = Field(None, description="Seats per date; defaults to 10")
    is_active: bool | None = Field(None, alias="isActive")


class ReplaceSlotsRequest(BaseModel):
    slots: list[WindowBody]


class BlockedDateRequest(BaseModel):
    date: str = Field(..., description="YYYY-MM-DD")
    reason: str | None = None


@router.put("/activities/{activity_id}/slots")
def put_activity_slots(
    activity_id: str,
    body: ReplaceSlotsRequest,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    operator_id: str = Depends(current_operator_id),
) -> dict[str, Any]:
    """Replace the whole weekly schedule. Windows missing from the body are deleted."""
    windows = [
        WindowInput(
            day_of_week=w.day_of_week,
            start_time=w.start_time,
            end_time=w.end_time,
            capacity=w.capacity,
            is_active=w.is_active,
        )
        for w in body.slots
    ]
    slots = replace_windows(
        db,
        normalize_activity_id(activity_id),
        windows,
        operator_id=operator_id,
        background=background,
    )
    return {"slots": slots}


@router.post("/activities/{activity_id}/blocked-dates")
def post_blocked_date(
    activity_id: str,
    body: BlockedDateRequest,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    operator_id: str = Depends(current_operator_id),
) -> dict[str, Any]:
    """Block a date (idempotent). created=false means it was already blocked."""
    day = parse_date(body.date)
    created = block_date(
        db,
        normalize_activity_id(activity_id),
        day,
        (body.reason or "").strip() or None,
        operator_id=operator_id,
        background=background,
    )
    return {"ok": True, "date": day.isoformat(), "created": created}


@router.delete("/activities/{activity_id}/blocked-dates")
def delete_blocked_date(
    activity_id: str,
    body: BlockedDateRequest,
    background: BackgroundTasks,
    db: Session = Depends(get_db),
    operator_id: str = Depends(current_operator_id),
) -> dict[str, Any]:
    """Unblock a date. removed=false means it was not blocked."""
    day = parse_date(body.date)
    removed = unblock_date(
        db,
        normalize_activity_id(activity_id),
        day,
        operator_id=operator_id,
        background=background,
    )
    return {"ok": True, "date": day.isoformat(), "removed": removed}
