"""
Availability resolver: weekly windows + blocked dates + the booking ledger -> live slots.

Everything here is a read-only projection recomputed per call, except the operator-side
replace/block operations which write through the schedule store.
"""
import logging
from dataclasses import dataclass
from datetime import date, time
from typing import Any

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from activity_booking.core.constants import DEFAULT_WINDOW_CAPACITY, ISO_WEEKDAYS
from activity_booking.core.errors import ValidationError
from activity_booking.core.time_utils import iso_weekday, parse_time, slot_label
from activity_booking.models.availability_window import AvailabilityWindow
from activity_booking.services import schedule_store
from activity_booking.services.audit import record_audit
from activity_booking.services.booking_ledger import booked_seats
from activity_booking.services.catalog import require_operator_activity
from activity_booking.services.side_effects import dispatch

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SlotView:
    """One window projected onto a date."""

    id: str
    start_time: str
    end_time: str
    capacity: int
    booked: int
    remaining: int
    is_full: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "startTime": self.start_time,
            "endTime": self.end_time,
            "capacity": self.capacity,
            "booked": self.booked,
            "remaining": self.remaining,
            "isFull": self.is_full,
        }


@dataclass
class WindowInput:
    """Window as sent by the operator; missing fields get defaults in replace_windows."""

    day_of_week: int
    start_time: str | time
    end_time: str | time | None = None
    capacity: int | None = None
    is_active: bool | None = None


def window_to_dict(w: AvailabilityWindow) -> dict[str, Any]:
    return {
        "id": w.id,
        "dayOfWeek": w.day_of_week,
        "startTime": slot_label(w.start_time),
        "endTime": slot_label(w.end_time),
        "capacity": w.capacity,
        "isActive": w.is_active,
    }


def project_slot(db: Session, activity_id: str, day: date, window: AvailabilityWindow) -> SlotView:
    label = slot_label(window.start_time)
    booked = booked_seats(db, activity_id, day, label)
    remaining = window.capacity - booked
    return SlotView(
        id=window.id,
        start_time=label,
        end_time=slot_label(window.end_time),
        capacity=window.capacity,
        booked=booked,
        remaining=max(0, remaining),
        is_full=remaining <= 0,
    )


# --- Reads ---


def list_available_days(db: Session, activity_id: str, today: date | None = None) -> dict[str, list]:
    """Weekdays with at least one active window, and blocked dates from today on. Unknown activity: empty."""
    today = today or date.today()
    return {
        "availableDays": schedule_store.list_available_weekdays(db, activity_id),
        "blockedDates": [b.blocked_date.isoformat() for b in schedule_store.list_blocked_dates(db, activity_id, since=today)],
    }


def list_slots_for_date(db: Session, activity_id: str, day: date) -> dict[str, Any]:
    """
    Slots for one date with live remaining capacity.
    A blocked date returns {"slots": [], "blocked": True} whatever the windows say.
    """
    if schedule_store.is_blocked(db, activity_id, day):
        return {"slots": [], "blocked": True}
    windows = schedule_store.list_active_windows(db, activity_id, day_of_week=iso_weekday(day))
    slots = [project_slot(db, activity_id, day, w).to_dict() for w in windows]
    return {"slots": slots, "blocked": False}


def list_weekly_windows(db: Session, activity_id: str) -> list[dict[str, Any]]:
    """The recurring schedule (active windows only), for the weekly view."""
    return [window_to_dict(w) for w in schedule_store.list_active_windows(db, activity_id)]


def find_window_for_slot(db: Session, activity_id: str, day: date, slot: str) -> AvailabilityWindow | None:
    """
    Active window starting at `slot` on the date's weekday. When overlapping windows share the
    label, the smallest capacity wins. None means the slot is not capacity-managed.
    """
    matches = [
        w
        for w in schedule_store.list_active_windows(db, activity_id, day_of_week=iso_weekday(day))
        if slot_label(w.start_time) == slot
    ]
    if not matches:
        return None
    return min(matches, key=lambda w: w.capacity)


# --- Operator writes ---


def _resolve_window(raw: WindowInput, index: int) -> schedule_store.WindowRow:
    if raw.day_of_week not in ISO_WEEKDAYS:
        raise ValidationError(f"slots[{index}].dayOfWeek must be 1 (Monday) to 7 (Sunday)")
    start = parse_time(raw.start_time, f"slots[{index}].startTime")
    end = parse_time(raw.end_time, f"slots[{index}].endTime") if raw.end_time else start
    if end < start:
        raise ValidationError(f"slots[{index}].endTime must not be before startTime")
    capacity = DEFAULT_WINDOW_CAPACITY if raw.capacity is None else raw.capacity
    if capacity < 1:
        raise ValidationError(f"slots[{index}].capacity must be at least 1")
    return schedule_store.WindowRow(
        day_of_week=raw.day_of_week,
        start_time=start,
        end_time=end,
        capacity=capacity,
        is_active=raw.is_active is not False,
    )


def replace_windows(
    db: Session,
    activity_id: str,
    windows: list[WindowInput],
    *,
    operator_id: str,
    background: BackgroundTasks | None = None,
) -> list[dict[str, Any]]:
    """
    Full replace of the activity's weekly schedule: anything not in `windows` is gone.
    Existing bookings on removed windows stay valid but are no longer capacity-checked.
    Returns the new list (active and inactive).
    """
    activity = require_operator_activity(db, activity_id, operator_id)
    rows = [_resolve_window(w, i) for i, w in enumerate(windows)]
    saved = [window_to_dict(w) for w in schedule_store.replace_windows(db, activity.id, rows)]
    dispatch(
        background,
        record_audit,
        "operator",
        operator_id,
        "replace",
        "availability_windows",
        activity.id,
        {"slots": saved},
    )
    return saved


def block_date(
    db: Session,
    activity_id: str,
    day: date,
    reason: str | None = None,
    *,
    operator_id: str,
    background: BackgroundTasks | None = None,
) -> bool:
    """Block a date for bookings. Returns False if it was already blocked."""
    activity = require_operator_activity(db, activity_id, operator_id)
    created = schedule_store.add_blocked_date(db, activity.id, day, reason)
    if created:
        dispatch(
            background,
            record_audit,
            "operator",
            operator_id,
            "create",
            "blocked_date",
            activity.id,
            {"date": day.isoformat(), "reason": reason},
        )
    return created


def unblock_date(
    db: Session,
    activity_id: str,
    day: date,
    *,
    operator_id: str,
    background: BackgroundTasks | None = None,
) -> bool:
    activity = require_operator_activity(db, activity_id, operator_id)
    removed = schedule_store.remove_blocked_date(db, activity.id, day)
    if removed:
        dispatch(
            background,
            record_audit,
            "operator",
            operator_id,
            "delete",
            "blocked_date",
            activity.id,
            {"date": day.isoformat()},
        )
    return removed
