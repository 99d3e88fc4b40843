"""
Schedule store: persistence for weekly availability windows and blocked dates.

No business rules here beyond the table constraints; defaults and validation happen in the
availability service before rows reach this module.
"""
import logging
from dataclasses import dataclass
from datetime import date, time

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from activity_booking.core.errors import StorageError
from activity_booking.models.availability_window import AvailabilityWindow
from activity_booking.models.blocked_date import BlockedDate

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WindowRow:
    """A fully-resolved window, ready to insert."""

    day_of_week: int
    start_time: time
    end_time: time
    capacity: int
    is_active: bool


def _commit(db: Session, what: str) -> None:
    try:
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"{what}: {e}") from e


# --- Windows ---


def list_windows(db: Session, activity_id: str) -> list[AvailabilityWindow]:
    """All windows (active or not), by weekday then start time."""
    return (
        db.query(AvailabilityWindow)
        .filter(AvailabilityWindow.activity_id == activity_id)
        .order_by(AvailabilityWindow.day_of_week, AvailabilityWindow.start_time)
        .all()
    )


def list_active_windows(db: Session, activity_id: str, day_of_week: int | None = None) -> list[AvailabilityWindow]:
    q = db.query(AvailabilityWindow).filter(
        AvailabilityWindow.activity_id == activity_id,
        AvailabilityWindow.is_active.is_(True),
    )
    if day_of_week is not None:
        q = q.filter(AvailabilityWindow.day_of_week == day_of_week)
    return q.order_by(AvailabilityWindow.day_of_week, AvailabilityWindow.start_time).all()


def list_available_weekdays(db: Session, activity_id: str) -> list[int]:
    """Distinct weekdays (1-7) that have at least one active window."""
    rows = (
        db.query(AvailabilityWindow.day_of_week)
        .filter(
            AvailabilityWindow.activity_id == activity_id,
            AvailabilityWindow.is_active.is_(True),
        )
        .distinct()
        .order_by(AvailabilityWindow.day_of_week)
        .all()
    )
    return [r[0] for r in rows]


def replace_windows(db: Session, activity_id: str, windows: list[WindowRow]) -> list[AvailabilityWindow]:
    """Delete every window of the activity, then insert `windows` verbatim. One transaction."""
    deleted = (
        db.query(AvailabilityWindow)
        .filter(AvailabilityWindow.activity_id == activity_id)
        .delete(synchronize_session=False)
    )
    for w in windows:
        db.add(
            AvailabilityWindow(
                activity_id=activity_id,
                day_of_week=w.day_of_week,
                start_time=w.start_time,
                end_time=w.end_time,
                capacity=w.capacity,
                is_active=w.is_active,
            )
        )
    _commit(db, "replace windows")
    logger.info("Replaced windows for activity %s: %s removed, %s inserted", activity_id, deleted, len(windows))
    return list_windows(db, activity_id)


# --- Blocked dates ---


def list_blocked_dates(db: Session, activity_id: str, since: date | None = None) -> list[BlockedDate]:
    q = db.query(BlockedDate).filter(BlockedDate.activity_id == activity_id)
    if since is not None:
        q = q.filter(BlockedDate.blocked_date >= since)
    return q.order_by(BlockedDate.blocked_date).all()


def is_blocked(db: Session, activity_id: str, day: date) -> bool:
    return (
        db.query(BlockedDate.id)
        .filter(BlockedDate.activity_id == activity_id, BlockedDate.blocked_date == day)
        .first()
        is not None
    )


def add_blocked_date(db: Session, activity_id: str, day: date, reason: str | None = None) -> bool:
    """Block a date. Returns False if it was already blocked (existing row and reason kept)."""
    if is_blocked(db, activity_id, day):
        return False
    db.add(BlockedDate(activity_id=activity_id, blocked_date=day, reason=reason))
    try:
        db.commit()
    except IntegrityError:
        # Lost a race with another request blocking the same date
        db.rollback()
        return False
    except SQLAlchemyError as e:
        db.rollback()
        raise StorageError(f"add blocked date: {e}") from e
    return True


def remove_blocked_date(db: Session, activity_id: str, day: date) -> bool:
    """Unblock a date. Returns False if it was not blocked."""
    deleted = (
        db.query(BlockedDate)
        .filter(BlockedDate.activity_id == activity_id, BlockedDate.blocked_date == day)
        .delete(synchronize_session=False)
    )
    _commit(db, "remove blocked date")
    return deleted > 0
