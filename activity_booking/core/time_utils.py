"""Slot labels, weekdays and booking timestamps."""
from datetime import date, datetime, time, timedelta, timezone

from activity_booking.core.constants import SLOT_LABEL_RE
from activity_booking.core.errors import ValidationError


def slot_label(value: time) -> str:
    """time(9, 30, 15) -> "09:30". Capacity is keyed on this label."""
    return value.strftime("%H:%M")


def normalize_slot_label(value: str | None) -> str | None:
    """ "9:30"-style input is rejected; "09:30:00" -> "09:30"; blank -> None."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    if not SLOT_LABEL_RE.match(value):
        raise ValidationError(f"Invalid time slot {value!r} (expected HH:MM)")
    return value[:5]


def parse_time(value: str | time, field: str = "time") -> time:
    if isinstance(value, time):
        return value.replace(second=0, microsecond=0)
    label = normalize_slot_label(value)
    if label is None:
        raise ValidationError(f"{field} is required")
    hours, minutes = label.split(":")
    return time(int(hours), int(minutes))


def parse_date(value: str | date, field: str = "date") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat((value or "").strip()[:10])
    except ValueError:
        raise ValidationError(f"Invalid {field} {value!r} (expected YYYY-MM-DD)") from None


def iso_weekday(day: date) -> int:
    """Monday=1 .. Sunday=7."""
    return day.isoweekday()


def naive_utc(value: datetime) -> datetime:
    """Store scheduled_at as a naive timestamp; offsets are converted to UTC first."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start, end) of the calendar day, for range filters on scheduled_at."""
    start = datetime.combine(day, time.min)
    return start, start + timedelta(days=1)
