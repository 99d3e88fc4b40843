"""
Activity catalog lookup and the two kinds of booking targets.

A booking names its activity either by catalog UUID or by a free-text id from seed/legacy data.
Only catalog activities have windows, an operator and capacity enforcement; the two are kept
apart on purpose rather than unified.
"""
from dataclasses import dataclass
from typing import Union

from sqlalchemy.orm import Session

from activity_booking.core.constants import UUID_RE
from activity_booking.core.errors import NotFound, ValidationError
from activity_booking.models.activity import Activity


@dataclass(frozen=True)
class CatalogRef:
    activity_id: str


@dataclass(frozen=True)
class LegacyRef:
    legacy_id: str


ActivityRef = Union[CatalogRef, LegacyRef]


def parse_activity_ref(raw: str | None) -> ActivityRef:
    value = (raw or "").strip()
    if not value:
        raise ValidationError("activity_id is required")
    if UUID_RE.match(value):
        return CatalogRef(value.lower())
    return LegacyRef(value)


def get_activity(db: Session, activity_id: str) -> Activity | None:
    """Catalog row for a UUID-shaped id; None for unknown or non-UUID ids."""
    if not UUID_RE.match(activity_id or ""):
        return None
    return db.query(Activity).filter(Activity.id == activity_id.lower()).first()


def require_activity(db: Session, activity_id: str) -> Activity:
    activity = get_activity(db, activity_id)
    if activity is None:
        raise NotFound("Activity not found")
    return activity


def require_operator_activity(db: Session, activity_id: str, operator_id: str) -> Activity:
    """Catalog activity owned by the operator. Someone else's activity reads as not found."""
    activity = require_activity(db, activity_id)
    if activity.operator_id != operator_id:
        raise NotFound("Activity not found")
    return activity


def normalize_activity_id(raw: str) -> str:
    """Catalog ids are stored lowercase; free-text ids are kept as sent."""
    value = (raw or "").strip()
    return value.lower() if UUID_RE.match(value) else value
