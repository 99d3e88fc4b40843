"""
Request-scoped dependencies: bearer token extraction and operator / traveler identity.
"""
from fastapi import Depends, Header
from sqlalchemy.orm import Session

from activity_booking.db.session import get_db
from activity_booking.services.identity import bearer_token, require_operator_id, require_user_id


def optional_token(authorization: str | None = Header(None)) -> str | None:
    return bearer_token(authorization)


def current_user_id(
    db: Session = Depends(get_db),
    token: str | None = Depends(optional_token),
) -> str:
    return require_user_id(db, token)


def current_operator_id(
    db: Session = Depends(get_db),
    token: str | None = Depends(optional_token),
) -> str:
    return require_operator_id(db, token)
