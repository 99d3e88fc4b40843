"""
Identity: resolve bearer tokens issued by the (external) login flows.

Traveler tokens live in `sessions`, operator tokens in `operator_sessions`. Expired or unknown
tokens resolve to None; callers decide whether that is an Unauthenticated error.
"""
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from activity_booking.core.errors import Unauthenticated
from activity_booking.models.auth_session import OperatorSession, UserSession


def bearer_token(authorization: str | None) -> str | None:
    """Extract the token from an `Authorization: Bearer <token>` header value."""
    if not authorization:
        return None
    value = authorization.strip()
    if value.lower().startswith("bearer "):
        value = value[7:]
    return value.strip() or None


def _not_expired(expires_at: datetime) -> bool:
    if expires_at.tzinfo is None:
        # SQLite hands back naive values; they were written as UTC
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    return expires_at > datetime.now(timezone.utc)


def resolve_user_id(db: Session, token: str) -> str | None:
    row = db.query(UserSession).filter(UserSession.token == token).first()
    if row is None or not _not_expired(row.expires_at):
        return None
    return row.user_id


def resolve_operator_id(db: Session, token: str) -> str | None:
    row = db.query(OperatorSession).filter(OperatorSession.token == token).first()
    if row is None or not _not_expired(row.expires_at):
        return None
    return row.operator_id


def require_user_id(db: Session, token: str | None) -> str:
    if not token:
        raise Unauthenticated()
    user_id = resolve_user_id(db, token)
    if user_id is None:
        raise Unauthenticated("Session expired")
    return user_id


def require_operator_id(db: Session, token: str | None) -> str:
    if not token:
        raise Unauthenticated("Token required")
    operator_id = resolve_operator_id(db, token)
    if operator_id is None:
        raise Unauthenticated("Invalid or expired session")
    return operator_id


def resolve_booking_identity(db: Session, token: str | None, is_guest: bool) -> str | None:
    """
    Who is booking: a user id for a valid token, None for an explicit guest booking.
    A token that does not resolve is an error even when is_guest is set.
    """
    if token:
        return require_user_id(db, token)
    if not is_guest:
        raise Unauthenticated()
    return None
