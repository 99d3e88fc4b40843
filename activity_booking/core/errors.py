"""
Centralized error handling for the booking API.

Services raise the exceptions below; handlers registered on the app turn them into JSON so routes
stay thin. Each error carries its HTTP status and a stable `code` the apps can switch on.
"""
from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants: status codes and user-facing messages
# ---------------------------------------------------------------------------

STATUS_BAD_REQUEST = 400
STATUS_UNAUTHORIZED = 401
STATUS_NOT_FOUND = 404
STATUS_INTERNAL_ERROR = 500

MSG_SERVER_ERROR = "Server error"
MSG_SLOT_FULL = "This slot is full"
MSG_INSUFFICIENT_CAPACITY = "Only {remaining} seat(s) left in this slot"


# ---------------------------------------------------------------------------
# Error taxonomy
# ---------------------------------------------------------------------------


class BookingError(Exception):
    """Base for every error the API reports to clients."""

    status_code = STATUS_BAD_REQUEST
    code = "error"
    default_message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_payload(self) -> dict:
        return {"error": self.message, "code": self.code}


class Unauthenticated(BookingError):
    status_code = STATUS_UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Not authenticated"


class NotFound(BookingError):
    status_code = STATUS_NOT_FOUND
    code = "not_found"
    default_message = "Not found"


class ValidationError(BookingError):
    code = "validation_error"
    default_message = "Invalid request"


class DateBlocked(ValidationError):
    code = "date_blocked"
    default_message = "This date is not available for booking"


class CapacityError(BookingError):
    """Capacity check failed; `remaining` lets the client offer a smaller party or another slot."""

    def __init__(self, remaining: int, message: str | None = None):
        self.remaining = remaining
        super().__init__(message)

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["remaining"] = self.remaining
        return payload


class SlotFull(CapacityError):
    code = "slot_full"
    default_message = MSG_SLOT_FULL

    def __init__(self):
        super().__init__(0)


class InsufficientCapacity(CapacityError):
    code = "insufficient_capacity"

    def __init__(self, remaining: int):
        super().__init__(remaining, MSG_INSUFFICIENT_CAPACITY.format(remaining=remaining))


class StorageError(BookingError):
    """Datastore failure. The message stays server-side; clients get MSG_SERVER_ERROR."""

    status_code = STATUS_INTERNAL_ERROR
    code = "server_error"
    default_message = MSG_SERVER_ERROR

    def to_payload(self) -> dict:
        return {"error": MSG_SERVER_ERROR, "code": self.code}


def capacity_error(remaining: int) -> CapacityError:
    """SlotFull when nothing is left, InsufficientCapacity otherwise."""
    if remaining <= 0:
        return SlotFull()
    return InsufficientCapacity(remaining)


# ---------------------------------------------------------------------------
# FastAPI wiring
# ---------------------------------------------------------------------------


async def _booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


async def _sqlalchemy_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("%s %s database error: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=STATUS_INTERNAL_ERROR, content=StorageError().to_payload())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(BookingError, _booking_error_handler)
    app.add_exception_handler(SQLAlchemyError, _sqlalchemy_error_handler)
