"""
Centralized constants for availability and bookings (Encapsulate What Changes).

Change status sets, defaults or notification wording here instead of scattering literals across
services and routes. CHECK constraints in models/ and alembic/ must list the same status values.
"""
import re
from decimal import Decimal

# Activity ids: catalog activities are UUIDs; anything else is an off-catalog (legacy) id
UUID_RE = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE)

# Slot labels are "HH:MM"; clients may also send "HH:MM:SS"
SLOT_LABEL_RE = re.compile(r"^([01]\d|2[0-3]):([0-5]\d)(:[0-5]\d)?$")

# Window defaults applied by replace_windows when the operator omits a field
DEFAULT_WINDOW_CAPACITY = 10
ISO_WEEKDAYS = range(1, 8)  # Monday=1 .. Sunday=7

# Booking status machine
STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_COMPLETED = "completed"
STATUS_CANCELLED = "cancelled"
STATUS_REFUSED = "refused"
BOOKING_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_COMPLETED, STATUS_CANCELLED, STATUS_REFUSED)
INITIAL_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED)
TERMINAL_STATUSES = (STATUS_COMPLETED, STATUS_CANCELLED, STATUS_REFUSED)
# Bookings in these statuses no longer hold seats
RELEASED_STATUSES = (STATUS_CANCELLED, STATUS_REFUSED)
DEFAULT_BOOKING_STATUS = STATUS_CONFIRMED

# Payment
PAYMENT_STATUSES = ("pending", "partial", "paid", "refunded")
# Simulated card flow authorizes the full amount up front; everything else is paid on site
PREPAID_PAYMENT_METHODS = ("card",)

DEFAULT_CURRENCY = "DZD"
# Largest amount a Numeric(12, 2) price column holds
MAX_AMOUNT = Decimal("9999999999.99")

# Operator bookings listing
OPERATOR_BOOKINGS_DEFAULT_LIMIT = 50
OPERATOR_BOOKINGS_MAX_LIMIT = 200

# Notification types
NOTIFY_NEW_BOOKING = "new_booking"

# User-facing notification per target status. Statuses not listed here notify nobody.
STATUS_NOTIFICATIONS: dict[str, tuple[str, str]] = {
    STATUS_CONFIRMED: (
        "Booking confirmed",
        'Your booking "{title}" has been confirmed by the operator.',
    ),
    STATUS_REFUSED: (
        "Booking refused",
        'Your booking "{title}" has been refused.{reason_suffix}',
    ),
    STATUS_CANCELLED: (
        "Booking cancelled",
        'Your booking "{title}" has been cancelled.{reason_suffix}',
    ),
    STATUS_COMPLETED: (
        "Activity completed",
        'Your activity "{title}" is marked as completed. Thank you!',
    ),
}
