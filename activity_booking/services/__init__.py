from activity_booking.services.availability_service import (
    list_available_days,
    list_slots_for_date,
    list_weekly_windows,
    replace_windows,
)
from activity_booking.services.booking_admission import BookingRequest, create_booking
from activity_booking.services.booking_lifecycle import update_booking_status

__all__ = [
    "list_available_days",
    "list_slots_for_date",
    "list_weekly_windows",
    "replace_windows",
    "BookingRequest",
    "create_booking",
    "update_booking_status",
]
