from activity_booking.models.activity import Activity
from activity_booking.models.audit_log import AuditLog
from activity_booking.models.auth_session import OperatorSession, UserSession
from activity_booking.models.availability_window import AvailabilityWindow
from activity_booking.models.blocked_date import BlockedDate
from activity_booking.models.booking import Booking
from activity_booking.models.notification import Notification
from activity_booking.models.operator import Operator
from activity_booking.models.user import User

__all__ = [
    "Activity",
    "AuditLog",
    "AvailabilityWindow",
    "BlockedDate",
    "Booking",
    "Notification",
    "Operator",
    "OperatorSession",
    "User",
    "UserSession",
]
