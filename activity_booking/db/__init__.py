from activity_booking.db.base import Base
from activity_booking.db.session import SessionLocal, create_all_tables, engine, get_db
from activity_booking.db.tables import ALL_TABLE_NAMES

__all__ = [
    "get_db",
    "engine",
    "SessionLocal",
    "Base",
    "create_all_tables",
    "ALL_TABLE_NAMES",
]
