"""
Single source of truth for database tables that exist after migrations.

Use these names when writing raw SQL (e.g. TRUNCATE in scripts). alembic/env.py
asserts the registered models match ALL_TABLE_NAMES.
"""
# All tables that exist in the DB. Must match models and migrations.
ALL_TABLE_NAMES = (
    "users",
    "operators",
    "sessions",
    "operator_sessions",
    "activities",
    "availability_windows",
    "blocked_dates",
    "bookings",
    "notifications",
    "audit_logs",
)
