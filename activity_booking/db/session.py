"""
Database session and engine.
"""
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from activity_booking.config import settings
from activity_booking.db.base import Base


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # Local runs and tests: one file, shared across the FastAPI worker threads
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_pre_ping": True,
        "pool_recycle": 300,
        "pool_timeout": 30,
    }


engine = create_engine(settings.database_url, **_engine_kwargs(settings.database_url))

if engine.dialect.name == "sqlite":

    @event.listens_for(engine, "connect")
    def _enable_sqlite_fks(dbapi_connection, connection_record):
        # ON DELETE CASCADE / SET NULL are off by default in SQLite
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_all_tables() -> None:
    """Create any missing tables from the models (dev / tests). Production uses alembic."""
    import activity_booking.models  # noqa: F401  registers every model on Base.metadata

    Base.metadata.create_all(bind=engine)
