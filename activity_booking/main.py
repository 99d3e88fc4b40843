"""
FastAPI app entrypoint.

Slot-capacity core of the activity booking platform: availability, admission, lifecycle.
"""
import logging
from contextlib import asynccontextmanager
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Load .env from the project root before any app code reads settings
load_dotenv(Path(__file__).resolve().parent.parent / ".env")

from activity_booking.api.routes import availability, bookings
from activity_booking.config import settings
from activity_booking.core.errors import register_exception_handlers
from activity_booking.db.session import create_all_tables

logger = logging.getLogger(__name__)
logging.getLogger("activity_booking").setLevel(settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.auto_create_tables:
        create_all_tables()
        logger.info("Tables created (AUTO_CREATE_TABLES)")
    logger.info("Booking API ready")
    yield


app = FastAPI(title="Activity Booking", version="0.1.0", lifespan=lifespan)

# CORS: dev origins (Expo web, dashboard) + optional CORS_ORIGINS env (comma-separated)
_cors_origins = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
_cors_origins.extend(settings.cors_origin_list())
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(availability.router, prefix="/api", tags=["availability"])
app.include_router(bookings.router, prefix="/api", tags=["bookings"])


@app.get("/", include_in_schema=False)
def root():
    """Root: point to API docs and health."""
    return {"message": "Activity Booking API", "docs": "/docs", "health": "/health"}


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
