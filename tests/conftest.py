import os
import secrets
import tempfile
from datetime import date, datetime, time, timedelta, timezone
from pathlib import Path

# Point the app at a throwaway SQLite file before anything imports activity_booking.config
_DB_DIR = Path(tempfile.mkdtemp(prefix="activity-booking-tests-"))
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_DIR / 'test.db'}"

import pytest
from fastapi.testclient import TestClient

from activity_booking.db.base import Base
from activity_booking.db.session import SessionLocal, engine
from activity_booking.main import app
from activity_booking.models import (
    Activity,
    AvailabilityWindow,
    Operator,
    OperatorSession,
    User,
    UserSession,
)


def next_weekday(iso_weekday: int, after: date | None = None) -> date:
    """First date strictly after `after` (default today) falling on iso_weekday (Monday=1)."""
    day = (after or date.today()) + timedelta(days=1)
    while day.isoweekday() != iso_weekday:
        day += timedelta(days=1)
    return day


def at(day: date, hh_mm: str) -> datetime:
    hours, minutes = hh_mm.split(":")
    return datetime.combine(day, time(int(hours), int(minutes)))


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db):
    return TestClient(app)


@pytest.fixture
def make_operator(db):
    def _make(email: str = "ops@sahara-tours.dz", company_name: str = "Sahara Tours") -> Operator:
        operator = Operator(email=email, company_name=company_name)
        db.add(operator)
        db.commit()
        return operator

    return _make


@pytest.fixture
def operator(make_operator):
    return make_operator()


@pytest.fixture
def make_activity(db, operator):
    def _make(owner: Operator | None = None, title: str = "Desert sunset tour", price: float = 2500) -> Activity:
        activity = Activity(
            operator_id=(owner or operator).id,
            title=title,
            price=price,
            currency="DZD",
            city_id="djanet",
            status="active",
        )
        db.add(activity)
        db.commit()
        return activity

    return _make


@pytest.fixture
def activity(make_activity):
    return make_activity()


@pytest.fixture
def add_window(db):
    def _add(
        activity: Activity,
        day_of_week: int,
        start: str = "09:00",
        end: str = "11:00",
        capacity: int = 10,
        is_active: bool = True,
    ) -> AvailabilityWindow:
        sh, sm = start.split(":")
        eh, em = end.split(":")
        window = AvailabilityWindow(
            activity_id=activity.id,
            day_of_week=day_of_week,
            start_time=time(int(sh), int(sm)),
            end_time=time(int(eh), int(em)),
            capacity=capacity,
            is_active=is_active,
        )
        db.add(window)
        db.commit()
        return window

    return _add


@pytest.fixture
def user(db):
    u = User(email="amina@example.com", full_name="Amina B.")
    db.add(u)
    db.commit()
    return u


def _issue_token(db, model, expires_in: timedelta = timedelta(days=30), **owner) -> str:
    token = secrets.token_hex(16)
    db.add(model(token=token, expires_at=datetime.now(timezone.utc) + expires_in, **owner))
    db.commit()
    return token


@pytest.fixture
def user_token(db, user):
    return _issue_token(db, UserSession, user_id=user.id)


@pytest.fixture
def expired_user_token(db, user):
    return _issue_token(db, UserSession, expires_in=timedelta(hours=-1), user_id=user.id)


@pytest.fixture
def operator_token(db, operator):
    return _issue_token(db, OperatorSession, operator_id=operator.id)


@pytest.fixture
def issue_operator_token(db):
    def _issue(op: Operator) -> str:
        return _issue_token(db, OperatorSession, operator_id=op.id)

    return _issue
