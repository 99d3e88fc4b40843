from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import at, next_weekday

from activity_booking.core.errors import (
    DateBlocked,
    InsufficientCapacity,
    NotFound,
    SlotFull,
    Unauthenticated,
    ValidationError,
)
from activity_booking.models import AuditLog, Booking, Notification
from activity_booking.services.availability_service import WindowInput, block_date, list_slots_for_date, replace_windows
from activity_booking.services.booking_admission import BookingRequest, create_booking
from activity_booking.services.booking_lifecycle import update_booking_status


def _request(activity_id, day, slot="09:00", num_people=1, **extra):
    extra.setdefault("is_guest", True)
    return BookingRequest(
        activity_id=activity_id,
        scheduled_at=at(day, slot or "12:00"),
        time_slot=slot,
        num_people=num_people,
        **extra,
    )


def _seats_held(db, activity, day, slot):
    return sum(
        b.num_people
        for b in db.query(Booking).filter(Booking.activity_id == activity.id, Booking.time_slot == slot).all()
        if b.scheduled_at.date() == day and b.status not in ("cancelled", "refused")
    )


def test_capacity_boundary_then_slot_full(db, activity, add_window):
    add_window(activity, 1, "09:00", capacity=2)
    monday = next_weekday(1)

    create_booking(db, _request(activity.id, monday, num_people=2))
    assert list_slots_for_date(db, activity.id, monday)["slots"][0]["remaining"] == 0

    with pytest.raises(SlotFull) as exc:
        create_booking(db, _request(activity.id, monday, num_people=1))
    assert exc.value.remaining == 0
    assert db.query(Booking).count() == 1


def test_insufficient_capacity_reports_exact_remaining(db, activity, add_window):
    add_window(activity, 1, "09:00", capacity=5)
    monday = next_weekday(1)
    create_booking(db, _request(activity.id, monday, num_people=3))

    with pytest.raises(InsufficientCapacity) as exc:
        create_booking(db, _request(activity.id, monday, num_people=3))

    assert exc.value.remaining == 2
    assert exc.value.to_payload() == {
        "error": "Only 2 seat(s) left in this slot",
        "code": "insufficient_capacity",
        "remaining": 2,
    }
    create_booking(db, _request(activity.id, monday, num_people=2))


def test_capacity_invariant_holds_after_every_admission(db, activity, add_window):
    add_window(activity, 1, "09:00", capacity=7)
    monday = next_weekday(1)

    for party in (3, 1, 4, 2, 1, 1, 5):
        try:
            create_booking(db, _request(activity.id, monday, num_people=party))
        except (SlotFull, InsufficientCapacity):
            pass
        assert _seats_held(db, activity, monday, "09:00") <= 7

    assert _seats_held(db, activity, monday, "09:00") == 7


def test_cancellation_frees_capacity(db, activity, operator, add_window):
    add_window(activity, 1, "09:00", capacity=2)
    monday = next_weekday(1)
    first = create_booking(db, _request(activity.id, monday, num_people=2))

    update_booking_status(db, first.id, operator_id=operator.id, status="cancelled")

    slot = list_slots_for_date(db, activity.id, monday)["slots"][0]
    assert slot["remaining"] == 2
    assert slot["isFull"] is False
    create_booking(db, _request(activity.id, monday, num_people=2))


def test_seat_label_accepts_seconds(db, activity, add_window):
    add_window(activity, 1, "09:00", capacity=1)
    monday = next_weekday(1)
    booking = create_booking(db, _request(activity.id, monday, slot="09:00:00"))

    assert booking.time_slot == "09:00"
    with pytest.raises(SlotFull):
        create_booking(db, _request(activity.id, monday, slot="09:00"))


def test_window_on_another_weekday_does_not_limit(db, activity, add_window):
    add_window(activity, 2, "09:00", capacity=1)  # Tuesdays only
    monday = next_weekday(1)

    create_booking(db, _request(activity.id, monday, num_people=4))

    assert db.query(Booking).count() == 1


def test_slot_without_window_is_not_capacity_checked(db, activity, add_window):
    add_window(activity, 1, "09:00", capacity=1)
    monday = next_weekday(1)

    create_booking(db, _request(activity.id, monday, slot="18:30", num_people=30))
    create_booking(db, _request(activity.id, monday, slot=None, num_people=30))

    assert db.query(Booking).count() == 2


def test_overlapping_windows_use_smallest_capacity(db, activity, add_window):
    add_window(activity, 1, "09:00", "10:00", capacity=6)
    add_window(activity, 1, "09:00", "12:00", capacity=3)
    monday = next_weekday(1)

    with pytest.raises(InsufficientCapacity) as exc:
        create_booking(db, _request(activity.id, monday, num_people=4))
    assert exc.value.remaining == 3


def test_orphaned_slot_no_longer_enforced(db, activity, operator, add_window):
    add_window(activity, 1, "09:00", capacity=1)
    monday = next_weekday(1)
    create_booking(db, _request(activity.id, monday))

    replace_windows(db, activity.id, [WindowInput(day_of_week=1, start_time="10:00", capacity=1)], operator_id=operator.id)

    create_booking(db, _request(activity.id, monday))
    assert db.query(Booking).count() == 2


def test_legacy_activity_bypasses_capacity(db, activity, add_window):
    add_window(activity, 1, "09:00", capacity=2)
    monday = next_weekday(1)

    booking = create_booking(
        db,
        _request("camel-trek-tassili", monday, num_people=999, price=1200, activity_title="Camel trek"),
    )

    assert booking.activity_id is None
    assert booking.operator_id is None
    assert booking.legacy_activity_id == "camel-trek-tassili"
    assert booking.num_people == 999
    assert booking.total_price == Decimal("1198800")


def test_legacy_activity_needs_title_and_price(db):
    monday = next_weekday(1)
    with pytest.raises(ValidationError):
        create_booking(db, _request("camel-trek", monday, price=1200))
    with pytest.raises(ValidationError):
        create_booking(db, _request("camel-trek", monday, activity_title="Camel trek"))


def test_unknown_catalog_activity_is_not_found(db):
    with pytest.raises(NotFound):
        create_booking(db, _request("5f1c7a52-8d0e-4e55-9a1b-1d2c3e4f5a6b", next_weekday(1)))


def test_uppercase_catalog_id_is_recognized(db, activity, add_window):
    add_window(activity, 1, "09:00", capacity=1)
    monday = next_weekday(1)
    create_booking(db, _request(activity.id.upper(), monday))

    with pytest.raises(SlotFull):
        create_booking(db, _request(activity.id, monday))


def test_blocked_date_rejects_catalog_booking(db, activity, operator, add_window):
    add_window(activity, 1, "09:00", capacity=10)
    monday = next_weekday(1)
    block_date(db, activity.id, monday, operator_id=operator.id)

    with pytest.raises(DateBlocked):
        create_booking(db, _request(activity.id, monday))
    assert db.query(Booking).count() == 0


def test_catalog_defaults_fill_booking(db, activity):
    monday = next_weekday(1)
    booking = create_booking(db, _request(activity.id, monday, slot=None, num_people=3))

    assert booking.activity_id == activity.id
    assert booking.operator_id == activity.operator_id
    assert booking.activity_title == "Desert sunset tour"
    assert booking.city_id == "djanet"
    assert booking.currency == "DZD"
    assert booking.price_per_person == Decimal("2500")
    assert booking.total_price == Decimal("7500")
    assert booking.status == "confirmed"
    assert booking.payment_status == "pending"


def test_request_price_overrides_catalog(db, activity):
    booking = create_booking(db, _request(activity.id, next_weekday(1), num_people=2, price=1999.5))

    assert booking.price_per_person == Decimal("1999.50")
    assert booking.total_price == Decimal("3999.00")


def test_payment_status_follows_payment_method(db, activity):
    monday = next_weekday(1)
    card = create_booking(db, _request(activity.id, monday, slot=None, payment_method="card"))
    cash = create_booking(db, _request(activity.id, monday, slot=None, payment_method="cash"))
    explicit = create_booking(db, _request(activity.id, monday, slot=None, payment_method="card", payment_status="partial"))

    assert card.payment_status == "paid"
    assert cash.payment_status == "pending"
    assert explicit.payment_status == "partial"


def test_initial_status_can_be_pending_only_otherwise_confirmed(db, activity):
    monday = next_weekday(1)
    assert create_booking(db, _request(activity.id, monday, slot=None, status="pending")).status == "pending"
    with pytest.raises(ValidationError):
        create_booking(db, _request(activity.id, monday, slot=None, status="completed"))


@pytest.mark.parametrize(
    "extra",
    [
        {"num_people": 0},
        {"slot": "9h00"},
        {"price": -1},
        {"payment_status": "free"},
        {"price": float("nan")},
        {"price": float("inf")},
        {"price": 1e12},
        {"price": 9_999_999_999, "num_people": 2},
    ],
)
def test_malformed_requests_are_rejected(db, activity, extra):
    with pytest.raises(ValidationError):
        create_booking(db, _request(activity.id, next_weekday(1), **extra))
    assert db.query(Booking).count() == 0


def test_guest_flag_required_without_token(db, activity):
    with pytest.raises(Unauthenticated):
        create_booking(db, _request(activity.id, next_weekday(1), is_guest=False))


def test_token_resolves_user(db, activity, user, user_token):
    booking = create_booking(db, _request(activity.id, next_weekday(1), is_guest=False), token=user_token)

    assert booking.user_id == user.id


def test_expired_token_is_rejected_even_for_guests(db, activity, expired_user_token):
    with pytest.raises(Unauthenticated):
        create_booking(db, _request(activity.id, next_weekday(1), is_guest=True), token=expired_user_token)


def test_offset_timestamps_are_stored_as_utc(db, activity, add_window):
    monday = next_weekday(1)
    add_window(activity, 1, "09:00", capacity=1)
    # 10:00 at +01:00 is 09:00 UTC on the same Monday
    scheduled = datetime.combine(monday, datetime.min.time()).replace(hour=10, tzinfo=timezone(timedelta(hours=1)))
    booking = create_booking(
        db,
        BookingRequest(activity_id=activity.id, scheduled_at=scheduled, time_slot="09:00", is_guest=True),
    )

    assert booking.scheduled_at == at(monday, "09:00")


def test_operator_is_notified_and_creation_audited(db, activity, operator, user, user_token):
    booking = create_booking(
        db,
        _request(activity.id, next_weekday(1), num_people=2, is_guest=False, customer_name="Amina"),
        token=user_token,
    )

    note = db.query(Notification).one()
    assert note.recipient_type == "operator"
    assert note.recipient_id == operator.id
    assert note.type == "new_booking"
    assert note.data == {"bookingId": booking.id, "activityTitle": "Desert sunset tour"}
    assert "Amina" in note.message and "09:00" in note.message

    entry = db.query(AuditLog).filter(AuditLog.entity_type == "booking").one()
    assert entry.action == "create"
    assert entry.actor_type == "user"
    assert entry.actor_id == user.id
    assert entry.changes["numPeople"] == 2


def test_legacy_booking_notifies_nobody(db):
    create_booking(db, _request("camel-trek", next_weekday(1), price=1200, activity_title="Camel trek"))

    assert db.query(Notification).count() == 0
    assert db.query(AuditLog).one().actor_type == "guest"


class _BrokenSession:
    def add(self, row):
        raise RuntimeError("table is gone")

    def rollback(self):
        pass

    def close(self):
        pass


def test_failing_notification_does_not_fail_booking(db, activity, monkeypatch):
    from activity_booking.services import notifications

    monkeypatch.setattr(notifications, "SessionLocal", _BrokenSession)

    booking = create_booking(db, _request(activity.id, next_weekday(1), slot=None))

    assert booking.id is not None
    assert db.query(Booking).count() == 1


def test_failing_audit_does_not_fail_booking(db, activity, monkeypatch):
    from activity_booking.services import audit

    monkeypatch.setattr(audit, "SessionLocal", _BrokenSession)

    booking = create_booking(db, _request(activity.id, next_weekday(1), slot=None))

    assert booking.status == "confirmed"
    assert db.query(Booking).count() == 1
    assert db.query(AuditLog).count() == 0
    # The operator notification still goes out
    assert db.query(Notification).count() == 1
