from datetime import date, datetime, time, timedelta, timezone

import pytest

from activity_booking.core.errors import ValidationError
from activity_booking.core.time_utils import (
    day_bounds,
    iso_weekday,
    naive_utc,
    normalize_slot_label,
    parse_date,
    parse_time,
    slot_label,
)


def test_slot_label_truncates_to_minutes():
    assert slot_label(time(9, 30, 15)) == "09:30"
    assert slot_label(time(0, 0)) == "00:00"


def test_normalize_slot_label_accepts_seconds_and_blank():
    assert normalize_slot_label("14:00:00") == "14:00"
    assert normalize_slot_label("  08:45 ") == "08:45"
    assert normalize_slot_label("") is None
    assert normalize_slot_label(None) is None


@pytest.mark.parametrize("value", ["9:30", "24:00", "12:60", "noon"])
def test_normalize_slot_label_rejects_malformed(value):
    with pytest.raises(ValidationError):
        normalize_slot_label(value)


def test_parse_time_drops_seconds():
    assert parse_time("07:15") == time(7, 15)
    assert parse_time(time(7, 15, 59)) == time(7, 15)


def test_parse_date_accepts_timestamps_and_rejects_garbage():
    assert parse_date("2026-05-04") == date(2026, 5, 4)
    assert parse_date("2026-05-04T10:00:00Z") == date(2026, 5, 4)
    with pytest.raises(ValidationError):
        parse_date("04/05/2026")


def test_iso_weekday_maps_sunday_to_seven():
    assert iso_weekday(date(2026, 5, 3)) == 7  # Sunday
    assert iso_weekday(date(2026, 5, 4)) == 1  # Monday


def test_naive_utc_converts_offsets():
    aware = datetime(2026, 5, 4, 1, 30, tzinfo=timezone(timedelta(hours=2)))
    assert naive_utc(aware) == datetime(2026, 5, 3, 23, 30)
    naive = datetime(2026, 5, 4, 9, 0)
    assert naive_utc(naive) is naive


def test_day_bounds_is_half_open_day():
    start, end = day_bounds(date(2026, 5, 4))
    assert start == datetime(2026, 5, 4, 0, 0)
    assert end == datetime(2026, 5, 5, 0, 0)
