from datetime import datetime, timedelta, timezone

from app.utils.dates import (
    as_naive_utc,
    day_bounds,
    get_event_status,
    hours_until,
    is_event_ongoing,
    month_start,
)

START = datetime(2026, 3, 10, 9, 0)
END = datetime(2026, 3, 10, 17, 0)


def test_event_status_boundaries():
    assert get_event_status(START, END, START - timedelta(seconds=1)) == "upcoming"
    assert get_event_status(START, END, START) == "ongoing"
    assert get_event_status(START, END, END) == "ongoing"
    assert get_event_status(START, END, END + timedelta(seconds=1)) == "finished"


def test_is_event_ongoing_is_inclusive():
    assert is_event_ongoing(START, END, START)
    assert is_event_ongoing(START, END, END)
    assert not is_event_ongoing(START, END, END + timedelta(microseconds=1))


def test_hours_until():
    assert hours_until(START, START - timedelta(hours=23, minutes=30)) == 23.5
    assert hours_until(START, START + timedelta(hours=1)) == -1


def test_as_naive_utc_converts_aware_values():
    aware = datetime(2026, 3, 10, 9, 0, tzinfo=timezone(timedelta(hours=-5)))
    assert as_naive_utc(aware) == datetime(2026, 3, 10, 14, 0)
    assert as_naive_utc(START) is START


def test_day_bounds():
    start, end = day_bounds(datetime(2026, 3, 10, 15, 45))
    assert start == datetime(2026, 3, 10)
    assert end == datetime(2026, 3, 11)


def test_month_start_crosses_year_boundary():
    now = datetime(2026, 1, 20, 12, 0)
    assert month_start(now) == datetime(2026, 1, 1)
    assert month_start(now, offset=-1) == datetime(2025, 12, 1)
    assert month_start(datetime(2026, 12, 5), offset=1) == datetime(2027, 1, 1)
