import pytest

from app.services.stats_service import attendance_rate, calculate_trend, upcoming_status


@pytest.mark.parametrize(
    "current,previous,expected",
    [
        (0, 0, 0),
        (5, 0, 100),
        (8, 10, -20),
        (15, 10, 50),
        (10, 10, 0),
        # 1/3 rounds down, 2/3 rounds up
        (4, 3, 33),
        (5, 3, 67),
    ],
)
def test_calculate_trend(current, previous, expected):
    assert calculate_trend(current, previous) == expected


def test_attendance_rate():
    assert attendance_rate(0, 0) == 0
    assert attendance_rate(3, 4) == 75
    assert attendance_rate(1, 8) == 13


@pytest.mark.parametrize(
    "hours,expected",
    [(1, "very-soon"), (2, "very-soon"), (3, "soon"), (24, "soon"), (25, "upcoming")],
)
def test_upcoming_status(hours, expected):
    assert upcoming_status(hours) == expected
