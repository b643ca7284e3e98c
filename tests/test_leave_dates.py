from datetime import date, datetime

import pytest

from app.utils.leave_dates import calculate_days_requested, ranges_overlap


@pytest.mark.parametrize(
    "start, end, expected",
    [
        (date(2025, 1, 6), date(2025, 1, 6), 1),
        (date(2025, 1, 6), date(2025, 1, 10), 5),
        (date(2024, 2, 27), date(2024, 3, 1), 4),  # leap year
        (date(2025, 12, 30), date(2026, 1, 2), 4),
    ],
)
def test_days_requested_is_inclusive(start, end, expected):
    assert calculate_days_requested(start, end) == expected


def test_days_requested_ignores_time_of_day():
    start = datetime(2025, 1, 6, 18, 30)
    end = datetime(2025, 1, 7, 8, 0)
    assert calculate_days_requested(start, end) == 2


def test_reversed_range_is_not_positive():
    assert calculate_days_requested(date(2025, 1, 10), date(2025, 1, 5)) <= 0


@pytest.mark.parametrize(
    "a, b",
    [
        ((date(2025, 3, 1), date(2025, 3, 5)), (date(2025, 3, 5), date(2025, 3, 9))),  # touching
        ((date(2025, 3, 1), date(2025, 3, 10)), (date(2025, 3, 3), date(2025, 3, 4))),  # containment
        ((date(2025, 3, 1), date(2025, 3, 5)), (date(2025, 3, 1), date(2025, 3, 5))),  # identical
        ((date(2025, 3, 1), date(2025, 3, 5)), (date(2025, 2, 25), date(2025, 3, 2))),  # partial
    ],
)
def test_overlapping_ranges_are_detected_both_ways(a, b):
    assert ranges_overlap(*a, *b)
    assert ranges_overlap(*b, *a)


def test_adjacent_ranges_do_not_overlap():
    assert not ranges_overlap(date(2025, 3, 1), date(2025, 3, 4), date(2025, 3, 5), date(2025, 3, 6))
    assert not ranges_overlap(date(2025, 3, 5), date(2025, 3, 6), date(2025, 3, 1), date(2025, 3, 4))
