from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime]


def _as_date(value: DateLike) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def calculate_days_requested(start_date: DateLike, end_date: DateLike) -> int:
    """Inclusive number of calendar days between two dates.

    Time-of-day components are dropped before subtracting, so a range ending
    earlier in the day than it starts still counts whole days. A result of
    zero or less means the range is reversed.
    """
    return (_as_date(end_date) - _as_date(start_date)).days + 1


def ranges_overlap(
    a_start: DateLike, a_end: DateLike, b_start: DateLike, b_end: DateLike
) -> bool:
    """Whether two inclusive date ranges share at least one calendar day."""
    return _as_date(a_start) <= _as_date(b_end) and _as_date(a_end) >= _as_date(b_start)
