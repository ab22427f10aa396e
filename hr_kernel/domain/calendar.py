"""
Calendar-month arithmetic on dates and datetimes.

Month shifts clamp the day to the target month's length, so
``add_months(date(2024, 3, 31), -1)`` is ``date(2024, 2, 29)``.
"""

import calendar
from collections.abc import Iterator
from datetime import date, datetime
from typing import TypeVar

D = TypeVar("D", date, datetime)


def add_months(value: D, months: int) -> D:
    """Shift *value* by a whole number of calendar months."""
    month_index = value.year * 12 + (value.month - 1) + months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def month_start(value: date, months_back: int = 0) -> date:
    """First day of the month *months_back* months before *value*'s month."""
    return add_months(date(value.year, value.month, 1), -months_back)


def month_end(year: int, month: int) -> date:
    return date(year, month, calendar.monthrange(year, month)[1])


def iter_months(start: date, end: date) -> Iterator[tuple[int, int]]:
    """Yield (year, month) for every month from *start*'s through *end*'s."""
    current = date(start.year, start.month, 1)
    last = date(end.year, end.month, 1)
    while current <= last:
        yield current.year, current.month
        current = add_months(current, 1)
