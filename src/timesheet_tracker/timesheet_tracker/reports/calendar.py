from __future__ import annotations

from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal

from ..common.datetime_utils import month_bounds


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def iter_month(year: int, month: int):
    first, last = month_bounds(year, month)
    day = first
    while day <= last:
        yield day
        day += timedelta(days=1)


def working_days_in_month(year: int, month: int, today: date) -> int:
    """Weekdays of the month up to and including today."""
    return sum(1 for d in iter_month(year, month) if not is_weekend(d) and d <= today)


def attendance_percentage(days_present: int, working_days: int) -> int:
    if working_days <= 0:
        return 0
    ratio = Decimal(days_present) * 100 / Decimal(working_days)
    return int(ratio.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
