from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Any

from dateutil.relativedelta import relativedelta

from ..core.exceptions import ValidationError


def parse_iso_date(value: Any) -> date:
    """Parse YYYY-MM-DD string into date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError("Date must be in YYYY-MM-DD format")


def today_local() -> date:
    """Current local date.

    Note: Wrapped so tests can patch/mock it easier.
    """
    return date.today()


def month_from_offset(today: date, offset: int) -> tuple[int, int]:
    """(year, month) of the month `offset` months away from `today`."""
    shifted = today.replace(day=1) + relativedelta(months=offset)
    return shifted.year, shifted.month


def month_bounds(year: int, month: int) -> tuple[date, date]:
    first = date(year, month, 1)
    last = first + relativedelta(months=1) - timedelta(days=1)
    return first, last


def week_start(anchor: date) -> date:
    """Monday of the week containing `anchor`."""
    return anchor - timedelta(days=anchor.weekday())


def week_from_offset(today: date, offset: int) -> list[date]:
    monday = week_start(today + timedelta(weeks=offset))
    return [monday + timedelta(days=i) for i in range(7)]


def format_long_date(value: date) -> str:
    """e.g. 'Monday 4 March 2024' (en-GB long form used in e-mails)."""
    return f"{value.strftime('%A')} {value.day} {value.strftime('%B %Y')}"
