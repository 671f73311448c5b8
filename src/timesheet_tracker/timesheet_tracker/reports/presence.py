"""Monthly presence: who worked on which weekdays, and how much.

All functions here are pure; they take snapshots of users and timesheet rows
and never touch storage. Every status counts towards hours and presence.
"""

from __future__ import annotations

import calendar as _calendar
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..core.enums import DayStatus
from ..timesheets.model import TimesheetRow
from ..users.model import User
from .calendar import attendance_percentage, is_weekend, iter_month, working_days_in_month


@dataclass(frozen=True)
class OperativePresence:
    user_id: int
    name: str
    monthly_hours: Decimal
    days_present: int
    total_working_days: int
    presence_percentage: int


@dataclass(frozen=True)
class MonthlyPresence:
    year: int
    month: int
    working_days: int
    operatives: list[OperativePresence] = field(default_factory=list)

    @property
    def month_name(self) -> str:
        return _calendar.month_name[self.month]

    @property
    def total_days_present(self) -> int:
        return sum(p.days_present for p in self.operatives)

    @property
    def total_hours(self) -> Decimal:
        return sum((p.monthly_hours for p in self.operatives), Decimal("0"))


@dataclass(frozen=True)
class CalendarDay:
    day: Optional[date]
    status: DayStatus


@dataclass(frozen=True)
class PresenceCalendar:
    year: int
    month: int
    weeks: list[list[CalendarDay]]
    total_hours: Decimal = Decimal("0")

    @property
    def month_name(self) -> str:
        return _calendar.month_name[self.month]

    @property
    def total_working_days(self) -> int:
        return sum(1 for w in self.weeks for d in w if d.status in (DayStatus.PRESENT, DayStatus.ABSENT))

    @property
    def total_present(self) -> int:
        return sum(1 for w in self.weeks for d in w if d.status == DayStatus.PRESENT)

    @property
    def presence_percentage(self) -> int:
        return attendance_percentage(self.total_present, self.total_working_days)


def _in_month(row: TimesheetRow, year: int, month: int) -> bool:
    return row.work_date.year == year and row.work_date.month == month


def build_presence(
    users: Iterable[User],
    rows: Iterable[TimesheetRow],
    *,
    year: int,
    month: int,
    today: date,
) -> MonthlyPresence:
    """Per-user presence for one month, sorted by hours descending (stable)."""
    working_days = working_days_in_month(year, month, today)

    dates_by_user: dict[int, set[date]] = {}
    hours_by_user: dict[int, Decimal] = {}
    for r in rows:
        if not _in_month(r, year, month):
            continue
        dates_by_user.setdefault(r.user_id, set()).add(r.work_date)
        hours_by_user[r.user_id] = hours_by_user.get(r.user_id, Decimal("0")) + r.hours_worked

    result: list[OperativePresence] = []
    for u in users:
        days_present = len(dates_by_user.get(u.user_id, ()))
        result.append(
            OperativePresence(
                user_id=u.user_id,
                name=u.name,
                monthly_hours=hours_by_user.get(u.user_id, Decimal("0")),
                days_present=days_present,
                total_working_days=working_days,
                presence_percentage=attendance_percentage(days_present, working_days),
            )
        )

    # sorted() is stable, ties keep the input order
    result = sorted(result, key=lambda p: p.monthly_hours, reverse=True)
    return MonthlyPresence(year=year, month=month, working_days=working_days, operatives=result)


def presence_calendar(
    rows: Sequence[TimesheetRow],
    *,
    year: int,
    month: int,
    today: date,
) -> PresenceCalendar:
    """Month grid for one user, weeks starting on Sunday, padded with empty cells."""
    worked = {r.work_date for r in rows if _in_month(r, year, month)}
    total_hours = sum((r.hours_worked for r in rows if _in_month(r, year, month)), Decimal("0"))

    weeks: list[list[CalendarDay]] = []
    week: list[CalendarDay] = []

    first = date(year, month, 1)
    # weekday(): Monday=0, so Sunday-first padding is (weekday + 1) % 7
    for _ in range((first.weekday() + 1) % 7):
        week.append(CalendarDay(None, DayStatus.EMPTY))

    for d in iter_month(year, month):
        if d > today:
            status = DayStatus.FUTURE
        elif is_weekend(d):
            status = DayStatus.WEEKEND
        elif d in worked:
            status = DayStatus.PRESENT
        else:
            status = DayStatus.ABSENT
        week.append(CalendarDay(d, status))
        if len(week) == 7:
            weeks.append(week)
            week = []

    if week:
        week.extend(CalendarDay(None, DayStatus.EMPTY) for _ in range(7 - len(week)))
        weeks.append(week)

    return PresenceCalendar(year=year, month=month, weeks=weeks, total_hours=total_hours)
