from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Sequence

from ..timesheets.model import TimesheetRow
from ..users.model import User
from .calculator.base import CostCalculator
from .calculator.hourly_calculator import HourlyCostCalculator

_ZERO = Decimal("0")


@dataclass
class WeeklyCell:
    """Hours of one user on one day.

    Several entries on the same day are summed; `timesheet_id` is the first
    one seen and is what an edit of the cell acts on.
    """

    hours: Decimal = _ZERO
    timesheet_id: Optional[int] = None
    timesheet_ids: list[int] = field(default_factory=list)

    @property
    def entry_count(self) -> int:
        return len(self.timesheet_ids)

    def add(self, row: TimesheetRow) -> None:
        self.hours += row.hours_worked
        if self.timesheet_id is None:
            self.timesheet_id = row.timesheet_id
        self.timesheet_ids.append(row.timesheet_id)


@dataclass
class WeeklyGridRow:
    user_id: int
    name: str
    hourly_rate: Decimal
    is_active: bool
    cells: dict[date, WeeklyCell]
    total_hours: Decimal = _ZERO
    total_cost: Decimal = _ZERO


@dataclass
class WeeklyGrid:
    days: list[date]
    rows: list[WeeklyGridRow]
    daily_totals: dict[date, Decimal]
    grand_total_hours: Decimal
    grand_total_cost: Decimal

    @property
    def week_start(self) -> date:
        return self.days[0]

    @property
    def week_end(self) -> date:
        return self.days[-1]

    @property
    def days_with_hours(self) -> int:
        return sum(1 for d in self.days if self.daily_totals.get(d, _ZERO) > 0)


def build_weekly_grid(
    users: Iterable[User],
    rows: Iterable[TimesheetRow],
    days: Sequence[date],
    *,
    calculator: Optional[CostCalculator] = None,
) -> WeeklyGrid:
    """Bucket rows per (user, day) for one week.

    Rows for users outside `users` and dates outside `days` are ignored.
    Grid rows are sorted by total hours descending; ties keep input order.
    """
    calc = calculator or HourlyCostCalculator()
    week = list(days)

    grid: dict[int, WeeklyGridRow] = {}
    order: list[int] = []
    for u in users:
        grid[u.user_id] = WeeklyGridRow(
            user_id=u.user_id,
            name=u.name,
            hourly_rate=u.hourly_rate,
            is_active=u.is_active,
            cells={d: WeeklyCell() for d in week},
        )
        order.append(u.user_id)

    for r in rows:
        line = grid.get(r.user_id)
        if line is None or r.work_date not in line.cells:
            continue
        line.cells[r.work_date].add(r)

    daily_totals = {d: _ZERO for d in week}
    grand_hours = _ZERO
    grand_cost = _ZERO
    for uid in order:
        line = grid[uid]
        line.total_hours = sum((c.hours for c in line.cells.values()), _ZERO)
        line.total_cost = calc.cost(line.total_hours, line.hourly_rate)
        for d, cell in line.cells.items():
            daily_totals[d] += cell.hours
        grand_hours += line.total_hours
        grand_cost += line.total_cost

    ordered = sorted((grid[uid] for uid in order), key=lambda x: x.total_hours, reverse=True)
    return WeeklyGrid(
        days=week,
        rows=ordered,
        daily_totals=daily_totals,
        grand_total_hours=grand_hours,
        grand_total_cost=grand_cost,
    )
