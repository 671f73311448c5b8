from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from ..common.datetime_utils import month_bounds, month_from_offset, today_local, week_from_offset
from ..core.enums import Role, TimesheetStatus
from ..policy.model import Action, Actor
from ..policy.rules import require
from ..projects.repository import ProjectRepository
from ..timesheets.repository import TimesheetRepository
from ..users.repository import UserRepository
from .calculator.base import CostCalculator
from .calculator.hourly_calculator import HourlyCostCalculator
from .presence import MonthlyPresence, PresenceCalendar, build_presence, presence_calendar
from .weekly import WeeklyGrid, build_weekly_grid

_TRACKED_ROLES = (Role.OPERATIVE, Role.SUPERVISOR)


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    total_projects: int
    pending_timesheets: int
    total_hours_this_month: Decimal
    approved_hours_this_month: Decimal


class ReportService:
    """Read-only rollups computed on demand from the current timesheets."""

    def __init__(
        self,
        users: UserRepository,
        projects: ProjectRepository,
        timesheets: TimesheetRepository,
        *,
        calculator: Optional[CostCalculator] = None,
        today: Callable[[], date] = today_local,
    ):
        self._users = users
        self._projects = projects
        self._timesheets = timesheets
        self._calculator = calculator or HourlyCostCalculator()
        self._today = today

    def presence_for_month(self, actor: Actor, *, month_offset: int = 0) -> MonthlyPresence:
        """Active operatives and supervisors, one row each."""
        require(actor, Action.VIEW_PRESENCE)
        today = self._today()
        year, month = month_from_offset(today, month_offset)
        start, end = month_bounds(year, month)

        users = [u for u in self._users.list_all() if u.role in _TRACKED_ROLES and u.is_active]
        rows = self._timesheets.list_rows(start=start, end=end)
        return build_presence(users, rows, year=year, month=month, today=today)

    def own_calendar(self, actor: Actor, *, month_offset: int = 0) -> PresenceCalendar:
        require(actor, Action.VIEW_OWN_PRESENCE, target_user_id=actor.user_id)
        today = self._today()
        year, month = month_from_offset(today, month_offset)
        start, end = month_bounds(year, month)

        rows = self._timesheets.list_for_user(actor.user_id, start=start, end=end)
        return presence_calendar(rows, year=year, month=month, today=today)

    def weekly_grid(self, actor: Actor, *, week_offset: int = 0) -> WeeklyGrid:
        """All operatives and supervisors, inactive ones included for history."""
        require(actor, Action.VIEW_WEEKLY_GRID)
        days = week_from_offset(self._today(), week_offset)

        users = [u for u in self._users.list_all() if u.role in _TRACKED_ROLES]
        rows = self._timesheets.list_rows(start=days[0], end=days[-1])
        return build_weekly_grid(users, rows, days, calculator=self._calculator)

    def dashboard_stats(self, actor: Actor) -> DashboardStats:
        require(actor, Action.VIEW_STATS)
        today = self._today()
        start, end = month_bounds(today.year, today.month)
        return DashboardStats(
            total_users=self._users.count_by_role(Role.OPERATIVE),
            total_projects=self._projects.count_active(),
            pending_timesheets=self._timesheets.count_by_status(TimesheetStatus.PENDING),
            total_hours_this_month=self._timesheets.sum_hours(start=start, end=end),
            approved_hours_this_month=self._timesheets.sum_hours(
                start=start, end=end, statuses=[TimesheetStatus.APPROVED]
            ),
        )
