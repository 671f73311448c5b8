from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional, Protocol, Sequence

from ..core.enums import TimesheetStatus
from .model import Timesheet, TimesheetRow


class TimesheetRepository(Protocol):
    """Rows come back ordered by date descending, then by id ascending."""

    def get_row(self, timesheet_id: int) -> Optional[TimesheetRow]:
        raise NotImplementedError

    def find_for_user_project_date(self, *, user_id: int, project_id: int, work_date: date) -> Optional[Timesheet]:
        raise NotImplementedError

    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimesheetRow]:
        raise NotImplementedError

    def list_rows(
        self,
        *,
        status: Optional[TimesheetStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimesheetRow]:
        raise NotImplementedError

    def create(
        self,
        *,
        user_id: int,
        project_id: int,
        work_date: date,
        hours_worked: Decimal,
        notes: Optional[str],
        status: TimesheetStatus,
        last_edited_by: Optional[int] = None,
    ) -> int:
        raise NotImplementedError

    def update(
        self,
        timesheet_id: int,
        *,
        last_edited_by: int,
        status: Optional[TimesheetStatus] = None,
        hours_worked: Optional[Decimal] = None,
    ) -> bool:
        raise NotImplementedError

    def delete(self, timesheet_id: int) -> bool:
        raise NotImplementedError

    def count_by_status(self, status: TimesheetStatus) -> int:
        raise NotImplementedError

    def sum_hours(
        self,
        *,
        start: date,
        end: date,
        statuses: Optional[Iterable[TimesheetStatus]] = None,
    ) -> Decimal:
        raise NotImplementedError
