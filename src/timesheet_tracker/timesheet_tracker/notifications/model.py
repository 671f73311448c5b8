from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Optional

from ..core.enums import NotificationAction, TimesheetStatus
from ..timesheets.model import TimesheetRow


@dataclass(frozen=True)
class TimesheetNotification:
    """Snapshot of a timesheet mutation, detached from the database row.

    `old_hours_worked` is only set when an update changed the hours.
    """

    action: NotificationAction
    timesheet_id: int
    work_date: date
    hours_worked: Decimal
    user_name: str
    user_email: str
    project_name: str
    status: TimesheetStatus
    editor_name: str
    old_hours_worked: Optional[Decimal] = None

    @classmethod
    def from_row(
        cls,
        action: NotificationAction,
        row: TimesheetRow,
        *,
        editor_name: str,
        old_hours_worked: Optional[Decimal] = None,
    ) -> "TimesheetNotification":
        return cls(
            action=action,
            timesheet_id=row.timesheet_id,
            work_date=row.work_date,
            hours_worked=row.hours_worked,
            user_name=row.user_name,
            user_email=row.user_email,
            project_name=row.project_name,
            status=row.status,
            editor_name=editor_name,
            old_hours_worked=old_hours_worked,
        )
