from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from ..core.enums import TimesheetStatus


@dataclass(frozen=True)
class Timesheet:
    """Domain entity: one dated hours entry of a user against a project."""

    timesheet_id: int
    user_id: int
    project_id: int
    work_date: date
    hours_worked: Decimal
    status: TimesheetStatus
    notes: Optional[str] = None
    last_edited_by: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class TimesheetRow:
    """Read-model: a timesheet joined with its user, project and last editor."""

    timesheet_id: int
    user_id: int
    user_name: str
    user_email: str
    user_hourly_rate: Decimal
    project_id: int
    project_name: str
    work_date: date
    hours_worked: Decimal
    status: TimesheetStatus
    notes: Optional[str] = None
    last_edited_by: Optional[int] = None
    last_edited_by_name: Optional[str] = None
    created_at: Optional[datetime] = None
