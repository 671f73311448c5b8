"""JSON shapes of the HTTP API (camelCase keys)."""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ..assignments.model import AssignmentRow
from ..projects.model import Project
from ..reports.presence import MonthlyPresence, PresenceCalendar
from ..reports.service import DashboardStats
from ..reports.weekly import WeeklyGrid
from ..timesheets.model import TimesheetRow
from ..users.model import User


def num(value: Optional[Decimal]) -> float:
    return float(value) if value is not None else 0.0


def iso(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def user_json(u: User) -> dict:
    return {
        "id": u.user_id,
        "name": u.name,
        "email": u.email,
        "role": u.role.value,
        "hourlyRate": num(u.hourly_rate),
        "isActive": u.is_active,
        "createdAt": iso(u.created_at),
    }


def project_json(p: Project) -> dict:
    return {
        "id": p.project_id,
        "name": p.name,
        "location": p.location,
        "isActive": p.is_active,
        "createdAt": iso(p.created_at),
        "timesheetCount": p.timesheet_count,
    }


def timesheet_json(t: TimesheetRow) -> dict:
    return {
        "id": t.timesheet_id,
        "userId": t.user_id,
        "projectId": t.project_id,
        "date": iso(t.work_date),
        "hoursWorked": num(t.hours_worked),
        "notes": t.notes,
        "status": t.status.value,
        "lastEditedBy": t.last_edited_by,
        "lastEditedByName": t.last_edited_by_name,
        "createdAt": iso(t.created_at),
        "user": {
            "id": t.user_id,
            "name": t.user_name,
            "email": t.user_email,
            "hourlyRate": num(t.user_hourly_rate),
        },
        "project": {"id": t.project_id, "name": t.project_name},
    }


def assignment_json(a: AssignmentRow) -> dict:
    return {
        "userId": a.user_id,
        "projectId": a.project_id,
        "assignedAt": iso(a.assigned_at),
        "user": {"id": a.user_id, "name": a.user_name, "email": a.user_email},
        "project": {"id": a.project_id, "name": a.project_name},
    }


def presence_json(p: MonthlyPresence) -> dict:
    return {
        "year": p.year,
        "month": p.month,
        "monthName": p.month_name,
        "workingDays": p.working_days,
        "totalDaysPresent": p.total_days_present,
        "totalHours": num(p.total_hours),
        "operatives": [
            {
                "id": o.user_id,
                "name": o.name,
                "monthlyHours": num(o.monthly_hours),
                "daysPresent": o.days_present,
                "totalWorkingDays": o.total_working_days,
                "presencePercentage": o.presence_percentage,
            }
            for o in p.operatives
        ],
    }


def calendar_json(c: PresenceCalendar) -> dict:
    return {
        "year": c.year,
        "month": c.month,
        "monthName": c.month_name,
        "totalWorkingDays": c.total_working_days,
        "totalPresent": c.total_present,
        "presencePercentage": c.presence_percentage,
        "totalHours": num(c.total_hours),
        "weeks": [[{"date": iso(d.day), "status": d.status.value} for d in week] for week in c.weeks],
    }


def weekly_json(w: WeeklyGrid) -> dict:
    return {
        "weekStart": iso(w.week_start),
        "weekEnd": iso(w.week_end),
        "days": [iso(d) for d in w.days],
        "rows": [
            {
                "userId": r.user_id,
                "name": r.name,
                "hourlyRate": num(r.hourly_rate),
                "isActive": r.is_active,
                "totalHours": num(r.total_hours),
                "totalCost": num(r.total_cost),
                "cells": {
                    iso(d): {
                        "hours": num(c.hours),
                        "timesheetId": c.timesheet_id,
                        "timesheetIds": list(c.timesheet_ids),
                        "entryCount": c.entry_count,
                    }
                    for d, c in r.cells.items()
                },
            }
            for r in w.rows
        ],
        "dailyTotals": {iso(d): num(v) for d, v in w.daily_totals.items()},
        "grandTotalHours": num(w.grand_total_hours),
        "grandTotalCost": num(w.grand_total_cost),
        "daysWithHours": w.days_with_hours,
    }


def stats_json(s: DashboardStats) -> dict:
    return {
        "totalUsers": s.total_users,
        "totalProjects": s.total_projects,
        "pendingTimesheets": s.pending_timesheets,
        "totalHoursThisMonth": num(s.total_hours_this_month),
        "approvedHoursThisMonth": num(s.approved_hours_this_month),
    }
