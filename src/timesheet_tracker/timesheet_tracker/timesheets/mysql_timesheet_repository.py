from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Sequence

from ..core.enums import TimesheetStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Timesheet, TimesheetRow
from .repository import TimesheetRepository

_ROW_SELECT = """
    SELECT t.timesheet_id, t.user_id, u.name AS user_name, u.email AS user_email,
           u.hourly_rate AS user_hourly_rate, t.project_id, p.name AS project_name,
           t.work_date, t.hours_worked, t.status, t.notes, t.last_edited_by,
           e.name AS last_edited_by_name, t.created_at
    FROM timesheets t
    JOIN users u ON u.user_id = t.user_id
    JOIN projects p ON p.project_id = t.project_id
    LEFT JOIN users e ON e.user_id = t.last_edited_by
"""

_ORDER = " ORDER BY t.work_date DESC, t.timesheet_id ASC"


def _to_row(r: Dict[str, Any]) -> TimesheetRow:
    return TimesheetRow(
        timesheet_id=int(r["timesheet_id"]),
        user_id=int(r["user_id"]),
        user_name=r["user_name"],
        user_email=r["user_email"],
        user_hourly_rate=as_decimal(r["user_hourly_rate"]),
        project_id=int(r["project_id"]),
        project_name=r["project_name"],
        work_date=r["work_date"],
        hours_worked=as_decimal(r["hours_worked"]),
        status=TimesheetStatus(r["status"]),
        notes=r.get("notes"),
        last_edited_by=int(r["last_edited_by"]) if r.get("last_edited_by") is not None else None,
        last_edited_by_name=r.get("last_edited_by_name"),
        created_at=r.get("created_at"),
    )


def _range_filters(start: Optional[date], end: Optional[date]) -> tuple[list[str], list[Any]]:
    where: list[str] = []
    params: list[Any] = []
    if start is not None:
        where.append("t.work_date >= %s")
        params.append(start)
    if end is not None:
        where.append("t.work_date <= %s")
        params.append(end)
    return where, params


class MySQLTimesheetRepository(TimesheetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _select_rows(self, where: list[str], params: list[Any], limit: Optional[int]) -> Sequence[TimesheetRow]:
        sql = _ROW_SELECT
        if where:
            sql += " WHERE " + " AND ".join(where)
        sql += _ORDER
        if limit is not None:
            sql += " LIMIT %s"
            params = [*params, int(limit)]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [_to_row(r) for r in fetchall(cur)]

    def get_row(self, timesheet_id: int) -> Optional[TimesheetRow]:
        rows = self._select_rows(["t.timesheet_id = %s"], [timesheet_id], None)
        return rows[0] if rows else None

    def find_for_user_project_date(self, *, user_id: int, project_id: int, work_date: date) -> Optional[Timesheet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT timesheet_id, user_id, project_id, work_date, hours_worked, status,
                       notes, last_edited_by, created_at
                FROM timesheets
                WHERE user_id=%s AND project_id=%s AND work_date=%s
                ORDER BY timesheet_id ASC
                LIMIT 1
                """,
                (user_id, project_id, work_date),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Timesheet(
                timesheet_id=int(r["timesheet_id"]),
                user_id=int(r["user_id"]),
                project_id=int(r["project_id"]),
                work_date=r["work_date"],
                hours_worked=as_decimal(r["hours_worked"]),
                status=TimesheetStatus(r["status"]),
                notes=r.get("notes"),
                last_edited_by=r.get("last_edited_by"),
                created_at=r.get("created_at"),
            )

    def list_for_user(
        self,
        user_id: int,
        *,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimesheetRow]:
        where, params = _range_filters(start, end)
        return self._select_rows(["t.user_id = %s", *where], [user_id, *params], limit)

    def list_rows(
        self,
        *,
        status: Optional[TimesheetStatus] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> Sequence[TimesheetRow]:
        where, params = _range_filters(start, end)
        if status is not None:
            where.append("t.status = %s")
            params.append(status.value)
        return self._select_rows(where, params, limit)

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO timesheets(user_id, project_id, work_date, hours_worked, notes, status, last_edited_by)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (user_id, project_id, work_date, hours_worked, notes, status.value, last_edited_by),
            )
            return int(cur.lastrowid)

    def update(
        self,
        timesheet_id: int,
        *,
        last_edited_by: int,
        status: Optional[TimesheetStatus] = None,
        hours_worked: Optional[Decimal] = None,
    ) -> bool:
        sets = ["last_edited_by=%s"]
        params: list[Any] = [last_edited_by]
        if status is not None:
            sets.append("status=%s")
            params.append(status.value)
        if hours_worked is not None:
            sets.append("hours_worked=%s")
            params.append(hours_worked)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE timesheets SET {', '.join(sets)} WHERE timesheet_id=%s", (*params, timesheet_id))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM timesheets WHERE timesheet_id=%s", (timesheet_id,))
            return fetchone(cur) is not None

    def delete(self, timesheet_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timesheets WHERE timesheet_id=%s", (timesheet_id,))
            return cur.rowcount > 0

    def count_by_status(self, status: TimesheetStatus) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM timesheets WHERE status=%s", (status.value,))
            row = fetchone(cur)
            return int(row["total"]) if row else 0

    def sum_hours(
        self,
        *,
        start: date,
        end: date,
        statuses: Optional[Iterable[TimesheetStatus]] = None,
    ) -> Decimal:
        sql = "SELECT SUM(hours_worked) AS total FROM timesheets WHERE work_date >= %s AND work_date <= %s"
        params: list[Any] = [start, end]
        wanted = [s.value for s in statuses] if statuses is not None else []
        if statuses is not None:
            if not wanted:
                return Decimal("0")
            sql += " AND status IN (" + ", ".join(["%s"] * len(wanted)) + ")"
            params.extend(wanted)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            row = fetchone(cur)
            return as_decimal(row["total"] if row else None)
