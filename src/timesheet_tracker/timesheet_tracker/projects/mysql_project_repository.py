from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, db_cursor, fetchall, fetchone
from .model import Project
from .repository import UNCHANGED, ProjectRepository


def _row_to_project(row: Dict[str, Any]) -> Project:
    return Project(
        project_id=int(row["project_id"]),
        name=row["name"],
        location=row.get("location"),
        is_active=as_bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
        timesheet_count=int(row.get("timesheet_count") or 0),
    )


class MySQLProjectRepository(ProjectRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, project_id: int) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT project_id, name, location, is_active, created_at FROM projects WHERE project_id=%s",
                (project_id,),
            )
            row = fetchone(cur)
            return _row_to_project(row) if row else None

    def get_by_name(self, name: str) -> Optional[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT project_id, name, location, is_active, created_at FROM projects WHERE name=%s",
                (name,),
            )
            row = fetchone(cur)
            return _row_to_project(row) if row else None

    def list_all(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT p.project_id, p.name, p.location, p.is_active, p.created_at,
                       COUNT(t.timesheet_id) AS timesheet_count
                FROM projects p
                LEFT JOIN timesheets t ON t.project_id = p.project_id
                GROUP BY p.project_id, p.name, p.location, p.is_active, p.created_at
                ORDER BY p.name ASC
                """
            )
            return [_row_to_project(r) for r in fetchall(cur)]

    def list_active(self) -> Sequence[Project]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT project_id, name, location, is_active, created_at
                FROM projects
                WHERE is_active=1
                ORDER BY name ASC
                """
            )
            return [_row_to_project(r) for r in fetchall(cur)]

    def create_project(self, *, name: str, location: Optional[str]) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO projects(name, location, is_active) VALUES(%s,%s,1)",
                (name, location),
            )
            return int(cur.lastrowid)

    def update_project(
        self,
        project_id: int,
        *,
        name: Optional[str] = None,
        location: object = UNCHANGED,
        is_active: Optional[bool] = None,
    ) -> bool:
        sets: list[str] = []
        params: list[Any] = []
        if name is not None:
            sets.append("name=%s")
            params.append(name)
        if location is not UNCHANGED:
            sets.append("location=%s")
            params.append(location)
        if is_active is not None:
            sets.append("is_active=%s")
            params.append(1 if is_active else 0)
        if not sets:
            return self.get_by_id(project_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE projects SET {', '.join(sets)} WHERE project_id=%s", (*params, project_id))
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM projects WHERE project_id=%s", (project_id,))
            return fetchone(cur) is not None

    def count_active(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM projects WHERE is_active=1")
            row = fetchone(cur)
            return int(row["total"]) if row else 0
