from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AssignmentRow, SupervisorAssignment
from .repository import AssignmentRepository


class MySQLAssignmentRepository(AssignmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, *, user_id: int, project_id: int) -> Optional[SupervisorAssignment]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT user_id, project_id, assigned_at
                FROM supervisor_projects
                WHERE user_id=%s AND project_id=%s
                """,
                (user_id, project_id),
            )
            row = fetchone(cur)
            if not row:
                return None
            return SupervisorAssignment(
                user_id=int(row["user_id"]),
                project_id=int(row["project_id"]),
                assigned_at=row.get("assigned_at"),
            )

    def list_all(self) -> Sequence[AssignmentRow]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sp.user_id, u.name AS user_name, u.email AS user_email,
                       sp.project_id, p.name AS project_name, sp.assigned_at
                FROM supervisor_projects sp
                JOIN users u ON u.user_id = sp.user_id
                JOIN projects p ON p.project_id = sp.project_id
                ORDER BY sp.assigned_at DESC
                """
            )
            return [
                AssignmentRow(
                    user_id=int(r["user_id"]),
                    user_name=r["user_name"],
                    user_email=r["user_email"],
                    project_id=int(r["project_id"]),
                    project_name=r["project_name"],
                    assigned_at=r.get("assigned_at"),
                )
                for r in fetchall(cur)
            ]

    def list_project_ids_for_user(self, user_id: int) -> Sequence[int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT project_id FROM supervisor_projects WHERE user_id=%s", (user_id,))
            return [int(r["project_id"]) for r in fetchall(cur)]

    def create(self, *, user_id: int, project_id: int) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO supervisor_projects(user_id, project_id) VALUES(%s,%s)",
                (user_id, project_id),
            )

    def delete(self, *, user_id: int, project_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM supervisor_projects WHERE user_id=%s AND project_id=%s",
                (user_id, project_id),
            )
            return cur.rowcount > 0
