from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_bool, as_decimal, db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_USER_COLUMNS = "user_id, name, email, password_hash, role, hourly_rate, is_active, created_at"


def _row_to_user(row: Dict[str, Any]) -> User:
    return User(
        user_id=int(row["user_id"]),
        name=row["name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        hourly_rate=as_decimal(row["hourly_rate"]),
        is_active=as_bool(row.get("is_active", 1)),
        created_at=row.get("created_at"),
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE user_id=%s", (user_id,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users WHERE email=%s", (email,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def list_all(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_USER_COLUMNS} FROM users ORDER BY name ASC, user_id ASC")
            return [_row_to_user(r) for r in fetchall(cur)]

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        hourly_rate: Decimal,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(name, email, password_hash, role, hourly_rate, is_active)
                VALUES(%s,%s,%s,%s,%s,1)
                """,
                (name, email, password_hash, role.value, hourly_rate),
            )
            return int(cur.lastrowid)

    def update_user(
        self,
        user_id: int,
        *,
        is_active: Optional[bool] = None,
        hourly_rate: Optional[Decimal] = None,
    ) -> bool:
        sets: list[str] = []
        params: list[Any] = []
        if is_active is not None:
            sets.append("is_active=%s")
            params.append(1 if is_active else 0)
        if hourly_rate is not None:
            sets.append("hourly_rate=%s")
            params.append(hourly_rate)
        if not sets:
            return self.get_by_id(user_id) is not None

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"UPDATE users SET {', '.join(sets)} WHERE user_id=%s", (*params, user_id))
            if cur.rowcount > 0:
                return True
            # MySQL reports 0 affected rows when values did not change
            cur.execute("SELECT 1 AS found FROM users WHERE user_id=%s", (user_id,))
            return fetchone(cur) is not None

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE users SET password_hash=%s WHERE user_id=%s", (password_hash, user_id))
            return cur.rowcount > 0

    def delete_with_timesheets(self, user_id: int) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM timesheets WHERE user_id=%s", (user_id,))
            removed = int(cur.rowcount)
            cur.execute("DELETE FROM users WHERE user_id=%s", (user_id,))
            if cur.rowcount == 0:
                raise LookupError(f"user {user_id} vanished during delete")
            return removed

    def count_by_role(self, role: Role) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM users WHERE role=%s", (role.value,))
            row = fetchone(cur)
            return int(row["total"]) if row else 0
