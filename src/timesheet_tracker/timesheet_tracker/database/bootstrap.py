from __future__ import annotations

import logging
import re
from decimal import Decimal
from pathlib import Path
from typing import Iterable

from werkzeug.security import generate_password_hash

from .connection import DatabaseConnection, DBConfig

logger = logging.getLogger(__name__)

DEMO_USERS = (
    # name, email, password, role, hourly rate
    ("Admin User", "admin@cwi-facades.co.uk", "admin123", "ADMIN", Decimal("0")),
    ("Site Supervisor", "supervisor@cwi-facades.co.uk", "supervisor123", "SUPERVISOR", Decimal("0")),
    ("John Smith", "john.smith@cwi-facades.co.uk", "operative123", "OPERATIVE", Decimal("22.50")),
)


def _strip_create_db_and_use(sql: str) -> str:
    # Keep schema.sql compatible regardless of DB name.
    sql = re.sub(r"(?im)^\s*CREATE\s+DATABASE\b.*?;\s*$", "", sql)
    sql = re.sub(r"(?im)^\s*USE\b.*?;\s*$", "", sql)
    return sql


def _strip_comments(sql: str) -> str:
    return "\n".join(line for line in sql.splitlines() if not line.lstrip().startswith("--"))


def _iter_sql_statements(sql: str) -> Iterable[str]:
    # Minimal SQL splitter for schema/seed files (handles ';' inside quotes).
    buf: list[str] = []
    in_single = False
    in_double = False
    escape = False

    for ch in sql:
        if escape:
            buf.append(ch)
            escape = False
            continue

        if ch == "\\":
            buf.append(ch)
            escape = True
            continue

        if ch == "'" and not in_double:
            in_single = not in_single
        elif ch == '"' and not in_single:
            in_double = not in_double
        elif ch == ";" and not in_single and not in_double:
            stmt = "".join(buf).strip()
            buf.clear()
            if stmt:
                yield stmt
            continue

        buf.append(ch)

    tail = "".join(buf).strip()
    if tail:
        yield tail


def _run_script(conn_factory: DatabaseConnection, path: Path) -> int:
    sql = _strip_create_db_and_use(_strip_comments(path.read_text(encoding="utf-8")))
    conn = conn_factory.connect()
    executed = 0
    try:
        cur = conn.cursor()
        for stmt in _iter_sql_statements(sql):
            cur.execute(stmt)
            executed += 1
        conn.commit()
    finally:
        conn.close()
    return executed


def ensure_database_exists(config: DBConfig) -> None:
    conn = DatabaseConnection(config).connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{config.database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(config: DBConfig, *, schema_path: str | Path) -> None:
    ensure_database_exists(config)
    count = _run_script(DatabaseConnection(config), Path(schema_path))
    logger.info("Applied schema (%d statements) to %s", count, config.describe())


def apply_seed_sql(config: DBConfig, *, seed_path: str | Path) -> None:
    count = _run_script(DatabaseConnection(config), Path(seed_path))
    logger.info("Applied seed (%d statements) to %s", count, config.describe())


def ensure_demo_users(config: DBConfig) -> None:
    """Insert the demo accounts if missing; existing accounts are left untouched."""
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor(dictionary=True)
        for name, email, password, role, hourly_rate in DEMO_USERS:
            cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
            if cur.fetchone():
                continue
            cur.execute(
                """
                INSERT INTO users (name, email, password_hash, role, hourly_rate, is_active)
                VALUES (%s, %s, %s, %s, %s, 1)
                """,
                (name, email, generate_password_hash(password), role, hourly_rate),
            )
            logger.info("Created demo user %s", email)
        conn.commit()
    finally:
        conn.close()


def list_tables(config: DBConfig) -> list[str]:
    conn = DatabaseConnection(config).connect()
    try:
        cur = conn.cursor()
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
    finally:
        conn.close()
