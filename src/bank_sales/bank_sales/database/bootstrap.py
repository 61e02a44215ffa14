"""Schema and seed helpers used by ``create_app`` and ``scripts/``.

The SQL files carry their own ``CREATE DATABASE`` / ``USE`` lines for manual
use in a MySQL client; those are dropped here so the configured database
name always wins.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Iterator, Mapping

from loguru import logger
from werkzeug.security import generate_password_hash

from ..core.enums import Role
from .connection import DatabaseConnection, DBConfig
from .mysql_base import db_cursor, fetchone

_CREATE_DB_OR_USE = re.compile(r"(?im)^\s*(?:CREATE\s+DATABASE|USE)\b[^;]*;\s*$")
_LINE_COMMENT = re.compile(r"(?m)^\s*--.*$")
# A run of quoted literals and non-delimiter characters, i.e. one statement.
_STATEMENT = re.compile(r"""(?:'(?:\\.|[^'\\])*'|"(?:\\.|[^"\\])*"|[^;'"])+""", re.S)


def _db(db_config: Mapping) -> DatabaseConnection:
    return DatabaseConnection.for_config(DBConfig.from_mapping(db_config))


def iter_sql_statements(sql: str) -> Iterator[str]:
    """Split a script on ``;`` outside quoted literals."""
    for match in _STATEMENT.finditer(sql):
        stmt = match.group(0).strip()
        if stmt:
            yield stmt


def load_sql_script(path: str | Path) -> str:
    sql = Path(path).read_text(encoding="utf-8")
    return _CREATE_DB_OR_USE.sub("", _LINE_COMMENT.sub("", sql))


def _run_script(db_config: Mapping, path: str | Path) -> int:
    count = 0
    with db_cursor(_db(db_config), dictionary=False) as (_, cur):
        for stmt in iter_sql_statements(load_sql_script(path)):
            cur.execute(stmt)
            count += 1
    return count


def ensure_database_exists(db_config: Mapping) -> None:
    db = _db(db_config)
    conn = db.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{db.config.database}` "
            "CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(db_config: Mapping, *, schema_path: str | Path) -> None:
    ensure_database_exists(db_config)
    count = _run_script(db_config, schema_path)
    logger.info("Schema applied from {} ({} statements)", schema_path, count)


def apply_seed_sql(db_config: Mapping, *, seed_path: str | Path) -> None:
    count = _run_script(db_config, seed_path)
    logger.info("Reference data seeded from {} ({} statements)", seed_path, count)


def ensure_admin_user(db_config: Mapping, *, email: str, password: str, full_name: str = "Administrator") -> None:
    """Create the bootstrap admin account, or reset its password and role if it exists."""
    email = email.strip().lower()
    password_hash = generate_password_hash(password)
    with db_cursor(_db(db_config)) as (_, cur):
        cur.execute("SELECT user_id FROM users WHERE email=%s", (email,))
        existing = fetchone(cur)
        if existing:
            cur.execute(
                "UPDATE users SET password_hash=%s, role_id=%s WHERE user_id=%s",
                (password_hash, Role.ADMIN.value, existing["user_id"]),
            )
        else:
            cur.execute(
                "INSERT INTO users (full_name, email, password_hash, role_id) VALUES (%s, %s, %s, %s)",
                (full_name, email, password_hash, Role.ADMIN.value),
            )
    logger.info("Admin account ready: {}", email)


def list_tables(db_config: Mapping) -> list[str]:
    with db_cursor(_db(db_config), dictionary=False) as (_, cur):
        cur.execute("SHOW TABLES")
        return [row[0] for row in cur.fetchall()]
