from __future__ import annotations

from typing import Dict, List, Optional, Sequence, Tuple

from mysql.connector import IntegrityError

from ..core.enums import Role
from ..core.exceptions import DuplicateEntryError, ValidationError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, is_duplicate_key, is_row_referenced
from .model import User
from .repository import UserRepository

_SELECT = """
    SELECT u.user_id, u.full_name, u.email, u.password_hash, u.role_id,
           r.role_name, u.created_at, u.updated_at
    FROM users u
    JOIN roles r ON r.role_id = u.role_id
"""


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _user(row: dict) -> User:
        return User(
            user_id=int(row["user_id"]),
            full_name=row["full_name"],
            email=row["email"],
            password_hash=row["password_hash"],
            role=Role(int(row["role_id"])),
            role_name=row.get("role_name") or "",
            created_at=row.get("created_at"),
            updated_at=row.get("updated_at"),
        )

    def get_by_id(self, user_id: int) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.user_id=%s", (int(user_id),))
            row = fetchone(cur)
            return self._user(row) if row else None

    def get_by_email(self, email: str) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE u.email=%s", (email,))
            row = fetchone(cur)
            return self._user(row) if row else None

    def email_exists(self, email: str, *, exclude_user_id: Optional[int] = None) -> bool:
        sql = "SELECT 1 AS found FROM users WHERE email=%s"
        params: List[object] = [email]
        if exclude_user_id is not None:
            sql += " AND user_id<>%s"
            params.append(int(exclude_user_id))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql + " LIMIT 1", tuple(params))
            return fetchone(cur) is not None

    def create_user(self, *, full_name: str, email: str, password_hash: str, role: Role) -> int:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    INSERT INTO users(full_name, email, password_hash, role_id)
                    VALUES(%s,%s,%s,%s)
                    """,
                    (full_name, email, password_hash, role.value),
                )
                return int(cur.lastrowid)
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateEntryError("Email already registered")
            raise

    def update_user(
        self,
        user_id: int,
        *,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> bool:
        columns: List[str] = []
        params: List[object] = []
        for column, value in (
            ("full_name", full_name),
            ("email", email),
            ("password_hash", password_hash),
            ("role_id", role.value if role is not None else None),
        ):
            if value is not None:
                columns.append(f"{column}=%s")
                params.append(value)
        if not columns:
            return False

        params.append(int(user_id))
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    f"UPDATE users SET {', '.join(columns)}, updated_at=CURRENT_TIMESTAMP WHERE user_id=%s",
                    tuple(params),
                )
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_duplicate_key(e):
                raise DuplicateEntryError("Email already registered")
            raise

    def delete_by_id(self, user_id: int) -> bool:
        try:
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
                return cur.rowcount > 0
        except IntegrityError as e:
            if is_row_referenced(e):
                raise ValidationError("Cannot delete a user who has registered sales")
            raise

    def list_page(
        self,
        *,
        search: Optional[str] = None,
        role: Optional[Role] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[Sequence[User], int]:
        where: List[str] = []
        params: List[object] = []
        if search:
            where.append("(u.full_name LIKE %s OR u.email LIKE %s)")
            like = f"%{search}%"
            params.extend([like, like])
        if role is not None:
            where.append("u.role_id=%s")
            params.append(role.value)
        clause = f" WHERE {' AND '.join(where)}" if where else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM users u{clause}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)
            cur.execute(
                _SELECT + clause + " ORDER BY u.created_at DESC, u.user_id DESC LIMIT %s OFFSET %s",
                tuple(params + [int(limit), int(offset)]),
            )
            return [self._user(r) for r in fetchall(cur)], total

    def count_by_role(self) -> Dict[Role, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role_id, COUNT(*) AS total FROM users GROUP BY role_id")
            out: Dict[Role, int] = {r: 0 for r in Role}
            for row in fetchall(cur):
                out[Role(int(row["role_id"]))] = int(row["total"])
            return out
