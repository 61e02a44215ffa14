from __future__ import annotations

from contextlib import contextmanager
from decimal import Decimal
from typing import Any, Dict, Iterator, List, Optional, Tuple

from mysql.connector import errorcode

from .connection import DatabaseConnection


@contextmanager
def db_cursor(db: DatabaseConnection, *, dictionary: bool = True) -> Iterator[Tuple[Any, Any]]:
    """Yield ``(connection, cursor)`` for one transaction.

    Commits when the block exits normally and rolls back when it raises.
    """
    conn = db.connect()
    cur = conn.cursor(dictionary=dictionary)
    try:
        yield conn, cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    return cur.fetchone() or None


def fetchall(cur) -> List[Dict[str, Any]]:
    return list(cur.fetchall() or [])


def as_decimal(value: Any) -> Decimal:
    """Normalize SUM/AVG results (NULL on empty sets) to Decimal."""
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_duplicate_key(exc: Exception) -> bool:
    return getattr(exc, "errno", None) == errorcode.ER_DUP_ENTRY


def is_row_referenced(exc: Exception) -> bool:
    return getattr(exc, "errno", None) in (errorcode.ER_ROW_IS_REFERENCED, errorcode.ER_ROW_IS_REFERENCED_2)
