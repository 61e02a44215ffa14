from __future__ import annotations

from decimal import Decimal
from typing import Sequence, Tuple

from ..core.enums import Period, SaleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from ..sales.scope import SaleScope
from .model import AdvisorBucket, PeriodBucket, ProductBucket, StatusBucket
from .repository import StatsRepository

# DATE_FORMAT patterns; week uses ISO year/week so late-December days land in the right week.
PERIOD_FORMATS = {
    Period.DAY: "%Y-%m-%d",
    Period.WEEK: "%x-W%v",
    Period.MONTH: "%Y-%m",
}


class MySQLStatsRepository(StatsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def totals(self, scope: SaleScope) -> Tuple[int, Decimal]:
        where, params = scope.to_sql("s")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT COUNT(*) AS cnt, SUM(s.requested_amount) AS total FROM sales s WHERE {where}",
                tuple(params),
            )
            row = fetchone(cur) or {}
            return int(row.get("cnt") or 0), as_decimal(row.get("total"))

    def group_by_status(self, scope: SaleScope) -> Sequence[StatusBucket]:
        where, params = scope.to_sql("s")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.status, COUNT(*) AS cnt, SUM(s.requested_amount) AS total
                FROM sales s
                WHERE {where}
                GROUP BY s.status
                ORDER BY s.status
                """,
                tuple(params),
            )
            return [
                StatusBucket(status=SaleStatus(r["status"]), count=int(r["cnt"]), total_amount=as_decimal(r["total"]))
                for r in fetchall(cur)
            ]

    def group_by_product(self, scope: SaleScope) -> Sequence[ProductBucket]:
        where, params = scope.to_sql("s")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.product_id, p.product_name, COUNT(*) AS cnt, SUM(s.requested_amount) AS total
                FROM sales s
                JOIN products p ON p.product_id = s.product_id
                WHERE {where}
                GROUP BY s.product_id, p.product_name
                ORDER BY cnt DESC, s.product_id ASC
                """,
                tuple(params),
            )
            return [
                ProductBucket(
                    product_id=int(r["product_id"]),
                    product_name=r["product_name"],
                    count=int(r["cnt"]),
                    total_amount=as_decimal(r["total"]),
                )
                for r in fetchall(cur)
            ]

    def group_by_creator(self, scope: SaleScope) -> Sequence[AdvisorBucket]:
        where, params = scope.to_sql("s")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT s.creator_user_id, u.full_name, u.email, r.role_name,
                       COUNT(*) AS cnt, SUM(s.requested_amount) AS total
                FROM sales s
                JOIN users u ON u.user_id = s.creator_user_id
                JOIN roles r ON r.role_id = u.role_id
                WHERE {where}
                GROUP BY s.creator_user_id, u.full_name, u.email, r.role_name
                ORDER BY cnt DESC, s.creator_user_id ASC
                """,
                tuple(params),
            )
            return [
                AdvisorBucket(
                    user_id=int(r["creator_user_id"]),
                    user_name=r["full_name"],
                    user_email=r["email"],
                    user_role=r["role_name"],
                    count=int(r["cnt"]),
                    total_amount=as_decimal(r["total"]),
                )
                for r in fetchall(cur)
            ]

    def group_by_period(self, scope: SaleScope, period: Period) -> Sequence[PeriodBucket]:
        where, params = scope.to_sql("s")
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT DATE_FORMAT(s.created_at, %s) AS period, COUNT(*) AS cnt, SUM(s.requested_amount) AS total
                FROM sales s
                WHERE {where}
                GROUP BY period
                ORDER BY period ASC
                """,
                tuple([PERIOD_FORMATS[period]] + list(params)),
            )
            return [
                PeriodBucket(period=str(r["period"]), count=int(r["cnt"]), total_amount=as_decimal(r["total"]))
                for r in fetchall(cur)
            ]
