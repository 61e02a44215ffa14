from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from ..core.enums import SaleStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import as_decimal, db_cursor, fetchall, fetchone
from .model import Sale, SaleView
from .repository import SaleRepository
from .scope import SaleScope

# One SELECT joins everything the read model needs.
VIEW_SELECT = """
    SELECT s.sale_id, s.product_id, s.requested_amount, s.franchise_id, s.rate, s.status,
           s.creator_user_id, s.updater_user_id, s.created_at, s.updated_at,
           p.product_name, f.franchise_name,
           c.full_name AS creator_name, c.email AS creator_email, cr.role_name AS creator_role,
           u.full_name AS updater_name
    FROM sales s
    JOIN products p ON p.product_id = s.product_id
    LEFT JOIN franchises f ON f.franchise_id = s.franchise_id
    JOIN users c ON c.user_id = s.creator_user_id
    JOIN roles cr ON cr.role_id = c.role_id
    LEFT JOIN users u ON u.user_id = s.updater_user_id
"""


def sale_from_row(row: dict) -> Sale:
    return Sale(
        sale_id=int(row["sale_id"]),
        product_id=int(row["product_id"]),
        requested_amount=as_decimal(row["requested_amount"]),
        franchise_id=int(row["franchise_id"]) if row.get("franchise_id") is not None else None,
        rate=as_decimal(row["rate"]) if row.get("rate") is not None else None,
        status=SaleStatus(row["status"]),
        creator_user_id=int(row["creator_user_id"]),
        updater_user_id=int(row["updater_user_id"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


def view_from_row(row: dict) -> SaleView:
    return SaleView(
        sale=sale_from_row(row),
        product_name=row["product_name"],
        franchise_name=row.get("franchise_name"),
        creator_name=row["creator_name"],
        creator_email=row["creator_email"],
        creator_role=row["creator_role"],
        updater_name=row.get("updater_name"),
    )


class MySQLSaleRepository(SaleRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, sale_id: int) -> Optional[Sale]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT sale_id, product_id, requested_amount, franchise_id, rate, status,
                       creator_user_id, updater_user_id, created_at, updated_at
                FROM sales
                WHERE sale_id=%s
                """,
                (int(sale_id),),
            )
            row = fetchone(cur)
            return sale_from_row(row) if row else None

    def get_view(self, sale_id: int) -> Optional[SaleView]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(VIEW_SELECT + " WHERE s.sale_id=%s", (int(sale_id),))
            row = fetchone(cur)
            return view_from_row(row) if row else None

    def create_sale(
        self,
        *,
        product_id: int,
        requested_amount: Decimal,
        franchise_id: Optional[int],
        rate: Optional[Decimal],
        status: SaleStatus,
        creator_user_id: int,
        created_at: datetime,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO sales(product_id, requested_amount, franchise_id, rate, status,
                                  creator_user_id, updater_user_id, created_at, updated_at)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    product_id,
                    requested_amount,
                    franchise_id,
                    rate,
                    status.value,
                    creator_user_id,
                    creator_user_id,
                    created_at,
                    created_at,
                ),
            )
            return int(cur.lastrowid)

    def update_sale(
        self,
        sale_id: int,
        *,
        product_id: int,
        requested_amount: Decimal,
        franchise_id: Optional[int],
        rate: Optional[Decimal],
        status: SaleStatus,
        updater_user_id: int,
        updated_at: datetime,
    ) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE sales
                SET product_id=%s, requested_amount=%s, franchise_id=%s, rate=%s, status=%s,
                    updater_user_id=%s, updated_at=%s
                WHERE sale_id=%s
                """,
                (
                    product_id,
                    requested_amount,
                    franchise_id,
                    rate,
                    status.value,
                    updater_user_id,
                    updated_at,
                    int(sale_id),
                ),
            )

    def delete_by_id(self, sale_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM sales WHERE sale_id=%s", (int(sale_id),))
            return cur.rowcount > 0

    def list_views(
        self,
        scope: SaleScope,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[SaleView], int]:
        where, params = scope.to_sql("s")
        sql = VIEW_SELECT + f" WHERE {where} ORDER BY s.created_at DESC, s.sale_id DESC"
        page_params: List[object] = list(params)
        if limit is not None:
            sql += " LIMIT %s OFFSET %s"
            page_params.extend([int(limit), int(offset)])

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT COUNT(*) AS total FROM sales s WHERE {where}", tuple(params))
            total = int((fetchone(cur) or {}).get("total") or 0)
            cur.execute(sql, tuple(page_params))
            return [view_from_row(r) for r in fetchall(cur)], total
