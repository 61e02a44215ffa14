from __future__ import annotations

from typing import Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Franchise, Product, RoleInfo
from .repository import CatalogRepository


class MySQLCatalogRepository(CatalogRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    @staticmethod
    def _product(row: dict) -> Product:
        return Product(product_id=int(row["product_id"]), name=row["product_name"], description=row.get("description"))

    def list_products(self) -> Sequence[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT product_id, product_name, description FROM products ORDER BY product_id")
            return [self._product(r) for r in fetchall(cur)]

    def get_product(self, product_id: int) -> Optional[Product]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT product_id, product_name, description FROM products WHERE product_id=%s",
                (int(product_id),),
            )
            row = fetchone(cur)
            return self._product(row) if row else None

    def list_franchises(self) -> Sequence[Franchise]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT franchise_id, franchise_name FROM franchises ORDER BY franchise_id")
            return [Franchise(franchise_id=int(r["franchise_id"]), name=r["franchise_name"]) for r in fetchall(cur)]

    def get_franchise(self, franchise_id: int) -> Optional[Franchise]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT franchise_id, franchise_name FROM franchises WHERE franchise_id=%s",
                (int(franchise_id),),
            )
            row = fetchone(cur)
            if not row:
                return None
            return Franchise(franchise_id=int(row["franchise_id"]), name=row["franchise_name"])

    def list_roles(self) -> Sequence[RoleInfo]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT role_id, role_name, description FROM roles ORDER BY role_id")
            return [
                RoleInfo(role_id=int(r["role_id"]), name=r["role_name"], description=r.get("description"))
                for r in fetchall(cur)
            ]
