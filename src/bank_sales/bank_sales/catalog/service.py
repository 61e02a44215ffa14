from __future__ import annotations

from typing import FrozenSet, Sequence

from ..core.enums import Role
from ..core.exceptions import AuthorizationError, NotFoundError
from .model import Franchise, Product, RoleInfo
from .repository import CatalogRepository


class CatalogService:
    """Use case: expose reference data and answer catalog membership checks."""

    def __init__(self, catalog: CatalogRepository):
        self._catalog = catalog

    def list_products(self) -> Sequence[Product]:
        return self._catalog.list_products()

    def get_product(self, product_id: int) -> Product:
        product = self._catalog.get_product(int(product_id))
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_franchises(self) -> Sequence[Franchise]:
        return self._catalog.list_franchises()

    def get_franchise(self, franchise_id: int) -> Franchise:
        franchise = self._catalog.get_franchise(int(franchise_id))
        if not franchise:
            raise NotFoundError("Franchise not found")
        return franchise

    def list_roles(self, *, current_role: Role) -> Sequence[RoleInfo]:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")
        return self._catalog.list_roles()

    def product_ids(self) -> FrozenSet[int]:
        return frozenset(p.product_id for p in self._catalog.list_products())

    def franchise_ids(self) -> FrozenSet[int]:
        return frozenset(f.franchise_id for f in self._catalog.list_franchises())
