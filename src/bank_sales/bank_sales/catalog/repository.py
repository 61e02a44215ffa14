from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Franchise, Product, RoleInfo


class CatalogRepository(Protocol):
    """Read-only reference data: products, franchises, roles."""

    def list_products(self) -> Sequence[Product]:
        raise NotImplementedError

    def get_product(self, product_id: int) -> Optional[Product]:
        raise NotImplementedError

    def list_franchises(self) -> Sequence[Franchise]:
        raise NotImplementedError

    def get_franchise(self, franchise_id: int) -> Optional[Franchise]:
        raise NotImplementedError

    def list_roles(self) -> Sequence[RoleInfo]:
        raise NotImplementedError
