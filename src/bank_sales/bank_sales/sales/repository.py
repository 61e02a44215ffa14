from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional, Protocol, Sequence, Tuple

from ..core.enums import SaleStatus
from .model import Sale, SaleView
from .scope import SaleScope


class SaleRepository(Protocol):
    """Repository interface for Sale.

    Note (DIP): SaleService depends on this interface, not on MySQL.
    """

    def get_by_id(self, sale_id: int) -> Optional[Sale]:
        raise NotImplementedError

    def get_view(self, sale_id: int) -> Optional[SaleView]:
        raise NotImplementedError

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
        """Insert and return the new id. updater = creator, updated_at = created_at."""

        raise NotImplementedError

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
        """Overwrite every mutable column with the merged record."""

        raise NotImplementedError

    def delete_by_id(self, sale_id: int) -> bool:
        raise NotImplementedError

    def list_views(
        self,
        scope: SaleScope,
        *,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> Tuple[Sequence[SaleView], int]:
        """Return (page ordered by created_at DESC, id DESC; total in scope). ``limit=None`` means all."""

        raise NotImplementedError
