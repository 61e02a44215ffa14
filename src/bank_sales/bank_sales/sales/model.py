from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional, Sequence

from ..common.datetime_utils import isoformat
from ..core.enums import SaleStatus


def _money(value: Optional[Decimal]) -> Optional[str]:
    return None if value is None else str(value)


@dataclass(frozen=True)
class Sale:
    """Domain entity: Sale (one row of ``sales``)."""

    sale_id: int
    product_id: int
    requested_amount: Decimal
    franchise_id: Optional[int]
    rate: Optional[Decimal]
    status: SaleStatus
    creator_user_id: int
    updater_user_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class SaleView:
    """Read model returned by every sale endpoint.

    Note: Carries the names of the related product/franchise/users so callers
    never need a second lookup.
    """

    sale: Sale
    product_name: str
    franchise_name: Optional[str]
    creator_name: str
    creator_email: str
    creator_role: str
    updater_name: Optional[str]

    @property
    def sale_id(self) -> int:
        return self.sale.sale_id

    def to_dict(self) -> dict:
        s = self.sale
        return {
            "id": s.sale_id,
            "productId": s.product_id,
            "productName": self.product_name,
            "requestedAmount": _money(s.requested_amount),
            "franchiseId": s.franchise_id,
            "franchiseName": self.franchise_name,
            "rate": _money(s.rate),
            "status": s.status.value,
            "creatorUserId": s.creator_user_id,
            "creatorName": self.creator_name,
            "creatorEmail": self.creator_email,
            "creatorRole": self.creator_role,
            "updaterUserId": s.updater_user_id,
            "updaterName": self.updater_name,
            "createdAt": isoformat(s.created_at),
            "updatedAt": isoformat(s.updated_at),
        }


@dataclass(frozen=True)
class SalePage:
    items: Sequence[SaleView]
    page: int
    limit: int
    total: int
