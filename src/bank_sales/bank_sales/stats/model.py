from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.constants import MONEY_QUANT
from ..core.enums import SaleStatus


def money(value: Decimal) -> Decimal:
    return value.quantize(MONEY_QUANT)


def average(total: Decimal, count: int) -> Decimal:
    """total / count at cent precision; 0 for an empty group."""
    if not count:
        return Decimal("0.00")
    return (total / count).quantize(MONEY_QUANT)


@dataclass(frozen=True)
class ProductBucket:
    product_id: int
    product_name: str
    count: int
    total_amount: Decimal

    def to_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "count": self.count,
            "totalAmount": str(money(self.total_amount)),
            "averageAmount": str(average(self.total_amount, self.count)),
        }

    def to_top_dict(self) -> dict:
        return {
            "productId": self.product_id,
            "productName": self.product_name,
            "salesCount": self.count,
            "totalAmount": str(money(self.total_amount)),
        }


@dataclass(frozen=True)
class AdvisorBucket:
    user_id: int
    user_name: str
    user_email: str
    user_role: str
    count: int
    total_amount: Decimal

    def to_dict(self) -> dict:
        return {
            "userId": self.user_id,
            "userName": self.user_name,
            "userEmail": self.user_email,
            "userRole": self.user_role,
            "count": self.count,
            "totalAmount": str(money(self.total_amount)),
            "averageAmount": str(average(self.total_amount, self.count)),
        }


@dataclass(frozen=True)
class StatusBucket:
    status: SaleStatus
    count: int
    total_amount: Decimal

    def to_dict(self) -> dict:
        return {"status": self.status.value, "count": self.count, "totalAmount": str(money(self.total_amount))}


@dataclass(frozen=True)
class PeriodBucket:
    period: str
    count: int
    total_amount: Decimal

    def to_dict(self) -> dict:
        return {"period": self.period, "count": self.count, "totalAmount": str(money(self.total_amount))}
