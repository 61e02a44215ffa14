from __future__ import annotations

from decimal import Decimal
from typing import Protocol, Sequence, Tuple

from ..core.enums import Period
from ..sales.scope import SaleScope
from .model import AdvisorBucket, PeriodBucket, ProductBucket, StatusBucket


class StatsRepository(Protocol):
    """Aggregate reads over the sales matching a SaleScope."""

    def totals(self, scope: SaleScope) -> Tuple[int, Decimal]:
        """Return (count, sum of requested_amount); (0, 0) when empty."""

        raise NotImplementedError

    def group_by_status(self, scope: SaleScope) -> Sequence[StatusBucket]:
        raise NotImplementedError

    def group_by_product(self, scope: SaleScope) -> Sequence[ProductBucket]:
        raise NotImplementedError

    def group_by_creator(self, scope: SaleScope) -> Sequence[AdvisorBucket]:
        raise NotImplementedError

    def group_by_period(self, scope: SaleScope, period: Period) -> Sequence[PeriodBucket]:
        """Buckets ordered by period label ascending."""

        raise NotImplementedError
