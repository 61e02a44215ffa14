from __future__ import annotations

from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional, Sequence

from loguru import logger

from ..common import datetime_utils
from ..common.validators import parse_positive_int
from ..core.constants import (
    DEFAULT_RECENT_LIMIT,
    DEFAULT_TOP_LIMIT,
    DEFAULT_TREND_DAYS,
    MAX_PAGE_LIMIT,
    MAX_TREND_DAYS,
)
from ..core.enums import Period, Role, SaleStatus
from ..core.exceptions import OutOfRangeError, ValidationError
from ..sales.model import SaleView
from ..sales.repository import SaleRepository
from ..sales.scope import SaleFilters, SaleScope, build_sale_scope
from .model import AdvisorBucket, PeriodBucket, ProductBucket, StatusBucket, average, money
from .repository import StatsRepository

# Keys of the per-status counters in dashboard payloads.
STATUS_KEYS = {
    SaleStatus.OPEN: "open",
    SaleStatus.IN_PROCESS: "inProcess",
    SaleStatus.FINISHED: "finished",
}


def parse_period(value: Any) -> Period:
    try:
        return Period(str(value).strip().lower())
    except ValueError:
        raise ValidationError("Valid period is required (day, week, or month)")


def _bounded_limit(value: Any, default: int) -> int:
    if value in (None, ""):
        return default
    return min(parse_positive_int(value, "limit"), MAX_PAGE_LIMIT)


def parse_trend_days(value: Any) -> int:
    if value in (None, ""):
        return DEFAULT_TREND_DAYS
    days = parse_positive_int(value, "days")
    if days > MAX_TREND_DAYS:
        raise OutOfRangeError("days", 1, MAX_TREND_DAYS)
    return days


class StatsService:
    """Use case: dashboard aggregates.

    Every method derives its SaleScope from the caller, so an Advisor's numbers
    only ever cover their own sales.
    """

    def __init__(self, stats: StatsRepository, sales: SaleRepository):
        self._stats = stats
        self._sales = sales

    @staticmethod
    def _scope(current_role: Role, current_user_id: int, filters: Optional[SaleFilters]) -> SaleScope:
        return build_sale_scope(current_role=current_role, current_user_id=current_user_id, filters=filters)

    def total_amount(
        self, *, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None
    ) -> Decimal:
        _, total = self._stats.totals(self._scope(current_role, current_user_id, filters))
        return money(total)

    def count_by_status(
        self, *, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None
    ) -> Dict[str, int]:
        buckets = self._stats.group_by_status(self._scope(current_role, current_user_id, filters))
        counts = {key: 0 for key in STATUS_KEYS.values()}
        for b in buckets:
            counts[STATUS_KEYS[b.status]] = b.count
        counts["total"] = sum(b.count for b in buckets)
        return counts

    def dashboard_metrics(
        self, *, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None
    ) -> dict:
        scope = self._scope(current_role, current_user_id, filters)
        count, total = self._stats.totals(scope)
        by_status = {key: 0 for key in STATUS_KEYS.values()}
        for b in self._stats.group_by_status(scope):
            by_status[STATUS_KEYS[b.status]] = b.count

        logger.debug("Dashboard metrics computed for user {}", current_user_id)
        return {
            "totalSales": count,
            "totalAmount": str(money(total)),
            "averageAmount": str(average(total, count)),
            "salesByStatus": by_status,
        }

    def by_product(
        self, *, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None
    ) -> Sequence[ProductBucket]:
        buckets = self._stats.group_by_product(self._scope(current_role, current_user_id, filters))
        return sorted(buckets, key=lambda b: (-b.count, b.product_id))

    def by_advisor(
        self, *, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None
    ) -> Sequence[AdvisorBucket]:
        # Empty rather than an error: the comprehensive dashboard calls this for every role.
        if current_role != Role.ADMIN:
            logger.warning("User {} asked for sales by advisor without admin role", current_user_id)
            return []
        buckets = self._stats.group_by_creator(self._scope(current_role, current_user_id, filters))
        return sorted(buckets, key=lambda b: (-b.count, b.user_id))

    def by_status(
        self, *, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None
    ) -> Sequence[StatusBucket]:
        return self._stats.group_by_status(self._scope(current_role, current_user_id, filters))

    def by_period(
        self,
        period: Any,
        *,
        current_role: Role,
        current_user_id: int,
        filters: Optional[SaleFilters] = None,
    ) -> Sequence[PeriodBucket]:
        p = period if isinstance(period, Period) else parse_period(period)
        return self._stats.group_by_period(self._scope(current_role, current_user_id, filters), p)

    def recent(self, *, current_role: Role, current_user_id: int, limit: Any = None) -> Sequence[SaleView]:
        n = _bounded_limit(limit, DEFAULT_RECENT_LIMIT)
        items, _ = self._sales.list_views(self._scope(current_role, current_user_id, None), offset=0, limit=n)
        return items

    def top_products(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        limit: Any = None,
        filters: Optional[SaleFilters] = None,
    ) -> Sequence[ProductBucket]:
        n = _bounded_limit(limit, DEFAULT_TOP_LIMIT)
        return list(self.by_product(current_role=current_role, current_user_id=current_user_id, filters=filters))[:n]

    def trends(self, *, current_role: Role, current_user_id: int, days: Any = None) -> dict:
        n = parse_trend_days(days)
        now = datetime_utils.now_utc()
        start = (now - timedelta(days=n)).replace(hour=0, minute=0, second=0)
        end = datetime_utils.end_of_day(now.replace(hour=0, minute=0, second=0))
        buckets = self.by_period(
            Period.DAY,
            current_role=current_role,
            current_user_id=current_user_id,
            filters=SaleFilters(start_date=start, end_date=end),
        )
        return {
            "period": f"Last {n} days",
            "startDate": start.date().isoformat(),
            "endDate": now.date().isoformat(),
            "trends": [b.to_dict() for b in buckets],
        }

    def comprehensive(
        self, *, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None
    ) -> dict:
        kwargs = dict(current_role=current_role, current_user_id=current_user_id)
        payload: Dict[str, Any] = {
            "metrics": self.dashboard_metrics(filters=filters, **kwargs),
            "salesByProduct": [b.to_dict() for b in self.by_product(filters=filters, **kwargs)],
            "salesByStatus": [b.to_dict() for b in self.by_status(filters=filters, **kwargs)],
            "recentSales": [v.to_dict() for v in self.recent(**kwargs)],
            "topProducts": [b.to_top_dict() for b in self.top_products(filters=filters, **kwargs)],
        }
        if current_role == Role.ADMIN:
            advisors: List[AdvisorBucket] = list(self.by_advisor(filters=filters, **kwargs))
            payload["salesByAdvisor"] = [b.to_dict() for b in advisors]
        logger.info("Comprehensive dashboard built for user {}", current_user_id)
        return payload
