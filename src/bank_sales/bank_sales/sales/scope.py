"""Role-scoped visibility for sale reads.

Every list and aggregate read goes through :func:`build_sale_scope` so an
Advisor never sees (or counts) a sale they did not create.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Mapping, Optional, Tuple

from ..common.datetime_utils import end_of_day, parse_date_bound
from ..common.validators import parse_optional_int
from ..core.enums import Role, SaleStatus
from ..core.exceptions import ValidationError
from .model import Sale


def parse_status(value: Any, field_name: str = "status") -> SaleStatus:
    try:
        return SaleStatus(str(value).strip())
    except ValueError:
        allowed = ", ".join(s.value for s in SaleStatus)
        raise ValidationError(f"{field_name} must be one of: {allowed}")


@dataclass(frozen=True)
class SaleFilters:
    product_id: Optional[int] = None
    status: Optional[SaleStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    creator_user_id: Optional[int] = None


def parse_sale_filters(args: Mapping[str, Any]) -> SaleFilters:
    """Coerce query-string values into SaleFilters.

    A date-only ``endDate`` is widened to the end of that day.
    """
    start, _ = parse_date_bound(args.get("startDate"), "startDate")
    end, end_date_only = parse_date_bound(args.get("endDate"), "endDate")
    if end is not None and end_date_only:
        end = end_of_day(end)

    status = args.get("status")
    return SaleFilters(
        product_id=parse_optional_int(args.get("productId"), "productId"),
        status=parse_status(status) if status not in (None, "") else None,
        start_date=start,
        end_date=end,
        creator_user_id=parse_optional_int(args.get("creatorUserId"), "creatorUserId"),
    )


@dataclass(frozen=True)
class SaleScope:
    creator_user_id: Optional[int] = None
    product_id: Optional[int] = None
    status: Optional[SaleStatus] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    def to_sql(self, alias: str = "s") -> Tuple[str, List[Any]]:
        """Render ``(where_clause, params)``; the clause is ``1=1`` when unconstrained."""
        conditions: List[str] = []
        params: List[Any] = []
        if self.creator_user_id is not None:
            conditions.append(f"{alias}.creator_user_id = %s")
            params.append(self.creator_user_id)
        if self.product_id is not None:
            conditions.append(f"{alias}.product_id = %s")
            params.append(self.product_id)
        if self.status is not None:
            conditions.append(f"{alias}.status = %s")
            params.append(self.status.value)
        if self.start_date is not None:
            conditions.append(f"{alias}.created_at >= %s")
            params.append(self.start_date)
        if self.end_date is not None:
            conditions.append(f"{alias}.created_at <= %s")
            params.append(self.end_date)
        return (" AND ".join(conditions) or "1=1"), params

    def matches(self, sale: Sale) -> bool:
        if self.creator_user_id is not None and sale.creator_user_id != self.creator_user_id:
            return False
        if self.product_id is not None and sale.product_id != self.product_id:
            return False
        if self.status is not None and sale.status != self.status:
            return False
        if self.start_date is not None and (sale.created_at is None or sale.created_at < self.start_date):
            return False
        if self.end_date is not None and (sale.created_at is None or sale.created_at > self.end_date):
            return False
        return True


def build_sale_scope(*, current_role: Role, current_user_id: int, filters: Optional[SaleFilters] = None) -> SaleScope:
    filters = filters or SaleFilters()
    if filters.start_date and filters.end_date and filters.end_date < filters.start_date:
        raise ValidationError("endDate must not be earlier than startDate")

    if current_role == Role.ADMIN:
        creator = filters.creator_user_id
    else:
        # Advisors only ever see their own sales, whatever they asked for.
        creator = int(current_user_id)

    return SaleScope(
        creator_user_id=creator,
        product_id=filters.product_id,
        status=filters.status,
        start_date=filters.start_date,
        end_date=filters.end_date,
    )
