from __future__ import annotations

from dataclasses import replace
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Mapping, Optional, Tuple

from loguru import logger

from ..catalog.service import CatalogService
from ..common import datetime_utils
from ..common.pagination import page_request
from ..common.validators import parse_optional_decimal, parse_optional_int
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT, MONEY_QUANT
from ..core.enums import Role, SaleStatus
from ..core.exceptions import AuthorizationError, NotFoundError, OutOfRangeError, ValidationError
from .model import Sale, SalePage, SaleView
from .repository import SaleRepository
from .rules import validate_sale_fields
from .scope import SaleFilters, build_sale_scope, parse_status

# Payload keys a client may write. creatorUserId/updaterUserId are server-owned.
WRITABLE_FIELDS = ("productId", "requestedAmount", "franchiseId", "rate", "status")


def _quantize(value: Optional[Decimal]) -> Optional[Decimal]:
    if value is None:
        return None
    q = value.quantize(MONEY_QUANT, rounding=ROUND_HALF_UP)
    # no "-0.00"
    return q if q else abs(q)


class SaleService:
    """Use case: the only write path for sales, plus role-scoped reads."""

    def __init__(
        self,
        sales: SaleRepository,
        catalog: CatalogService,
        *,
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
    ):
        self._sales = sales
        self._catalog = catalog
        self._default_limit = default_limit
        self._max_limit = max_limit

    def _validate(
        self,
        *,
        product_id: Optional[int],
        franchise_id: Optional[int],
        rate: Optional[Decimal],
        requested_amount: Optional[Decimal],
    ) -> Tuple[Decimal, Optional[Decimal]]:
        """Validate the values as given, then return (amount, rate) rounded to cents for storage."""
        validate_sale_fields(
            product_id,
            franchise_id,
            rate,
            requested_amount,
            known_products=self._catalog.product_ids(),
            known_franchises=self._catalog.franchise_ids(),
        )
        amount = _quantize(requested_amount)
        if amount <= 0:
            # e.g. 0.004: positive as sent but stored as 0.00
            raise OutOfRangeError("requestedAmount", MONEY_QUANT)
        return amount, _quantize(rate)

    def _view_or_404(self, sale_id: int) -> SaleView:
        view = self._sales.get_view(int(sale_id))
        if not view:
            raise NotFoundError("Sale not found")
        return view

    def _load_for(self, sale_id: int, *, current_role: Role, current_user_id: int, action: str) -> Sale:
        sale = self._sales.get_by_id(int(sale_id))
        if not sale:
            raise NotFoundError("Sale not found")
        if current_role != Role.ADMIN and sale.creator_user_id != int(current_user_id):
            logger.warning("User {} denied {} on sale {}", current_user_id, action, sale_id)
            raise AuthorizationError(f"You can only {action} your own sales")
        return sale

    def create(self, payload: Mapping[str, Any], *, current_user_id: int) -> SaleView:
        product_id = parse_optional_int(payload.get("productId"), "productId")
        requested_amount = parse_optional_decimal(payload.get("requestedAmount"), "requestedAmount")
        franchise_id = parse_optional_int(payload.get("franchiseId"), "franchiseId")
        rate = parse_optional_decimal(payload.get("rate"), "rate")
        raw_status = payload.get("status")
        status = parse_status(raw_status) if raw_status not in (None, "") else SaleStatus.OPEN

        requested_amount, rate = self._validate(
            product_id=product_id,
            franchise_id=franchise_id,
            rate=rate,
            requested_amount=requested_amount,
        )

        sale_id = self._sales.create_sale(
            product_id=int(product_id),
            requested_amount=requested_amount,
            franchise_id=franchise_id,
            rate=rate,
            status=status,
            creator_user_id=int(current_user_id),
            created_at=datetime_utils.now_utc(),
        )
        logger.info("Sale created: id={} by user {}", sale_id, current_user_id)
        return self._view_or_404(sale_id)

    def update(
        self,
        sale_id: int,
        patch: Mapping[str, Any],
        *,
        current_role: Role,
        current_user_id: int,
    ) -> SaleView:
        existing = self._load_for(sale_id, current_role=current_role, current_user_id=current_user_id, action="update")
        if not any(key in patch for key in WRITABLE_FIELDS):
            raise ValidationError("No fields to update")

        # Keys present in the patch win, including explicit nulls.
        product_id = (
            parse_optional_int(patch.get("productId"), "productId") if "productId" in patch else existing.product_id
        )
        requested_amount = (
            parse_optional_decimal(patch.get("requestedAmount"), "requestedAmount")
            if "requestedAmount" in patch
            else existing.requested_amount
        )
        franchise_id = (
            parse_optional_int(patch.get("franchiseId"), "franchiseId")
            if "franchiseId" in patch
            else existing.franchise_id
        )
        rate = parse_optional_decimal(patch.get("rate"), "rate") if "rate" in patch else existing.rate
        status = parse_status(patch.get("status")) if "status" in patch else existing.status

        requested_amount, rate = self._validate(
            product_id=product_id,
            franchise_id=franchise_id,
            rate=rate,
            requested_amount=requested_amount,
        )

        self._sales.update_sale(
            existing.sale_id,
            product_id=int(product_id),
            requested_amount=requested_amount,
            franchise_id=franchise_id,
            rate=rate,
            status=status,
            updater_user_id=int(current_user_id),
            updated_at=datetime_utils.now_utc(),
        )
        logger.info("Sale updated: id={} by user {}", existing.sale_id, current_user_id)
        return self._view_or_404(existing.sale_id)

    def delete(self, sale_id: int, *, current_role: Role, current_user_id: int) -> None:
        existing = self._load_for(sale_id, current_role=current_role, current_user_id=current_user_id, action="delete")
        if not self._sales.delete_by_id(existing.sale_id):
            raise NotFoundError("Sale not found")
        logger.info("Sale deleted: id={} by user {}", existing.sale_id, current_user_id)

    def get_by_id(self, sale_id: int, *, current_role: Role, current_user_id: int) -> SaleView:
        self._load_for(sale_id, current_role=current_role, current_user_id=current_user_id, action="view")
        logger.debug("Sale {} read by user {}", sale_id, current_user_id)
        return self._view_or_404(sale_id)

    def list(
        self,
        filters: Optional[SaleFilters] = None,
        *,
        current_role: Role,
        current_user_id: int,
        page: Any = None,
        limit: Any = None,
    ) -> SalePage:
        scope = build_sale_scope(current_role=current_role, current_user_id=current_user_id, filters=filters)
        req = page_request(page, limit, default_limit=self._default_limit, max_limit=self._max_limit)
        items, total = self._sales.list_views(scope, offset=req.offset, limit=req.limit)
        logger.debug("Listed {} of {} sales for user {}", len(items), total, current_user_id)
        return SalePage(items=items, page=req.page, limit=req.limit, total=total)

    def list_mine(
        self,
        filters: Optional[SaleFilters] = None,
        *,
        current_role: Role,
        current_user_id: int,
        page: Any = None,
        limit: Any = None,
    ) -> SalePage:
        mine = replace(filters or SaleFilters(), creator_user_id=int(current_user_id))
        return self.list(mine, current_role=current_role, current_user_id=current_user_id, page=page, limit=limit)
