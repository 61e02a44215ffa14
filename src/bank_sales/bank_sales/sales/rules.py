"""Conditional field rules for sales.

Which of the conditional fields (``franchiseId``, ``rate``) a sale must carry
depends on its product. The table below is the single source of that mapping;
adding a product means adding a row, not another ``if`` branch.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import AbstractSet, Mapping, Optional

from ..core.constants import AMOUNT_MAX, RATE_MAX, RATE_MIN
from ..core.enums import ProductType
from ..core.exceptions import (
    MissingRequiredFieldError,
    OutOfRangeError,
    ReferenceNotFoundError,
    UnexpectedFieldError,
)

FRANCHISE_FIELD = "franchiseId"
RATE_FIELD = "rate"
CONDITIONAL_FIELDS = (FRANCHISE_FIELD, RATE_FIELD)


@dataclass(frozen=True)
class FieldRule:
    required: frozenset = frozenset()
    forbidden: frozenset = frozenset()


_RATE_ONLY = FieldRule(required=frozenset({RATE_FIELD}), forbidden=frozenset({FRANCHISE_FIELD}))
_FRANCHISE_ONLY = FieldRule(required=frozenset({FRANCHISE_FIELD}), forbidden=frozenset({RATE_FIELD}))

SALE_FIELD_RULES: Mapping[int, FieldRule] = {
    ProductType.CONSUMER_CREDIT.value: _RATE_ONLY,
    ProductType.FREE_INVESTMENT_PAYROLL.value: _RATE_ONLY,
    ProductType.CREDIT_CARD.value: _FRANCHISE_ONLY,
}

# Catalog products without a row accept neither conditional field.
_NO_CONDITIONAL_FIELDS = FieldRule(forbidden=frozenset(CONDITIONAL_FIELDS))


def rule_for(product_id: int, rules: Mapping[int, FieldRule] = SALE_FIELD_RULES) -> FieldRule:
    return rules.get(int(product_id), _NO_CONDITIONAL_FIELDS)


def validate_sale_fields(
    product_id: Optional[int],
    franchise_id: Optional[int],
    rate: Optional[Decimal],
    requested_amount: Optional[Decimal],
    *,
    known_products: AbstractSet[int],
    known_franchises: AbstractSet[int],
    rules: Mapping[int, FieldRule] = SALE_FIELD_RULES,
) -> None:
    """Raise a ValidationError subtype for the first violated rule.

    Runs on the complete record: the create payload, or on update the stored
    sale overlaid by the patch.
    """
    if product_id is None:
        raise MissingRequiredFieldError("productId")
    if int(product_id) not in known_products:
        raise ReferenceNotFoundError("productId", product_id)

    if requested_amount is None:
        raise MissingRequiredFieldError("requestedAmount")
    if requested_amount <= 0:
        raise OutOfRangeError("requestedAmount", Decimal("0"), minimum_exclusive=True)
    if requested_amount > AMOUNT_MAX:
        raise OutOfRangeError("requestedAmount", maximum=AMOUNT_MAX)

    values = {FRANCHISE_FIELD: franchise_id, RATE_FIELD: rate}
    rule = rule_for(product_id, rules)
    for field in CONDITIONAL_FIELDS:
        if field in rule.required and values[field] is None:
            raise MissingRequiredFieldError(field)
        if field in rule.forbidden and values[field] is not None:
            raise UnexpectedFieldError(field)

    if rate is not None and not (RATE_MIN <= rate <= RATE_MAX):
        raise OutOfRangeError(RATE_FIELD, RATE_MIN, RATE_MAX)
    if franchise_id is not None and int(franchise_id) not in known_franchises:
        raise ReferenceNotFoundError(FRANCHISE_FIELD, franchise_id)
