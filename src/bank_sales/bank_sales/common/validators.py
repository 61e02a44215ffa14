from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from ..core.constants import (
    EMAIL_MAX_LENGTH,
    NAME_MAX_LENGTH,
    NAME_MIN_LENGTH,
    PASSWORD_MAX_LENGTH,
    PASSWORD_MIN_LENGTH,
)
from ..core.exceptions import MissingRequiredFieldError, ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is None or not isinstance(value, str) or not value.strip():
        raise MissingRequiredFieldError(field_name)
    return value.strip()


def require_length_between(value: str, field_name: str, min_len: int, max_len: int) -> str:
    if not (min_len <= len(value) <= max_len):
        raise ValidationError(f"{field_name} must be between {min_len} and {max_len} characters")
    return value


def normalize_email(value: Optional[str]) -> str:
    email = require_non_empty(value, "email").lower()
    if len(email) > EMAIL_MAX_LENGTH or not _EMAIL_RE.match(email):
        raise ValidationError("email is not a valid address")
    return email


def validate_name(value: Optional[str]) -> str:
    name = require_non_empty(value, "name")
    return require_length_between(name, "name", NAME_MIN_LENGTH, NAME_MAX_LENGTH)


def validate_password(value: Optional[str], field_name: str = "password") -> str:
    """Password policy: length bounds plus one lowercase, one uppercase and one digit."""
    if value is None or not isinstance(value, str) or value == "":
        raise MissingRequiredFieldError(field_name)
    require_length_between(value, field_name, PASSWORD_MIN_LENGTH, PASSWORD_MAX_LENGTH)
    if not (re.search(r"[a-z]", value) and re.search(r"[A-Z]", value) and re.search(r"\d", value)):
        raise ValidationError(
            f"{field_name} must contain at least one uppercase letter, one lowercase letter, and one number"
        )
    return value


def parse_int(value: Any, field_name: str) -> int:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be an integer")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def parse_optional_int(value: Any, field_name: str) -> Optional[int]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_int(value, field_name)


def parse_positive_int(value: Any, field_name: str) -> int:
    n = parse_int(value, field_name)
    if n < 1:
        raise ValidationError(f"{field_name} must be a positive integer")
    return n


def parse_decimal(value: Any, field_name: str) -> Decimal:
    # float goes through str() so 15.5 becomes Decimal("15.5"), not its binary expansion
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        d = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not d.is_finite():
        raise ValidationError(f"{field_name} must be a number")
    return d


def parse_optional_decimal(value: Any, field_name: str) -> Optional[Decimal]:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    return parse_decimal(value, field_name)
