from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations."""

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(self, message: str = "", *, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "VALIDATION_ERROR"
    status_code = 400


class MissingRequiredFieldError(ValidationError):
    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} is required", details=[{"field": field, "reason": "required"}])
        self.field = field


class UnexpectedFieldError(ValidationError):
    def __init__(self, field: str, message: Optional[str] = None):
        super().__init__(message or f"{field} is not allowed here", details=[{"field": field, "reason": "unexpected"}])
        self.field = field


class OutOfRangeError(ValidationError):
    """A numeric value outside its bounds.

    ``minimum_exclusive`` marks a strict lower bound (e.g. amount > 0).
    """

    def __init__(
        self,
        field: str,
        minimum: Any = None,
        maximum: Any = None,
        *,
        minimum_exclusive: bool = False,
    ):
        if minimum is not None and maximum is not None:
            message = f"{field} must be between {minimum} and {maximum}"
        elif minimum is None:
            message = f"{field} must be at most {maximum}"
        elif minimum_exclusive:
            message = f"{field} must be greater than {minimum}"
        else:
            message = f"{field} must be at least {minimum}"
        detail = {"field": field, "reason": "out_of_range", "min": minimum, "max": maximum}
        if minimum_exclusive:
            detail["minExclusive"] = True
        super().__init__(message, details=[detail])
        self.field = field
        self.minimum = minimum
        self.maximum = maximum
        self.minimum_exclusive = minimum_exclusive


class ReferenceNotFoundError(ValidationError):
    """A foreign id (product, franchise, role) missing from its catalog."""

    def __init__(self, field: str, value: Any):
        super().__init__(f"Invalid {field}: {value}", details=[{"field": field, "reason": "not_found", "value": value}])
        self.field = field
        self.value = value


class AuthenticationError(DomainError):
    """Raised when credentials or tokens are missing or invalid."""

    code = "AUTHENTICATION_ERROR"
    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    code = "AUTHORIZATION_ERROR"
    status_code = 403


class NotFoundError(DomainError):
    code = "NOT_FOUND"
    status_code = 404


class DuplicateEntryError(DomainError):
    code = "DUPLICATE_ENTRY"
    status_code = 409


class StoreError(DomainError):
    """Underlying storage failure. Never exposed to callers in detail."""

    code = "DATABASE_ERROR"
    status_code = 500
