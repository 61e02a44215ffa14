from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, Tuple

from flask import request
from loguru import logger

from ..core.exceptions import AuthorizationError
from .service import AuthService


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def make_guards(auth_service: AuthService) -> Tuple[Callable, Callable]:
    """Build (login_required, admin_required) view decorators.

    Both pass the resolved caller to the view as the ``caller`` keyword.
    """

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            kwargs["caller"] = auth_service.resolve_token(bearer_token())
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            caller = auth_service.resolve_token(bearer_token())
            if not caller.is_admin:
                logger.warning("User {} denied admin route {}", caller.user_id, request.path)
                raise AuthorizationError("Admin access required")
            kwargs["caller"] = caller
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required
