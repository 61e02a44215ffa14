from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from ..core.constants import DEFAULT_TOKEN_HOURS
from ..core.exceptions import AuthenticationError
from ..users.model import User

ALGORITHM = "HS256"


class TokenService:
    """Issue and verify signed bearer tokens (HS256)."""

    def __init__(self, secret: str, expiration_hours: int = DEFAULT_TOKEN_HOURS):
        if not secret:
            raise ValueError("JWT secret must not be empty")
        self._secret = secret
        self._expiration = timedelta(hours=int(expiration_hours))

    @property
    def expires_in_seconds(self) -> int:
        return int(self._expiration.total_seconds())

    def issue(self, user: User) -> str:
        payload = {
            "id": user.user_id,
            "email": user.email,
            "roleId": user.role.value,
            "exp": datetime.now(timezone.utc) + self._expiration,
        }
        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    def decode(self, token: str) -> Dict[str, Any]:
        try:
            payload = jwt.decode(token, self._secret, algorithms=[ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise AuthenticationError("Token has expired")
        except jwt.InvalidTokenError:
            raise AuthenticationError("Invalid token")

        if "id" not in payload:
            raise AuthenticationError("Invalid token")
        return payload
