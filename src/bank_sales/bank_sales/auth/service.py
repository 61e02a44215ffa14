from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import normalize_email, require_non_empty, validate_password
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..users.model import User
from ..users.repository import UserRepository
from .model import AuthenticatedUser
from .tokens import TokenService

_INVALID_CREDENTIALS = "Invalid email or password"


@dataclass(frozen=True)
class LoginResult:
    user: User
    token: str
    expires_in: int

    def to_dict(self) -> dict:
        return {"user": self.user.to_dict(), "token": self.token, "expiresIn": self.expires_in}


def _password_matches(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password)
    except ValueError:
        # placeholder or corrupted hashes
        return False


class AuthService:
    """Use case: authenticate users and resolve bearer tokens to callers."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def authenticate(self, email: Optional[str], password: Optional[str]) -> LoginResult:
        require_non_empty(email, "email")
        if not password:
            raise ValidationError("password is required")

        user = self._users.get_by_email(normalize_email(email))
        if not user or not _password_matches(user.password_hash, password):
            logger.warning("Failed login attempt for {}", email)
            raise AuthenticationError(_INVALID_CREDENTIALS)

        logger.info("User {} logged in", user.user_id)
        return LoginResult(user=user, token=self._tokens.issue(user), expires_in=self._tokens.expires_in_seconds)

    def resolve_token(self, token: Optional[str]) -> AuthenticatedUser:
        if not token:
            raise AuthenticationError("Access token required")
        payload = self._tokens.decode(token)

        user = self._users.get_by_id(int(payload["id"]))
        if not user:
            raise AuthenticationError("User no longer exists")
        return AuthenticatedUser.from_user(user)

    def profile(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def refresh(self, user_id: int) -> LoginResult:
        user = self.profile(user_id)
        return LoginResult(user=user, token=self._tokens.issue(user), expires_in=self._tokens.expires_in_seconds)

    def change_password(self, user_id: int, current_password: Optional[str], new_password: Optional[str]) -> None:
        if not current_password:
            raise ValidationError("currentPassword is required")
        validate_password(new_password, "newPassword")

        user = self.profile(user_id)
        if not _password_matches(user.password_hash, current_password):
            raise AuthenticationError("Current password is incorrect")
        if current_password == new_password:
            raise ValidationError("New password must be different from the current password")

        self._users.update_user(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("Password changed for user {}", user.user_id)
