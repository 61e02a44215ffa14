from __future__ import annotations

from typing import Any, Mapping, Optional

from loguru import logger
from werkzeug.security import generate_password_hash

from ..common.pagination import page_request
from ..common.validators import normalize_email, parse_int, validate_name, validate_password
from ..core.constants import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from ..core.enums import Role
from ..core.exceptions import (
    AuthorizationError,
    DuplicateEntryError,
    NotFoundError,
    ReferenceNotFoundError,
    ValidationError,
)
from .model import User, UserPage
from .repository import UserRepository


def parse_role(value: Any) -> Role:
    role_id = parse_int(value, "roleId")
    try:
        return Role(role_id)
    except ValueError:
        raise ReferenceNotFoundError("roleId", role_id)


class UserService:
    """Use case: manage user accounts.

    Admins manage everyone; any user may read and edit their own account
    (except their role).
    """

    def __init__(
        self,
        users: UserRepository,
        *,
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
    ):
        self._users = users
        self._default_limit = default_limit
        self._max_limit = max_limit

    @staticmethod
    def _require_admin(current_role: Role) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("Admin access required")

    @staticmethod
    def _require_owner_or_admin(*, current_role: Role, current_user_id: int, user_id: int) -> None:
        if current_role != Role.ADMIN and int(current_user_id) != int(user_id):
            logger.warning("User {} denied access to user {}", current_user_id, user_id)
            raise AuthorizationError("You can only access your own account")

    def _get_or_404(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def list_users(
        self,
        *,
        current_role: Role,
        search: Optional[str] = None,
        role_id: Any = None,
        page: Any = None,
        limit: Any = None,
    ) -> UserPage:
        self._require_admin(current_role)
        req = page_request(page, limit, default_limit=self._default_limit, max_limit=self._max_limit)
        role = parse_role(role_id) if role_id not in (None, "") else None
        items, total = self._users.list_page(
            search=(search or "").strip() or None,
            role=role,
            offset=req.offset,
            limit=req.limit,
        )
        return UserPage(items=items, page=req.page, limit=req.limit, total=total)

    def get_user(self, *, current_role: Role, current_user_id: int, user_id: int) -> User:
        self._require_owner_or_admin(current_role=current_role, current_user_id=current_user_id, user_id=user_id)
        return self._get_or_404(user_id)

    def create_user(
        self,
        *,
        current_role: Role,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        role_id: Any,
    ) -> User:
        self._require_admin(current_role)
        full_name = validate_name(name)
        email = normalize_email(email)
        validate_password(password)
        if role_id in (None, ""):
            raise ValidationError("roleId is required")
        role = parse_role(role_id)

        if self._users.email_exists(email):
            raise DuplicateEntryError("Email already registered")

        user_id = self._users.create_user(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("User created: id={} role={}", user_id, role.name)
        return self._get_or_404(user_id)

    def update_user(
        self,
        *,
        current_role: Role,
        current_user_id: int,
        user_id: int,
        patch: Mapping[str, Any],
    ) -> User:
        self._require_owner_or_admin(current_role=current_role, current_user_id=current_user_id, user_id=user_id)
        self._get_or_404(user_id)

        full_name = email = password_hash = None
        role: Optional[Role] = None
        if "name" in patch:
            full_name = validate_name(patch.get("name"))
        if "email" in patch:
            email = normalize_email(patch.get("email"))
            if self._users.email_exists(email, exclude_user_id=int(user_id)):
                raise DuplicateEntryError("Email already registered")
        if "password" in patch:
            password_hash = generate_password_hash(validate_password(patch.get("password")))
        if "roleId" in patch:
            if current_role != Role.ADMIN:
                raise AuthorizationError("Only administrators can change roles")
            role = parse_role(patch.get("roleId"))

        if full_name is None and email is None and password_hash is None and role is None:
            raise ValidationError("No fields to update")

        self._users.update_user(
            int(user_id),
            full_name=full_name,
            email=email,
            password_hash=password_hash,
            role=role,
        )
        logger.info("User updated: id={} by user {}", user_id, current_user_id)
        return self._get_or_404(user_id)

    def delete_user(self, *, current_role: Role, current_user_id: int, user_id: int) -> None:
        self._require_admin(current_role)
        if int(user_id) == int(current_user_id):
            raise ValidationError("You cannot delete your own account")
        self._get_or_404(user_id)

        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")
        logger.info("User deleted: id={} by user {}", user_id, current_user_id)

    def check_email_exists(self, email: Optional[str], *, exclude_user_id: Any = None) -> bool:
        email = normalize_email(email)
        exclude = parse_int(exclude_user_id, "excludeUserId") if exclude_user_id not in (None, "") else None
        return self._users.email_exists(email, exclude_user_id=exclude)

    def count_by_role(self, *, current_role: Role) -> dict:
        self._require_admin(current_role)
        counts = self._users.count_by_role()
        admin = int(counts.get(Role.ADMIN, 0))
        advisor = int(counts.get(Role.ADVISOR, 0))
        return {"admin": admin, "advisor": advisor, "total": admin + advisor}
