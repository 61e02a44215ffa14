from __future__ import annotations

from dataclasses import dataclass

from ..core.enums import Role
from ..users.model import User


@dataclass(frozen=True)
class AuthenticatedUser:
    """The caller of a request, resolved from its bearer token."""

    user_id: int
    name: str
    email: str
    role: Role
    role_name: str

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @classmethod
    def from_user(cls, user: User) -> "AuthenticatedUser":
        return cls(
            user_id=user.user_id,
            name=user.full_name,
            email=user.email,
            role=user.role,
            role_name=user.role_name or user.role.name.title(),
        )

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.name,
            "email": self.email,
            "roleId": self.role.value,
            "roleName": self.role_name,
        }
