from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import isoformat
from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: User.

    Note: Plain data object (no DB access code). ``password_hash`` never leaves the service layer.
    """

    user_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    role_name: str = ""
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "id": self.user_id,
            "name": self.full_name,
            "email": self.email,
            "roleId": self.role.value,
            "roleName": self.role_name or self.role.name.title(),
            "createdAt": isoformat(self.created_at),
            "updatedAt": isoformat(self.updated_at),
        }


@dataclass(frozen=True)
class UserPage:
    items: Sequence[User]
    page: int
    limit: int
    total: int
