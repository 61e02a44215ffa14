from __future__ import annotations

from typing import Dict, Optional, Protocol, Sequence, Tuple

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Note (DIP): the service layer depends on this interface, not on a concrete DB.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def email_exists(self, email: str, *, exclude_user_id: Optional[int] = None) -> bool:
        raise NotImplementedError

    def create_user(self, *, full_name: str, email: str, password_hash: str, role: Role) -> int:
        raise NotImplementedError

    def update_user(
        self,
        user_id: int,
        *,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        password_hash: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> bool:
        """Update only the given (non-None) columns."""

        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError

    def list_page(
        self,
        *,
        search: Optional[str] = None,
        role: Optional[Role] = None,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[Sequence[User], int]:
        """Return (users ordered by created_at DESC, total matching)."""

        raise NotImplementedError

    def count_by_role(self) -> Dict[Role, int]:
        raise NotImplementedError
