from __future__ import annotations

from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import User


class UserRepository(Protocol):
    """Repository interface for User.

    Services depend on this Protocol, never on a concrete database.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[User]:
        raise NotImplementedError

    def list_all(self) -> Sequence[User]:
        """All users ordered by name."""

        raise NotImplementedError

    def create_user(
        self,
        *,
        name: str,
        email: str,
        password_hash: str,
        role: Role,
        hourly_rate: Decimal,
    ) -> int:
        raise NotImplementedError

    def update_user(
        self,
        user_id: int,
        *,
        is_active: Optional[bool] = None,
        hourly_rate: Optional[Decimal] = None,
    ) -> bool:
        raise NotImplementedError

    def update_password(self, user_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def delete_with_timesheets(self, user_id: int) -> int:
        """Delete the user's timesheets and then the user in one transaction.

        Returns the number of timesheets removed. If any statement fails
        nothing is deleted.
        """

        raise NotImplementedError

    def count_by_role(self, role: Role) -> int:
        raise NotImplementedError
