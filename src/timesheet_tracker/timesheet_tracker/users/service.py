from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..assignments.repository import AssignmentRepository
from ..common.validators import parse_decimal, require_min_length, require_non_empty
from ..core.constants import DEFAULT_HOURLY_RATE, MIN_PASSWORD_LENGTH
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ConflictError, NotFoundError, ValidationError
from ..policy.model import Action, Actor
from ..policy.rules import require
from .model import User
from .repository import UserRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into the Flask session after login."""

    user_id: int
    name: str
    email: str
    role: Role


class AuthService:
    """Use cases: log in, resolve the per-request Actor, change own password."""

    def __init__(self, users: UserRepository, assignments: AssignmentRepository):
        self._users = users
        self._assignments = assignments

    def authenticate(self, email: str, password: str) -> SessionUser:
        email = str(email or "").strip().lower()
        user = self._users.get_by_email(email) if email else None
        if not user or not user.is_active:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(user.password_hash, password or "")
        except (TypeError, ValueError):
            # placeholder or corrupted hashes
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        logger.info("User %s logged in", user.user_id)
        return SessionUser(user_id=user.user_id, name=user.name, email=user.email, role=user.role)

    def resolve_actor(self, user_id: Optional[int]) -> Actor:
        """Rebuild the Actor for a session; role comes from the store, not the cookie."""
        if not user_id:
            raise AuthenticationError("Unauthorized")
        user = self._users.get_by_id(int(user_id))
        if not user or not user.is_active:
            raise AuthenticationError("Unauthorized")

        project_ids: frozenset[int] = frozenset()
        if user.role == Role.SUPERVISOR:
            project_ids = frozenset(self._assignments.list_project_ids_for_user(user.user_id))
        return Actor(user_id=user.user_id, name=user.name, role=user.role, assigned_project_ids=project_ids)

    def change_password(self, actor: Actor, *, current_password: str, new_password: str) -> None:
        require(actor, Action.CHANGE_OWN_PASSWORD, target_user_id=actor.user_id)
        require_non_empty(current_password, "Current password")
        require_min_length(new_password, "New password", MIN_PASSWORD_LENGTH)

        user = self._users.get_by_id(actor.user_id)
        if not user:
            raise NotFoundError("User not found")
        if not isinstance(current_password, str) or not check_password_hash(user.password_hash, current_password):
            raise ValidationError("Current password is incorrect")

        self._users.update_password(user.user_id, password_hash=generate_password_hash(new_password))
        logger.info("User %s changed their password", user.user_id)


class UserService:
    """Use cases: manage user accounts (admin / supervisor)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def list_users(self, actor: Actor) -> Sequence[User]:
        require(actor, Action.LIST_USERS)
        return self._users.list_all()

    def get_user(self, user_id: int) -> User:
        user = self._users.get_by_id(int(user_id))
        if not user:
            raise NotFoundError("User not found")
        return user

    def create_account(
        self,
        actor: Actor,
        *,
        name: str,
        email: str,
        password: str,
        role: Any = None,
        hourly_rate: Any = None,
    ) -> User:
        if not name or not email or not password:
            raise ValidationError("Name, email, and password are required")
        name = require_non_empty(name, "Name")
        email = require_non_empty(email, "Email").lower()
        if "@" not in email:
            raise ValidationError("Email is invalid")
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)

        # Unknown roles fall back to OPERATIVE
        try:
            account_role = Role(str(role).upper()) if role else Role.OPERATIVE
        except ValueError:
            account_role = Role.OPERATIVE

        rate = DEFAULT_HOURLY_RATE
        if hourly_rate not in (None, ""):
            rate = parse_decimal(hourly_rate, "Hourly rate")
            if rate < 0:
                raise ValidationError("Hourly rate cannot be negative")

        require(actor, Action.CREATE_USER, target_role=account_role)

        if self._users.get_by_email(email):
            raise ConflictError("A user with this email already exists")

        user_id = self._users.create_user(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=account_role,
            hourly_rate=rate,
        )
        logger.info("User %s created account %s (%s)", actor.user_id, user_id, account_role.value)
        return self.get_user(user_id)

    def update_user(
        self,
        actor: Actor,
        user_id: int,
        *,
        is_active: Optional[bool] = None,
        hourly_rate: Any = None,
    ) -> User:
        target = self.get_user(int(user_id))
        require(actor, Action.UPDATE_USER, target_user_id=target.user_id, target_role=target.role)

        rate: Optional[Decimal] = None
        if hourly_rate is not None:
            rate = parse_decimal(hourly_rate, "Hourly rate")
            if rate < 0:
                raise ValidationError("Hourly rate cannot be negative")

        if is_active is False:
            require(actor, Action.DEACTIVATE_USER, target_user_id=target.user_id, target_role=target.role)

        if not self._users.update_user(target.user_id, is_active=is_active, hourly_rate=rate):
            raise NotFoundError("User not found")
        return self.get_user(target.user_id)

    def delete_user(self, actor: Actor, user_id: int) -> int:
        """Delete a non-admin user and all of their timesheets.

        Returns the number of timesheets removed with the user.
        """
        user_id = int(user_id)
        require(actor, Action.DELETE_USER, target_user_id=user_id)

        target = self.get_user(user_id)
        require(actor, Action.DELETE_USER, target_user_id=target.user_id, target_role=target.role)

        removed = self._users.delete_with_timesheets(target.user_id)
        logger.info(
            "User %s deleted user %s together with %d timesheet(s)",
            actor.user_id,
            target.user_id,
            removed,
        )
        return removed
