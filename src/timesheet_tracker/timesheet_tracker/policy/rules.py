"""Role-based authorization rules.

Rules are checked in order: self-protection, admin, supervisor, own data.
Whatever no rule allows is denied.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from .model import (
    ADMIN_ONLY,
    ADMIN_SURFACE,
    ADMIN_SURFACE_READS,
    OWN_DATA,
    PROJECT_SCOPED,
    SUPERVISOR_MANAGEMENT,
    Action,
    Actor,
    Decision,
)

_TIMESHEET_VERBS = {
    Action.CREATE_TIMESHEET: "create",
    Action.UPDATE_TIMESHEET: "update",
    Action.DELETE_TIMESHEET: "delete",
}


def _self_protection(
    actor: Actor,
    action: Action,
    target_user_id: Optional[int],
    target_role: Optional[Role],
) -> Optional[Decision]:
    if action == Action.DELETE_USER:
        if target_user_id is not None and target_user_id == actor.user_id:
            return Decision.deny("You cannot delete your own account")
        if target_role == Role.ADMIN:
            return Decision.deny("Admin users cannot be deleted")
    if action == Action.DEACTIVATE_USER:
        if target_user_id is not None and target_user_id == actor.user_id:
            return Decision.deny("You cannot deactivate your own account")
        if target_role == Role.ADMIN:
            return Decision.deny("Admin users cannot be deactivated")
    return None


def _supervisor(
    actor: Actor,
    action: Action,
    target_project_id: Optional[int],
    target_role: Optional[Role],
) -> Decision:
    if action in ADMIN_SURFACE_READS:
        return Decision.allow()
    if action in SUPERVISOR_MANAGEMENT:
        if action == Action.CREATE_USER and target_role == Role.ADMIN:
            return Decision.deny("Only admins can create admin accounts")
        if action == Action.UPDATE_USER and target_role == Role.ADMIN:
            return Decision.deny("Only admins can modify admin accounts")
        return Decision.allow()
    if action in PROJECT_SCOPED:
        if target_project_id is not None and target_project_id in actor.assigned_project_ids:
            return Decision.allow()
        verb = _TIMESHEET_VERBS[action]
        return Decision.deny(f"You do not have access to {verb} timesheets for this project")
    if action in ADMIN_ONLY:
        return Decision.deny("Admin access required")
    return Decision.deny("Not permitted")


def authorize(
    actor: Actor,
    action: Action,
    *,
    target_project_id: Optional[int] = None,
    target_user_id: Optional[int] = None,
    target_role: Optional[Role] = None,
) -> Decision:
    """Pure decision function; never touches storage."""
    protected = _self_protection(actor, action, target_user_id, target_role)
    if protected is not None:
        return protected

    if action in OWN_DATA:
        if target_user_id is None or target_user_id == actor.user_id:
            return Decision.allow()
        return Decision.deny("You can only access your own timesheets")

    if actor.role == Role.ADMIN:
        return Decision.allow()
    if actor.role == Role.SUPERVISOR:
        return _supervisor(actor, action, target_project_id, target_role)
    if action in ADMIN_SURFACE:
        return Decision.deny("Admin or supervisor access required")
    return Decision.deny("Not permitted")


def require(
    actor: Actor,
    action: Action,
    *,
    target_project_id: Optional[int] = None,
    target_user_id: Optional[int] = None,
    target_role: Optional[Role] = None,
) -> None:
    decision = authorize(
        actor,
        action,
        target_project_id=target_project_id,
        target_user_id=target_user_id,
        target_role=target_role,
    )
    if not decision.allowed:
        raise AuthorizationError(decision.reason)
