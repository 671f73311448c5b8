from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet

from ..core.enums import Role


class Action(str, Enum):
    """Every operation the policy knows about. Anything else is denied."""

    # Admin-surface reads
    LIST_USERS = "list_users"
    LIST_PROJECTS = "list_projects"
    LIST_ALL_TIMESHEETS = "list_all_timesheets"
    VIEW_STATS = "view_stats"
    VIEW_PRESENCE = "view_presence"
    VIEW_WEEKLY_GRID = "view_weekly_grid"

    # Admin-surface writes shared with supervisors
    CREATE_USER = "create_user"
    UPDATE_USER = "update_user"
    DEACTIVATE_USER = "deactivate_user"
    CREATE_PROJECT = "create_project"
    UPDATE_PROJECT = "update_project"

    # Admin only
    DELETE_USER = "delete_user"
    LIST_ASSIGNMENTS = "list_assignments"
    CREATE_ASSIGNMENT = "create_assignment"
    DELETE_ASSIGNMENT = "delete_assignment"

    # Project-scoped for supervisors
    CREATE_TIMESHEET = "create_timesheet"
    UPDATE_TIMESHEET = "update_timesheet"
    DELETE_TIMESHEET = "delete_timesheet"

    # Own data, any role
    SUBMIT_OWN_TIMESHEET = "submit_own_timesheet"
    LIST_OWN_TIMESHEETS = "list_own_timesheets"
    VIEW_OWN_PRESENCE = "view_own_presence"
    CHANGE_OWN_PASSWORD = "change_own_password"
    LIST_ACTIVE_PROJECTS = "list_active_projects"


ADMIN_SURFACE_READS = frozenset(
    {
        Action.LIST_USERS,
        Action.LIST_PROJECTS,
        Action.LIST_ALL_TIMESHEETS,
        Action.VIEW_STATS,
        Action.VIEW_PRESENCE,
        Action.VIEW_WEEKLY_GRID,
    }
)

SUPERVISOR_MANAGEMENT = frozenset(
    {
        Action.CREATE_USER,
        Action.UPDATE_USER,
        Action.DEACTIVATE_USER,
        Action.CREATE_PROJECT,
        Action.UPDATE_PROJECT,
    }
)

ADMIN_ONLY = frozenset(
    {
        Action.DELETE_USER,
        Action.LIST_ASSIGNMENTS,
        Action.CREATE_ASSIGNMENT,
        Action.DELETE_ASSIGNMENT,
    }
)

PROJECT_SCOPED = frozenset(
    {
        Action.CREATE_TIMESHEET,
        Action.UPDATE_TIMESHEET,
        Action.DELETE_TIMESHEET,
    }
)

OWN_DATA = frozenset(
    {
        Action.SUBMIT_OWN_TIMESHEET,
        Action.LIST_OWN_TIMESHEETS,
        Action.VIEW_OWN_PRESENCE,
        Action.CHANGE_OWN_PASSWORD,
        Action.LIST_ACTIVE_PROJECTS,
    }
)

ADMIN_SURFACE = ADMIN_SURFACE_READS | SUPERVISOR_MANAGEMENT | ADMIN_ONLY | PROJECT_SCOPED


@dataclass(frozen=True)
class Actor:
    """The authenticated caller, passed explicitly into every service call.

    `assigned_project_ids` is only populated for supervisors.
    """

    user_id: int
    name: str
    role: Role
    assigned_project_ids: FrozenSet[int] = field(default_factory=frozenset)

    @property
    def is_admin_or_supervisor(self) -> bool:
        return self.role in (Role.ADMIN, Role.SUPERVISOR)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    @classmethod
    def allow(cls) -> "Decision":
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> "Decision":
        return cls(False, reason)
