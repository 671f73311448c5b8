from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used by the authorization policy."""

    ADMIN = "ADMIN"
    SUPERVISOR = "SUPERVISOR"
    OPERATIVE = "OPERATIVE"


class TimesheetStatus(str, Enum):
    """Approval state of a timesheet entry. Any state may move to any other."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class NotificationAction(str, Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


class DayStatus(str, Enum):
    """Cell state in an operative's monthly presence calendar."""

    PRESENT = "present"
    ABSENT = "absent"
    WEEKEND = "weekend"
    FUTURE = "future"
    EMPTY = "empty"
