from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class SupervisorAssignment:
    """Grants a supervisor the right to act on one project's timesheets."""

    user_id: int
    project_id: int
    assigned_at: Optional[datetime] = None


@dataclass(frozen=True)
class AssignmentRow:
    """Read-model for the assignments screen (joined with user and project)."""

    user_id: int
    user_name: str
    user_email: str
    project_id: int
    project_name: str
    assigned_at: Optional[datetime] = None
