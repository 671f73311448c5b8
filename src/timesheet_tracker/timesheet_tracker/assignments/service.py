from __future__ import annotations

import logging
from typing import Any, Sequence

from ..common.validators import parse_id
from ..core.enums import Role
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..policy.model import Action, Actor
from ..policy.rules import require
from ..projects.repository import ProjectRepository
from ..users.repository import UserRepository
from .model import AssignmentRow
from .repository import AssignmentRepository

logger = logging.getLogger(__name__)


class AssignmentService:
    """Use cases: manage which projects a supervisor may act on (admin only)."""

    def __init__(self, assignments: AssignmentRepository, users: UserRepository, projects: ProjectRepository):
        self._assignments = assignments
        self._users = users
        self._projects = projects

    @staticmethod
    def _parse_ids(user_id: Any, project_id: Any) -> tuple[int, int]:
        if not user_id or not project_id:
            raise ValidationError("User ID and Project ID are required")
        return parse_id(user_id, "User ID"), parse_id(project_id, "Project ID")

    def list_assignments(self, actor: Actor) -> Sequence[AssignmentRow]:
        require(actor, Action.LIST_ASSIGNMENTS)
        return self._assignments.list_all()

    def assign(self, actor: Actor, *, user_id: Any, project_id: Any) -> AssignmentRow:
        require(actor, Action.CREATE_ASSIGNMENT)
        uid, pid = self._parse_ids(user_id, project_id)

        user = self._users.get_by_id(uid)
        if not user or user.role != Role.SUPERVISOR:
            raise ValidationError("User must be a supervisor")
        project = self._projects.get_by_id(pid)
        if not project:
            raise NotFoundError("Project not found")

        if self._assignments.get(user_id=uid, project_id=pid):
            raise ConflictError("Supervisor is already assigned to this project")

        self._assignments.create(user_id=uid, project_id=pid)
        logger.info("User %s assigned supervisor %s to project %s", actor.user_id, uid, pid)
        return AssignmentRow(
            user_id=user.user_id,
            user_name=user.name,
            user_email=user.email,
            project_id=project.project_id,
            project_name=project.name,
        )

    def unassign(self, actor: Actor, *, user_id: Any, project_id: Any) -> None:
        require(actor, Action.DELETE_ASSIGNMENT)
        uid, pid = self._parse_ids(user_id, project_id)

        if not self._assignments.delete(user_id=uid, project_id=pid):
            raise NotFoundError("Assignment not found")
        logger.info("User %s removed supervisor %s from project %s", actor.user_id, uid, pid)
