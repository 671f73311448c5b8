from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from ..common.validators import optional_text, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..policy.model import Action, Actor
from ..policy.rules import require
from .model import Project
from .repository import UNCHANGED, ProjectRepository

logger = logging.getLogger(__name__)


class ProjectService:
    def __init__(self, projects: ProjectRepository):
        self._projects = projects

    def list_projects(self, actor: Actor) -> Sequence[Project]:
        require(actor, Action.LIST_PROJECTS)
        return self._projects.list_all()

    def list_active(self, actor: Actor) -> Sequence[Project]:
        require(actor, Action.LIST_ACTIVE_PROJECTS)
        return self._projects.list_active()

    def get_project(self, project_id: int) -> Project:
        project = self._projects.get_by_id(int(project_id))
        if not project:
            raise NotFoundError("Project not found")
        return project

    def create_project(self, actor: Actor, *, name: str, location: Optional[str] = None) -> Project:
        require(actor, Action.CREATE_PROJECT)
        if not name or not str(name).strip():
            raise ValidationError("Project name is required")
        name = require_non_empty(name, "Project name")

        if self._projects.get_by_name(name):
            raise ConflictError("A project with this name already exists")

        project_id = self._projects.create_project(name=name, location=optional_text(location))
        logger.info("User %s created project %s (%s)", actor.user_id, project_id, name)
        return self.get_project(project_id)

    def update_project(
        self,
        actor: Actor,
        project_id: int,
        *,
        name: Optional[str] = None,
        location: Any = UNCHANGED,
        is_active: Optional[bool] = None,
    ) -> Project:
        require(actor, Action.UPDATE_PROJECT)
        project = self.get_project(project_id)

        if name is not None:
            name = require_non_empty(name, "Project name")
            existing = self._projects.get_by_name(name)
            if existing and existing.project_id != project.project_id:
                raise ConflictError("A project with this name already exists")

        if location is not UNCHANGED:
            location = optional_text(location)

        self._projects.update_project(project.project_id, name=name, location=location, is_active=is_active)
        return self.get_project(project.project_id)
