from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Project

# Sentinel: "leave location unchanged" (None means clear it)
UNCHANGED = object()


class ProjectRepository(Protocol):
    def get_by_id(self, project_id: int) -> Optional[Project]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Project]:
        raise NotImplementedError

    def list_all(self) -> Sequence[Project]:
        """All projects ordered by name, with their timesheet counts."""

        raise NotImplementedError

    def list_active(self) -> Sequence[Project]:
        raise NotImplementedError

    def create_project(self, *, name: str, location: Optional[str]) -> int:
        raise NotImplementedError

    def update_project(
        self,
        project_id: int,
        *,
        name: Optional[str] = None,
        location: object = UNCHANGED,
        is_active: Optional[bool] = None,
    ) -> bool:
        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError
