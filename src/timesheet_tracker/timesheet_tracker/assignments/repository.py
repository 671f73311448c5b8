from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AssignmentRow, SupervisorAssignment


class AssignmentRepository(Protocol):
    def get(self, *, user_id: int, project_id: int) -> Optional[SupervisorAssignment]:
        raise NotImplementedError

    def list_all(self) -> Sequence[AssignmentRow]:
        """Newest assignments first."""

        raise NotImplementedError

    def list_project_ids_for_user(self, user_id: int) -> Sequence[int]:
        raise NotImplementedError

    def create(self, *, user_id: int, project_id: int) -> None:
        raise NotImplementedError

    def delete(self, *, user_id: int, project_id: int) -> bool:
        raise NotImplementedError
