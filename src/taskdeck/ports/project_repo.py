"""Project repository interface."""

from typing import Protocol

from taskdeck.core.tasks import Project


class ProjectRepository(Protocol):
    """Interface for project persistence on any backend."""

    def get_all(self) -> list[Project]:
        ...

    def get_by_id(self, project_id: str) -> Project:
        """Fetch one project. Raises NotFoundError."""
        ...

    def create(self, data: dict) -> Project:
        ...

    def update(self, project_id: str, changes: dict) -> Project:
        ...

    def delete(self, project_id: str) -> Project:
        ...

    def update_task_count(self, project_id: str, count: int) -> Project | None:
        """Store a new task count. Returns None for an unknown project."""
        ...
