"""Task repository interface."""

from typing import Protocol

from taskdeck.core.tasks import Task


class StoreError(Exception):
    """Raised when a store operation fails."""

    pass


class NotFoundError(StoreError):
    """Raised when a record does not exist."""

    pass


class TaskRepository(Protocol):
    """Interface for task persistence on any backend."""

    def get_all(self) -> list[Task]:
        """Fetch every task."""
        ...

    def get_by_id(self, task_id: str) -> Task:
        """Fetch one task. Raises NotFoundError."""
        ...

    def get_by_project(self, project_id: str) -> list[Task]:
        ...

    def create(self, data: dict) -> Task:
        """Create a task from API-shaped fields."""
        ...

    def update(self, task_id: str, changes: dict) -> Task:
        """Apply API-shaped changes. Keeps completedAt in step with completed."""
        ...

    def delete(self, task_id: str) -> Task:
        ...

    def bulk_update(self, task_ids: list[str], changes: dict) -> list[Task]:
        """Apply the same changes to several tasks, skipping unknown ids."""
        ...

    def reorder(self, task_ids: list[str]) -> list[Task]:
        """Set each task's priority to its position in `task_ids` (1-based)."""
        ...
