"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import NotFoundError, StoreError, TaskRepository
from .project_repo import ProjectRepository

__all__ = [
    "TaskRepository",
    "ProjectRepository",
    "StoreError",
    "NotFoundError",
]
