"""In-memory and JSON-file store adapters."""

import copy
import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Callable

from taskdeck.core.tasks import DEFAULT_PROJECT_COLOR, Priority, Project, Task
from taskdeck.ports.task_repo import NotFoundError, StoreError

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def _local_now() -> datetime:
    return datetime.now().astimezone()


def serialize_changes(changes: dict) -> dict:
    """Turn datetime values into ISO strings so records stay JSON-shaped."""
    return {k: v.isoformat() if isinstance(v, (date, datetime)) else v for k, v in changes.items()}


def _next_id(records: list[dict]) -> str:
    numeric = [int(r["id"]) for r in records if str(r["id"]).isdigit()]
    return str(max(numeric, default=0) + 1)


def _check_priority(record: dict) -> None:
    if record.get("priority") not in tuple(Priority):
        raise ValueError(f"Invalid priority: {record.get('priority')!r} (expected 1, 2 or 3)")
    record["priority"] = int(record["priority"])


def load_records(path: Path | str) -> list[dict]:
    """Read a JSON array of records. A missing file is an empty store."""
    path = Path(path).expanduser()
    if not path.exists():
        return []
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise StoreError(f"Corrupt data file {path}: {e}")
    if not isinstance(data, list):
        raise StoreError(f"Expected a JSON array in {path}")
    return data


class InMemoryTaskStore:
    """
    Task store backed by a list of API-shaped records.

    Implements TaskRepository protocol. Every read returns fresh Task objects,
    so callers can never mutate the store's records.
    """

    def __init__(self, records: list[dict] | None = None, clock: Clock | None = None):
        self._records = [copy.deepcopy(r) for r in records or []]
        self._clock = clock or _local_now

    def _commit(self, records: list[dict]) -> None:
        """Install `records` as the new state. Persisting backends write first."""
        self._records = records

    def _index(self, task_id: str) -> int:
        for i, r in enumerate(self._records):
            if str(r["id"]) == str(task_id):
                return i
        raise NotFoundError(f"Task not found: {task_id}")

    def _apply(self, current: dict, changes: dict) -> dict:
        changes = serialize_changes(changes)
        changes.pop("id", None)
        changes.pop("completedAt", None)
        updated = {**current, **changes}

        if "completed" in changes:
            was_done = bool(current.get("completed"))
            now_done = bool(changes["completed"])
            if now_done and not was_done:
                updated["completedAt"] = self._clock().isoformat()
            elif not now_done:
                updated["completedAt"] = None

        _check_priority(updated)
        return updated

    def get_all(self) -> list[Task]:
        return [Task.from_api(r) for r in self._records]

    def get_by_id(self, task_id: str) -> Task:
        return Task.from_api(self._records[self._index(task_id)])

    def get_by_project(self, project_id: str) -> list[Task]:
        return [Task.from_api(r) for r in self._records if r.get("projectId") == project_id]

    def create(self, data: dict) -> Task:
        record = {
            "id": _next_id(self._records),
            "title": data.get("title", ""),
            "completed": False,
            "projectId": data.get("projectId") or None,
            "dueDate": None,
            "priority": data.get("priority") or Priority.LOW,
            "createdAt": self._clock().isoformat(),
            "completedAt": None,
        }
        record.update({k: v for k, v in serialize_changes(data).items() if k not in ("id", "completedAt")})
        record["priority"] = record.get("priority") or Priority.LOW
        if record["completed"]:
            record["completedAt"] = record["createdAt"]
        _check_priority(record)

        self._commit([*self._records, record])
        logger.debug(f"Created task {record['id']}: {record['title']}")
        return Task.from_api(record)

    def update(self, task_id: str, changes: dict) -> Task:
        index = self._index(task_id)
        records = list(self._records)
        updated = self._apply(records[index], changes)
        records[index] = updated
        self._commit(records)
        return Task.from_api(updated)

    def delete(self, task_id: str) -> Task:
        records = list(self._records)
        removed = records.pop(self._index(task_id))
        self._commit(records)
        logger.debug(f"Deleted task {task_id}")
        return Task.from_api(removed)

    def bulk_update(self, task_ids: list[str], changes: dict) -> list[Task]:
        records = list(self._records)
        updated = []
        for task_id in task_ids:
            try:
                index = self._index(task_id)
            except NotFoundError:
                continue
            records[index] = self._apply(records[index], changes)
            updated.append(Task.from_api(records[index]))
        self._commit(records)
        return updated

    def reorder(self, task_ids: list[str]) -> list[Task]:
        # Priority follows list position, clamped to LOW
        records = list(self._records)
        reordered = []
        for position, task_id in enumerate(task_ids):
            try:
                index = self._index(task_id)
            except NotFoundError:
                continue
            priority = min(position + 1, Priority.LOW)
            records[index] = self._apply(records[index], {"priority": priority})
            reordered.append(Task.from_api(records[index]))
        self._commit(records)
        return reordered


class InMemoryProjectStore:
    """Project store backed by a list of API-shaped records. Implements ProjectRepository."""

    def __init__(self, records: list[dict] | None = None, clock: Clock | None = None):
        self._records = [copy.deepcopy(r) for r in records or []]
        self._clock = clock or _local_now

    def _commit(self, records: list[dict]) -> None:
        """Install `records` as the new state. Persisting backends write first."""
        self._records = records

    def _index(self, project_id: str) -> int:
        for i, r in enumerate(self._records):
            if str(r["id"]) == str(project_id):
                return i
        raise NotFoundError(f"Project not found: {project_id}")

    def get_all(self) -> list[Project]:
        return [Project.from_api(r) for r in self._records]

    def get_by_id(self, project_id: str) -> Project:
        return Project.from_api(self._records[self._index(project_id)])

    def create(self, data: dict) -> Project:
        record = {
            "id": _next_id(self._records),
            "name": data.get("name", ""),
            "color": data.get("color") or DEFAULT_PROJECT_COLOR,
            "taskCount": 0,
            "createdAt": self._clock().isoformat(),
        }
        record.update({k: v for k, v in serialize_changes(data).items() if k != "id"})
        self._commit([*self._records, record])
        return Project.from_api(record)

    def update(self, project_id: str, changes: dict) -> Project:
        index = self._index(project_id)
        changes = {k: v for k, v in serialize_changes(changes).items() if k != "id"}
        records = list(self._records)
        records[index] = {**records[index], **changes}
        self._commit(records)
        return Project.from_api(records[index])

    def delete(self, project_id: str) -> Project:
        records = list(self._records)
        removed = records.pop(self._index(project_id))
        self._commit(records)
        return Project.from_api(removed)

    def update_task_count(self, project_id: str, count: int) -> Project | None:
        try:
            index = self._index(project_id)
        except NotFoundError:
            return None
        records = list(self._records)
        records[index] = {**records[index], "taskCount": count}
        self._commit(records)
        return Project.from_api(records[index])


class _FileBacked:
    """Mixin that writes the record list back to a JSON file after each mutation."""

    path: Path
    _records: list[dict]

    def _commit(self, records: list[dict]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(records, indent=2))
        except OSError as e:
            raise StoreError(f"Failed to write {self.path}: {e}")
        self._records = records


class FileTaskStore(_FileBacked, InMemoryTaskStore):
    """Task store persisted to a JSON file."""

    def __init__(self, path: Path | str, clock: Clock | None = None):
        self.path = Path(path).expanduser()
        super().__init__(load_records(self.path), clock=clock)


class FileProjectStore(_FileBacked, InMemoryProjectStore):
    """Project store persisted to a JSON file."""

    def __init__(self, path: Path | str, clock: Clock | None = None):
        self.path = Path(path).expanduser()
        super().__init__(load_records(self.path), clock=clock)
