"""Remote REST store adapter - HTTP client for task and project records."""

import logging

import requests

from taskdeck.adapters.memory_store import serialize_changes
from taskdeck.config import Config, load_config
from taskdeck.core.tasks import Priority, Project, Task, filter_by_project
from taskdeck.ports.task_repo import NotFoundError, StoreError

logger = logging.getLogger(__name__)


class RemoteClient:
    """
    Thin JSON-over-HTTP client shared by the remote stores.

    No business logic - just I/O. Every failure surfaces as StoreError.
    """

    def __init__(self, config: Config | None = None, session: requests.Session | None = None):
        self.config = config or load_config()
        if not self.config.api_base_url:
            raise StoreError("No API base URL configured. Set API_BASE_URL in taskdeck.conf.")
        self.base_url = self.config.api_base_url.rstrip("/")
        self._session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.config.api_token:
            headers["Authorization"] = f"Bearer {self.config.api_token}"
        return headers

    def request(self, method: str, endpoint: str, payload: dict | list | None = None):
        """Make a request and return the decoded JSON body (None for empty bodies)."""
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self._session.request(
                method,
                url,
                json=payload,
                headers=self._headers(),
                timeout=self.config.api_timeout,
            )
        except requests.RequestException as e:
            logger.error(f"{method} {url} failed: {e}")
            raise StoreError(f"Request to {url} failed: {e}")

        if resp.status_code == 404:
            raise NotFoundError(f"Not found: {endpoint}")
        if resp.status_code >= 400:
            logger.error(f"{method} {url} returned {resp.status_code}: {resp.text}")
            raise StoreError(f"{method} {endpoint} failed with HTTP {resp.status_code}")

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise StoreError(f"Invalid JSON from {url}: {e}")


class RemoteTaskStore:
    """
    Task store backed by a REST API.

    Implements TaskRepository protocol. The server is only asked for whole
    collections; filtering and classification stay client-side.
    """

    def __init__(self, client: RemoteClient):
        self.client = client

    def get_all(self) -> list[Task]:
        data = self.client.request("GET", "/tasks") or []
        return [Task.from_api(item) for item in data]

    def get_by_id(self, task_id: str) -> Task:
        return Task.from_api(self.client.request("GET", f"/tasks/{task_id}"))

    def get_by_project(self, project_id: str) -> list[Task]:
        return filter_by_project(self.get_all(), project_id)

    def create(self, data: dict) -> Task:
        return Task.from_api(self.client.request("POST", "/tasks", serialize_changes(data)))

    def update(self, task_id: str, changes: dict) -> Task:
        return Task.from_api(self.client.request("PATCH", f"/tasks/{task_id}", serialize_changes(changes)))

    def delete(self, task_id: str) -> Task:
        task = self.get_by_id(task_id)
        self.client.request("DELETE", f"/tasks/{task_id}")
        return task

    def bulk_update(self, task_ids: list[str], changes: dict) -> list[Task]:
        updated = []
        for task_id in task_ids:
            try:
                updated.append(self.update(task_id, changes))
            except NotFoundError:
                logger.warning(f"Skipping missing task {task_id} in bulk update")
        return updated

    def reorder(self, task_ids: list[str]) -> list[Task]:
        return [
            self.update(task_id, {"priority": min(position + 1, Priority.LOW)})
            for position, task_id in enumerate(task_ids)
        ]


class RemoteProjectStore:
    """Project store backed by a REST API. Implements ProjectRepository."""

    def __init__(self, client: RemoteClient):
        self.client = client

    def get_all(self) -> list[Project]:
        data = self.client.request("GET", "/projects") or []
        return [Project.from_api(item) for item in data]

    def get_by_id(self, project_id: str) -> Project:
        return Project.from_api(self.client.request("GET", f"/projects/{project_id}"))

    def create(self, data: dict) -> Project:
        return Project.from_api(self.client.request("POST", "/projects", serialize_changes(data)))

    def update(self, project_id: str, changes: dict) -> Project:
        return Project.from_api(
            self.client.request("PATCH", f"/projects/{project_id}", serialize_changes(changes))
        )

    def delete(self, project_id: str) -> Project:
        project = self.get_by_id(project_id)
        self.client.request("DELETE", f"/projects/{project_id}")
        return project

    def update_task_count(self, project_id: str, count: int) -> Project | None:
        try:
            return self.update(project_id, {"taskCount": count})
        except NotFoundError:
            return None
