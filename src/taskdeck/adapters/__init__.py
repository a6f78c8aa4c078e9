"""Adapters - I/O implementations of ports."""

from .memory_store import (
    FileProjectStore,
    FileTaskStore,
    InMemoryProjectStore,
    InMemoryTaskStore,
)
from .remote_api import RemoteClient, RemoteProjectStore, RemoteTaskStore

__all__ = [
    "InMemoryTaskStore",
    "InMemoryProjectStore",
    "FileTaskStore",
    "FileProjectStore",
    "RemoteClient",
    "RemoteTaskStore",
    "RemoteProjectStore",
]
