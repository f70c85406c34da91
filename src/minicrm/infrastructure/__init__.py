"""Infrastructure layer: concrete implementations of application ports."""

from minicrm.infrastructure.factory import (
    STORAGE_JSON,
    STORAGE_MEMORY,
    STORAGE_SQLITE,
    canonical_type,
    create_repository,
    supported_types,
)
from minicrm.infrastructure.json_repository import JsonFileContactRepository
from minicrm.infrastructure.locking import ReadWriteLock
from minicrm.infrastructure.memory_repository import InMemoryContactRepository
from minicrm.infrastructure.persistence import SqliteContactRepository

__all__ = [
    "STORAGE_JSON",
    "STORAGE_MEMORY",
    "STORAGE_SQLITE",
    "canonical_type",
    "InMemoryContactRepository",
    "JsonFileContactRepository",
    "ReadWriteLock",
    "SqliteContactRepository",
    "create_repository",
    "supported_types",
]
