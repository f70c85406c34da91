"""Select and construct a storage backend from its type tag."""

from pathlib import Path

from minicrm.application.ports import ContactRepository
from minicrm.domain import StorageError, UnsupportedTypeError
from minicrm.infrastructure.json_repository import JsonFileContactRepository
from minicrm.infrastructure.memory_repository import InMemoryContactRepository
from minicrm.infrastructure.persistence.sqlite_repository import SqliteContactRepository

STORAGE_MEMORY = "memory"
STORAGE_JSON = "json"
STORAGE_SQLITE = "sqlite"

# Older config files name the database backend "gorm".
_ALIASES = {"gorm": STORAGE_SQLITE}


def supported_types() -> list[str]:
    return [STORAGE_MEMORY, STORAGE_JSON, STORAGE_SQLITE]


def canonical_type(storage_type: str) -> str:
    """Resolve aliases. Raises UnsupportedTypeError for unknown tags."""
    resolved = _ALIASES.get(storage_type, storage_type)
    if resolved not in supported_types():
        raise UnsupportedTypeError(
            f"Unsupported storage type: {storage_type!r} "
            f"(valid options: {', '.join(supported_types())})"
        )
    return resolved


def create_repository(storage_type: str, file_path: str | Path = "") -> ContactRepository:
    """Return a new repository of the given type. file_path is ignored for memory."""
    storage_type = canonical_type(storage_type)
    if storage_type == STORAGE_MEMORY:
        return InMemoryContactRepository()
    if not str(file_path).strip():
        raise StorageError(f"A file path is required for the {storage_type} backend.")
    if storage_type == STORAGE_JSON:
        return JsonFileContactRepository(file_path)
    return SqliteContactRepository(file_path)
