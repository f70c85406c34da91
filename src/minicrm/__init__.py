"""
minicrm core: clean-architecture layout.

- domain: the Contact entity, validation rules and errors. No outer dependencies.
- application: use cases (ContactService) and ports (ContactRepository).
- infrastructure: adapters (in-memory, JSON file, SQLite) and the backend factory.
"""

from minicrm.application import ContactRepository, ContactService
from minicrm.domain import (
    Contact,
    ContactError,
    DuplicateEmailError,
    NotFoundError,
    StorageError,
    UnsupportedTypeError,
    ValidationError,
)
from minicrm.infrastructure import (
    InMemoryContactRepository,
    JsonFileContactRepository,
    SqliteContactRepository,
    create_repository,
    supported_types,
)

__all__ = [
    "Contact",
    "ContactError",
    "ContactRepository",
    "ContactService",
    "DuplicateEmailError",
    "InMemoryContactRepository",
    "JsonFileContactRepository",
    "NotFoundError",
    "SqliteContactRepository",
    "StorageError",
    "UnsupportedTypeError",
    "ValidationError",
    "create_repository",
    "supported_types",
]
