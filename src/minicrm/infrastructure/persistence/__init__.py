"""SQL persistence: table model and the SQLite repository."""

from minicrm.infrastructure.persistence.models import Base, ContactRow
from minicrm.infrastructure.persistence.sqlite_repository import SqliteContactRepository

__all__ = ["Base", "ContactRow", "SqliteContactRepository"]
