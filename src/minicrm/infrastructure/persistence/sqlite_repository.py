"""SQLite implementation of ContactRepository, backed by SQLAlchemy."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import create_engine, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from minicrm.domain import (
    Contact,
    DuplicateEmailError,
    NotFoundError,
    StorageError,
    normalize_email,
    prepare_for_write,
)
from minicrm.infrastructure.persistence.models import Base, ContactRow

logger = logging.getLogger(__name__)


def _as_utc(dt: datetime) -> datetime:
    # SQLite keeps no offset; everything is written in UTC.
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def _row_to_contact(row: ContactRow) -> Contact:
    return Contact(
        id=row.id,
        name=row.name,
        email=row.email,
        phone=row.phone or "",
        created_at=_as_utc(row.created_at),
        updated_at=_as_utc(row.updated_at),
    )


class SqliteContactRepository:
    """Stores contacts in a single SQLite table.

    Concurrent writers are serialized by SQLite itself; no application lock.
    Email uniqueness is also enforced by a unique index.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._engine = create_engine(
                f"sqlite:///{self.path}",
                connect_args={"check_same_thread": False},
            )
            Base.metadata.create_all(self._engine)
        except (OSError, SQLAlchemyError) as exc:
            raise StorageError(f"Failed to open database {self.path}: {exc}") from exc
        self._sessionmaker = sessionmaker(
            bind=self._engine, autoflush=False, expire_on_commit=False
        )
        logger.info("Opened contacts database %s", self.path)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Yield a session; roll back on error and translate engine errors."""
        session: Session = self._sessionmaker()
        try:
            yield session
        except IntegrityError as exc:
            session.rollback()
            raise DuplicateEmailError(f"A contact with this email already exists: {exc.orig}") from exc
        except SQLAlchemyError as exc:
            session.rollback()
            raise StorageError(f"Database error on {self.path}: {exc}") from exc
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def create(self, contact: Contact) -> Contact:
        prepared = prepare_for_write(contact)
        now = datetime.now(timezone.utc)
        row = ContactRow(
            name=prepared.name,
            email=prepared.email,
            phone=prepared.phone,
            created_at=now,
            updated_at=now,
        )
        with self._session() as session:
            session.add(row)
            session.commit()
            stored = _row_to_contact(row)
        logger.debug("Created contact #%d", stored.id)
        return stored

    def get_by_id(self, contact_id: int) -> Contact:
        with self._session() as session:
            row = session.get(ContactRow, contact_id)
            if row is None:
                raise NotFoundError(f"There is no contact with ID {contact_id}.")
            return _row_to_contact(row)

    def get_all(self) -> list[Contact]:
        with self._session() as session:
            rows = session.execute(select(ContactRow).order_by(ContactRow.id)).scalars().all()
            return [_row_to_contact(row) for row in rows]

    def update(self, contact: Contact) -> Contact:
        with self._session() as session:
            row = session.get(ContactRow, contact.id)
            if row is None:
                raise NotFoundError(f"There is no contact with ID {contact.id}.")
            prepared = prepare_for_write(contact)
            row.name = prepared.name
            row.email = prepared.email
            row.phone = prepared.phone
            row.updated_at = datetime.now(timezone.utc)
            session.commit()
            stored = _row_to_contact(row)
        logger.debug("Updated contact #%d", stored.id)
        return stored

    def delete(self, contact_id: int) -> None:
        with self._session() as session:
            row = session.get(ContactRow, contact_id)
            if row is None:
                raise NotFoundError(f"There is no contact with ID {contact_id}.")
            session.delete(row)
            session.commit()
        logger.debug("Deleted contact #%d", contact_id)

    def get_by_email(self, email: str) -> Contact:
        needle = normalize_email(email)
        with self._session() as session:
            stmt = select(ContactRow).where(ContactRow.email == needle)
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                raise NotFoundError(f"There is no contact with email {needle!r}.")
            return _row_to_contact(row)

    def close(self) -> None:
        self._engine.dispose()
        logger.info("Closed contacts database %s", self.path)
