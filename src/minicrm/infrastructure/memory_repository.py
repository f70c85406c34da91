"""In-memory implementation of ContactRepository (no persistence)."""

import logging
from dataclasses import replace
from datetime import datetime, timezone

from minicrm.domain import Contact, NotFoundError, normalize_email, prepare_for_write
from minicrm.infrastructure.locking import ReadWriteLock

logger = logging.getLogger(__name__)


def _now() -> datetime:
    return datetime.now(timezone.utc)


class InMemoryContactRepository:
    """Stores contacts in a dict keyed by id. State is lost when the process ends.

    Every operation holds the lock for its full duration: shared for reads,
    exclusive for mutations. Mutations build the next mapping, pass it to
    _persist and only then swap it in, so a failed persist changes nothing.
    """

    def __init__(self) -> None:
        self._lock = ReadWriteLock()
        self._by_id: dict[int, Contact] = {}
        self._next_id = 1

    def _persist(self, records: dict[int, Contact]) -> None:
        """Hook for durable subclasses; called with the full next record set."""

    def create(self, contact: Contact) -> Contact:
        prepared = prepare_for_write(contact)
        with self._lock.write_locked():
            now = _now()
            stored = replace(prepared, id=self._next_id, created_at=now, updated_at=now)
            records = dict(self._by_id)
            records[stored.id] = stored
            self._persist(records)
            self._by_id = records
            self._next_id += 1
        logger.debug("Created contact #%d", stored.id)
        return stored

    def get_by_id(self, contact_id: int) -> Contact:
        with self._lock.read_locked():
            contact = self._by_id.get(contact_id)
        if contact is None:
            raise NotFoundError(f"There is no contact with ID {contact_id}.")
        return contact

    def get_all(self) -> list[Contact]:
        with self._lock.read_locked():
            return [self._by_id[cid] for cid in sorted(self._by_id)]

    def update(self, contact: Contact) -> Contact:
        with self._lock.write_locked():
            current = self._by_id.get(contact.id)
            if current is None:
                raise NotFoundError(f"There is no contact with ID {contact.id}.")
            prepared = prepare_for_write(contact)
            stored = replace(prepared, created_at=current.created_at, updated_at=_now())
            records = dict(self._by_id)
            records[stored.id] = stored
            self._persist(records)
            self._by_id = records
        logger.debug("Updated contact #%d", stored.id)
        return stored

    def delete(self, contact_id: int) -> None:
        with self._lock.write_locked():
            if contact_id not in self._by_id:
                raise NotFoundError(f"There is no contact with ID {contact_id}.")
            records = dict(self._by_id)
            del records[contact_id]
            self._persist(records)
            self._by_id = records
        logger.debug("Deleted contact #%d", contact_id)

    def get_by_email(self, email: str) -> Contact:
        needle = normalize_email(email)
        with self._lock.read_locked():
            for contact in self._by_id.values():
                if contact.email == needle:
                    return contact
        raise NotFoundError(f"There is no contact with email {needle!r}.")

    def close(self) -> None:
        pass
