"""JSON-file implementation of ContactRepository.

The whole record set is rewritten on every mutation: written to a temporary
file next to the target, then renamed over it. Record volumes are small.
"""

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from minicrm.domain import Contact, StorageError, ValidationError, prepare_for_write
from minicrm.infrastructure.memory_repository import InMemoryContactRepository

logger = logging.getLogger(__name__)

_TEXT_FIELDS = ("name", "email")


def _datetime_to_iso(dt: datetime | None) -> str | None:
    return dt.isoformat() if dt is not None else None


def _iso_to_datetime(s: str) -> datetime:
    dt = datetime.fromisoformat(s.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def _contact_to_dict(contact: Contact) -> dict[str, Any]:
    return {
        "id": contact.id,
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "created_at": _datetime_to_iso(contact.created_at),
        "updated_at": _datetime_to_iso(contact.updated_at),
    }


def _dict_to_contact(item: Any, position: int) -> Contact:
    if not isinstance(item, dict):
        raise StorageError(f"Record {position} is not an object.")
    contact_id = item.get("id")
    if isinstance(contact_id, bool) or not isinstance(contact_id, int) or contact_id < 1:
        raise StorageError(f"Record {position} has an invalid id: {contact_id!r}.")
    for key in _TEXT_FIELDS:
        if not isinstance(item.get(key), str):
            raise StorageError(f"Record {position} has an invalid {key}.")
    phone = item.get("phone")
    if phone is None:
        phone = ""
    elif not isinstance(phone, str):
        raise StorageError(f"Record {position} has an invalid phone.")
    try:
        created_at = _iso_to_datetime(item["created_at"])
        updated_at = _iso_to_datetime(item["updated_at"])
    except (KeyError, TypeError, ValueError) as exc:
        raise StorageError(f"Record {position} has an invalid timestamp: {exc}") from exc
    contact = Contact(
        id=contact_id,
        name=item["name"],
        email=item["email"],
        phone=phone,
        created_at=created_at,
        updated_at=updated_at,
    )
    try:
        return prepare_for_write(contact)
    except ValidationError as exc:
        raise StorageError(f"Record {position} is not a valid contact: {exc}") from exc


class JsonFileContactRepository(InMemoryContactRepository):
    """In-memory repository mirrored to a JSON file after every successful mutation."""

    def __init__(self, path: str | Path) -> None:
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            logger.info("No contacts file at %s, starting empty", self.path)
            return
        try:
            raw = self.path.read_text(encoding="utf-8")
            data = json.loads(raw)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StorageError(f"Failed to load contacts from {self.path}: {exc}") from exc
        if data is None:
            data = []
        if not isinstance(data, list):
            raise StorageError(f"Failed to load contacts from {self.path}: expected a list.")

        records: dict[int, Contact] = {}
        emails: set[str] = set()
        for position, item in enumerate(data):
            contact = _dict_to_contact(item, position)
            if contact.id in records:
                raise StorageError(
                    f"Failed to load contacts from {self.path}: duplicate id {contact.id}."
                )
            if contact.email in emails:
                raise StorageError(
                    f"Failed to load contacts from {self.path}: duplicate email {contact.email!r}."
                )
            emails.add(contact.email)
            records[contact.id] = contact
        self._by_id = records
        self._next_id = max(records, default=0) + 1
        logger.info("Loaded %d contacts from %s", len(records), self.path)

    def _persist(self, records: dict[int, Contact]) -> None:
        payload = [_contact_to_dict(records[cid]) for cid in sorted(records)]
        directory = self.path.parent
        try:
            directory.mkdir(parents=True, exist_ok=True)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=directory, prefix=f".{self.path.name}.", suffix=".tmp"
            )
        except OSError as exc:
            raise StorageError(f"Failed to save contacts to {self.path}: {exc}") from exc
        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, ensure_ascii=False)
            os.replace(temp_path, self.path)
        except (OSError, TypeError, ValueError) as exc:
            Path(temp_path).unlink(missing_ok=True)
            raise StorageError(f"Failed to save contacts to {self.path}: {exc}") from exc
