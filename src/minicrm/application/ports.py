"""Application ports (interfaces). Implemented by infrastructure adapters."""

from typing import Protocol

from minicrm.domain import Contact


class ContactRepository(Protocol):
    """Persists and queries contacts. Every storage backend implements this."""

    def create(self, contact: Contact) -> Contact:
        """Assign id and timestamps, store the contact and return the stored copy.

        Raises ValidationError if the fields are invalid.
        """
        ...

    def get_by_id(self, contact_id: int) -> Contact:
        """Return the contact with the given id. Raises NotFoundError."""
        ...

    def get_all(self) -> list[Contact]:
        """Return all contacts, ordered by id."""
        ...

    def update(self, contact: Contact) -> Contact:
        """Replace the stored contact with the same id and refresh updated_at.

        Raises NotFoundError if the id is unknown, ValidationError if the fields are invalid.
        """
        ...

    def delete(self, contact_id: int) -> None:
        """Remove the contact permanently. Raises NotFoundError."""
        ...

    def get_by_email(self, email: str) -> Contact:
        """Return the contact owning the (normalized) email. Raises NotFoundError."""
        ...

    def close(self) -> None:
        """Release held resources (connections). No-op when nothing is held."""
        ...
