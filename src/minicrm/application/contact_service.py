"""Contact create, update, delete, list and search on top of one repository."""

import logging

from minicrm.application.ports import ContactRepository
from minicrm.domain import (
    Contact,
    DuplicateEmailError,
    NotFoundError,
    StorageError,
    normalize_email,
)

logger = logging.getLogger(__name__)


class ContactService:
    """Business rules above raw persistence: unique emails, existence checks before mutation.

    Holds no state besides the repository it wraps.
    """

    def __init__(self, repository: ContactRepository) -> None:
        self._repo = repository

    def create_contact(self, name: str, email: str, phone: str = "") -> Contact:
        """Store a new contact. Raises DuplicateEmailError if the email is taken."""
        email_key = normalize_email(email)
        try:
            existing = self._repo.get_by_email(email_key)
        except NotFoundError:
            existing = None
        except StorageError as exc:
            raise StorageError(f"create contact {email_key!r}: {exc}") from exc
        if existing is not None:
            logger.info("Rejected contact %r: email already used by #%d", email_key, existing.id)
            raise DuplicateEmailError(f"A contact with email {email_key!r} already exists.")

        try:
            return self._repo.create(Contact(name=name, email=email, phone=phone))
        except StorageError as exc:
            raise StorageError(f"create contact {email_key!r}: {exc}") from exc

    def list_contacts(self) -> list[Contact]:
        """Return all contacts ordered by id."""
        try:
            return self._repo.get_all()
        except StorageError as exc:
            raise StorageError(f"list contacts: {exc}") from exc

    def get_contact(self, contact_id: int) -> Contact:
        """Return a contact by id. Raises NotFoundError."""
        try:
            return self._repo.get_by_id(contact_id)
        except NotFoundError as exc:
            raise NotFoundError(f"get contact {contact_id}: {exc}") from exc
        except StorageError as exc:
            raise StorageError(f"get contact {contact_id}: {exc}") from exc

    def update_contact(
        self, contact_id: int, name: str, email: str, phone: str = ""
    ) -> Contact:
        """Replace every field of an existing contact.

        Keeping the contact's own email is allowed; taking another contact's email
        raises DuplicateEmailError.
        """
        try:
            current = self._repo.get_by_id(contact_id)
        except NotFoundError as exc:
            raise NotFoundError(f"update contact {contact_id}: {exc}") from exc
        except StorageError as exc:
            raise StorageError(f"update contact {contact_id}: {exc}") from exc

        email_key = normalize_email(email)
        if email_key != current.email:
            try:
                owner = self._repo.get_by_email(email_key)
            except NotFoundError:
                owner = None
            except StorageError as exc:
                raise StorageError(f"update contact {contact_id}: {exc}") from exc
            if owner is not None and owner.id != contact_id:
                logger.info(
                    "Rejected update of #%d: email %r belongs to #%d",
                    contact_id,
                    email_key,
                    owner.id,
                )
                raise DuplicateEmailError(
                    f"Another contact with email {email_key!r} already exists."
                )

        replacement = Contact(
            id=current.id,
            name=name,
            email=email,
            phone=phone,
            created_at=current.created_at,
            updated_at=current.updated_at,
        )
        try:
            return self._repo.update(replacement)
        except NotFoundError as exc:
            raise NotFoundError(f"update contact {contact_id}: {exc}") from exc
        except StorageError as exc:
            raise StorageError(f"update contact {contact_id}: {exc}") from exc

    def delete_contact(self, contact_id: int) -> None:
        """Delete an existing contact. Raises NotFoundError."""
        try:
            self._repo.get_by_id(contact_id)
            self._repo.delete(contact_id)
        except NotFoundError as exc:
            raise NotFoundError(f"delete contact {contact_id}: {exc}") from exc
        except StorageError as exc:
            raise StorageError(f"delete contact {contact_id}: {exc}") from exc

    def search_by_email(self, email: str) -> Contact:
        """Return the contact with this email (case-insensitive). Raises NotFoundError."""
        email_key = normalize_email(email)
        try:
            return self._repo.get_by_email(email_key)
        except NotFoundError as exc:
            raise NotFoundError(f"search email {email_key!r}: {exc}") from exc
        except StorageError as exc:
            raise StorageError(f"search email {email_key!r}: {exc}") from exc

    def close(self) -> None:
        """Close the wrapped repository."""
        self._repo.close()
