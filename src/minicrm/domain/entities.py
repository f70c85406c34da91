"""Domain entity: Contact, with its normalization and validation rules."""

from dataclasses import dataclass, replace
from datetime import datetime

from minicrm.domain.errors import ValidationError

# French mobile numbers.
MOBILE_PREFIXES = ("06", "07")


def normalize_email(value: str | None) -> str:
    """Trim and lower-case an email. Emails are stored and looked up in this form."""
    return (value or "").strip().lower()


@dataclass(frozen=True)
class Contact:
    """
    A person in the address book.
    id is 0 until a repository assigns one; timestamps are set by the repository.
    """

    id: int = 0
    name: str = ""
    email: str = ""
    phone: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def normalized(self) -> "Contact":
        """Return a copy with trimmed fields and a lower-cased email."""
        return replace(
            self,
            name=(self.name or "").strip(),
            email=normalize_email(self.email),
            phone=(self.phone or "").strip(),
        )

    def validate(self) -> None:
        """Raise ValidationError for the first rule the contact breaks."""
        if not (self.name or "").strip():
            raise ValidationError("Contact name must be non-empty.")
        email = (self.email or "").strip()
        if not email:
            raise ValidationError("Contact email must be non-empty.")
        if "@" not in email:
            raise ValidationError(f"Invalid email format: {email!r}.")
        phone = (self.phone or "").strip()
        if phone and not phone.startswith(MOBILE_PREFIXES):
            raise ValidationError(
                "Phone number must start with "
                + " or ".join(repr(p) for p in MOBILE_PREFIXES)
                + " if provided."
            )


def prepare_for_write(contact: Contact) -> Contact:
    """Normalize then validate. Run by every repository before insert and update."""
    prepared = contact.normalized()
    prepared.validate()
    return prepared
