"""Domain layer: the Contact entity and errors. No dependencies on outer layers."""

from minicrm.domain.entities import (
    MOBILE_PREFIXES,
    Contact,
    normalize_email,
    prepare_for_write,
)
from minicrm.domain.errors import (
    ContactError,
    DuplicateEmailError,
    NotFoundError,
    StorageError,
    UnsupportedTypeError,
    ValidationError,
)

__all__ = [
    "MOBILE_PREFIXES",
    "Contact",
    "ContactError",
    "DuplicateEmailError",
    "NotFoundError",
    "StorageError",
    "UnsupportedTypeError",
    "ValidationError",
    "normalize_email",
    "prepare_for_write",
]
