"""Domain errors raised by repositories and the contact service."""


class ContactError(Exception):
    """Base class for every error raised by minicrm."""


class ValidationError(ContactError, ValueError):
    """A contact field violates a validation rule."""


class NotFoundError(ContactError, LookupError):
    """No contact matches the requested id or email."""


class DuplicateEmailError(ContactError):
    """Another contact already owns this email."""


class StorageError(ContactError):
    """The backing store failed (I/O, malformed file, database engine)."""


class UnsupportedTypeError(ContactError, ValueError):
    """Unknown storage backend type."""
