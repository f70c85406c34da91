"""Application layer: use cases and ports. Depends only on domain."""

from minicrm.application.contact_service import ContactService
from minicrm.application.ports import ContactRepository

__all__ = [
    "ContactRepository",
    "ContactService",
]
