"""Application layer: use cases, validation engine, ports, and DTOs. Depends only on domain."""

from agenda.application.contact_service import ContactService
from agenda.application.dto import (
    ContactCreated,
    ContactDeleted,
    ContactDraft,
    ContactNotFound,
    ContactPatch,
    ContactUpdated,
    DeduplicationResult,
    Duplicate,
    DuplicatesRemoved,
    Invalid,
)
from agenda.application.ports import ContactStorage, StorageError
from agenda.application.validation import (
    deduplicate,
    find_index_by_id,
    validate_for_creation,
    validate_for_update,
)

__all__ = [
    "ContactStorage",
    "ContactService",
    "ContactDraft",
    "ContactPatch",
    "ContactCreated",
    "ContactUpdated",
    "ContactDeleted",
    "ContactNotFound",
    "DeduplicationResult",
    "Duplicate",
    "DuplicatesRemoved",
    "Invalid",
    "StorageError",
    "deduplicate",
    "find_index_by_id",
    "validate_for_creation",
    "validate_for_update",
]
