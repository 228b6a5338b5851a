"""Input payloads and result values for contact use cases."""

from dataclasses import dataclass, field

from agenda.domain import Contact, ContactId


@dataclass(frozen=True)
class ContactDraft:
    """Payload for creating a contact. id is generated when omitted."""

    full_name: str | None = None
    surname: str | None = None
    email: str | None = None
    phone: str | None = None
    id: ContactId | None = None


@dataclass(frozen=True)
class ContactPatch:
    """Payload for updating a contact. None means "keep the current value"."""

    full_name: str | None = None
    surname: str | None = None
    email: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class Invalid:
    """A field failed a structural rule (length, email or phone shape)."""

    reason: str


@dataclass(frozen=True)
class Duplicate:
    """The candidate collides with an existing record on id, name, email or phone."""

    field: str
    reason: str


@dataclass(frozen=True)
class ContactCreated:
    contact: Contact


@dataclass(frozen=True)
class ContactUpdated:
    contact: Contact


@dataclass(frozen=True)
class ContactDeleted:
    contact_id: ContactId


@dataclass(frozen=True)
class ContactNotFound:
    contact_id: ContactId


@dataclass(frozen=True)
class DeduplicationResult:
    """Survivors of a deduplication pass in original order, plus how many were dropped."""

    kept: list[Contact] = field(default_factory=list)
    removed_count: int = 0


@dataclass(frozen=True)
class DuplicatesRemoved:
    removed: int
    total_before: int
    total_after: int
