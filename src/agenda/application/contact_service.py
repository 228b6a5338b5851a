"""Contact use cases: create, search, get, update, delete, deduplicate, clear."""

import logging
import threading
import uuid
from collections.abc import Callable
from dataclasses import replace

from agenda.application.dto import (
    ContactCreated,
    ContactDeleted,
    ContactDraft,
    ContactNotFound,
    ContactPatch,
    ContactUpdated,
    Duplicate,
    DuplicatesRemoved,
    Invalid,
)
from agenda.application.normalize import blank_to_none, id_key
from agenda.application.ports import ContactStorage
from agenda.application.validation import (
    deduplicate,
    find_index_by_id,
    validate_for_creation,
    validate_for_update,
)
from agenda.domain import Contact, ContactId

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


class ContactService:
    """Runs each use case as load -> validate -> save against the storage.

    Nothing is cached between calls; storage is reloaded every time. Mutations
    hold an in-process lock around their read-modify-write so two requests in
    the same process cannot lose each other's update. Other processes writing
    the same file are not coordinated with.
    """

    def __init__(
        self,
        storage: ContactStorage,
        *,
        id_factory: Callable[[], ContactId] = _new_id,
    ) -> None:
        self._storage = storage
        self._id_factory = id_factory
        self._lock = threading.Lock()

    def create_contact(
        self, draft: ContactDraft
    ) -> ContactCreated | Invalid | Duplicate:
        with self._lock:
            records = self._storage.load_all()
            rejection = validate_for_creation(draft, records)
            if rejection is not None:
                return rejection

            contact_id = draft.id
            if contact_id is None or id_key(contact_id) == "":
                contact_id = self._id_factory()
            contact = Contact(
                id=contact_id,
                full_name=draft.full_name,
                surname=draft.surname,
                email=blank_to_none(draft.email),
                phone=blank_to_none(draft.phone),
            )
            records.append(contact)
            self._storage.save_all(records)

        logger.info("Contact created: id=%s", contact.id)
        return ContactCreated(contact=contact)

    def search_contacts(
        self, name: str | None = None, contact_id: ContactId | None = None
    ) -> list[Contact]:
        """Return contacts whose fullName or surname contains name (case-insensitive) and/or whose id matches."""
        records = self._storage.load_all()
        if name:
            needle = name.lower()
            records = [
                c
                for c in records
                if needle in (c.full_name or "").lower()
                or needle in (c.surname or "").lower()
            ]
        if contact_id is not None and id_key(contact_id) != "":
            wanted = id_key(contact_id)
            records = [c for c in records if id_key(c.id) == wanted]
        return records

    def get_contact(self, contact_id: ContactId) -> Contact | None:
        """Return the contact with this id, or None."""
        records = self._storage.load_all()
        index = find_index_by_id(contact_id, records)
        if index == -1:
            return None
        return records[index]

    def update_contact(
        self, contact_id: ContactId, patch: ContactPatch
    ) -> ContactUpdated | ContactNotFound | Invalid | Duplicate:
        """Apply the non-empty fields of patch; omitted fields keep their current values."""
        with self._lock:
            records = self._storage.load_all()
            index = find_index_by_id(contact_id, records)
            if index == -1:
                return ContactNotFound(contact_id=contact_id)

            rejection = validate_for_update(patch, records, contact_id)
            if rejection is not None:
                return rejection

            current = records[index]
            updated = replace(
                current,
                full_name=patch.full_name if patch.full_name is not None else current.full_name,
                surname=patch.surname if patch.surname is not None else current.surname,
                email=blank_to_none(patch.email) or current.email,
                phone=blank_to_none(patch.phone) or current.phone,
            )
            records[index] = updated
            self._storage.save_all(records)

        logger.info("Contact updated: id=%s", updated.id)
        return ContactUpdated(contact=updated)

    def delete_contact(
        self, contact_id: ContactId
    ) -> ContactDeleted | ContactNotFound:
        with self._lock:
            records = self._storage.load_all()
            wanted = id_key(contact_id)
            remaining = [c for c in records if id_key(c.id) != wanted]
            if len(remaining) == len(records):
                return ContactNotFound(contact_id=contact_id)
            self._storage.save_all(remaining)

        logger.info("Contact deleted: id=%s", contact_id)
        return ContactDeleted(contact_id=contact_id)

    def remove_duplicates(self) -> DuplicatesRemoved:
        """Drop later records sharing an email, phone or name-pair with an earlier one."""
        with self._lock:
            records = self._storage.load_all()
            result = deduplicate(records)
            self._storage.save_all(result.kept)

        logger.info(
            "Duplicates removed: %d of %d contacts", result.removed_count, len(records)
        )
        return DuplicatesRemoved(
            removed=result.removed_count,
            total_before=len(records),
            total_after=len(result.kept),
        )

    def clear_contacts(self) -> None:
        with self._lock:
            self._storage.clear_all()
        logger.info("Contact list cleared")
