"""Unit tests for ContactService. In-memory storage and DTOs only."""

import threading

import pytest

from agenda.application import (
    ContactCreated,
    ContactDeleted,
    ContactDraft,
    ContactNotFound,
    ContactPatch,
    ContactService,
    ContactUpdated,
    Duplicate,
    DuplicatesRemoved,
    Invalid,
    StorageError,
)
from agenda.domain import Contact
from agenda.infrastructure import InMemoryContactStorage, JsonLinesContactStorage


def _service(*records: Contact, **kwargs) -> tuple[ContactService, InMemoryContactStorage]:
    storage = InMemoryContactStorage(records, **kwargs)
    return ContactService(storage, id_factory=lambda: "generated-id"), storage


def test_create_contact_generates_id_and_persists() -> None:
    service, storage = _service()
    result = service.create_contact(
        ContactDraft(full_name="Alice", surname="Santos", email="alice@x.com")
    )
    assert isinstance(result, ContactCreated)
    assert result.contact.id == "generated-id"
    assert storage.load_all() == [result.contact]


def test_create_contact_keeps_supplied_id() -> None:
    service, _ = _service()
    result = service.create_contact(ContactDraft(id=42, full_name="Alice", surname="Santos"))
    assert isinstance(result, ContactCreated)
    assert result.contact.id == 42


def test_default_id_factory_returns_uuid_strings() -> None:
    service = ContactService(InMemoryContactStorage())
    first = service.create_contact(ContactDraft(full_name="Alice", surname="Santos"))
    second = service.create_contact(ContactDraft(full_name="Bob", surname="Moreira"))
    assert isinstance(first.contact.id, str) and len(first.contact.id) == 36
    assert first.contact.id != second.contact.id


def test_create_stores_blank_optional_fields_as_absent() -> None:
    service, storage = _service()
    service.create_contact(ContactDraft(full_name="Alice", surname="Santos", email=" ", phone=""))
    stored = storage.load_all()[0]
    assert stored.email is None
    assert stored.phone is None


def test_create_invalid_is_not_saved() -> None:
    service, storage = _service()
    result = service.create_contact(ContactDraft(full_name="A", surname="Santos"))
    assert isinstance(result, Invalid)
    assert storage.save_count == 0


def test_create_duplicate_is_not_saved() -> None:
    service, storage = _service(Contact(id=1, full_name="Ana", surname="Silva"))
    result = service.create_contact(ContactDraft(full_name="ana", surname="SILVA"))
    assert isinstance(result, Duplicate)
    assert len(storage.load_all()) == 1


def test_search_by_name_is_case_insensitive_substring() -> None:
    service, _ = _service(
        Contact(id=1, full_name="Ana", surname="Silva"),
        Contact(id=2, full_name="Bruno", surname="Silveira"),
        Contact(id=3, full_name="Carla", surname="Rocha"),
    )
    assert [c.id for c in service.search_contacts(name="SILV")] == [1, 2]
    assert [c.id for c in service.search_contacts(name="carl")] == [3]
    assert service.search_contacts(name="nobody") == []
    assert len(service.search_contacts()) == 3


def test_search_by_id_and_name_combined() -> None:
    service, _ = _service(
        Contact(id=1, full_name="Ana", surname="Silva"),
        Contact(id=2, full_name="Bruno", surname="Silveira"),
    )
    assert [c.id for c in service.search_contacts(contact_id="2")] == [2]
    assert [c.id for c in service.search_contacts(name="ana", contact_id="2")] == []


def test_get_contact() -> None:
    service, _ = _service(Contact(id=7, full_name="Ana", surname="Silva"))
    assert service.get_contact("7").full_name == "Ana"
    assert service.get_contact("8") is None


def test_update_merges_only_given_fields() -> None:
    service, storage = _service(
        Contact(id=1, full_name="Ana", surname="Silva", email="a@x.com", phone="11999998888")
    )
    result = service.update_contact(1, ContactPatch(surname="Souza"))
    assert isinstance(result, ContactUpdated)
    assert storage.load_all() == [
        Contact(id=1, full_name="Ana", surname="Souza", email="a@x.com", phone="11999998888")
    ]


def test_update_to_own_values_succeeds() -> None:
    service, _ = _service(Contact(id=1, full_name="Ana", surname="Silva", email="a@x.com"))
    result = service.update_contact(
        "1", ContactPatch(full_name="Ana", surname="Silva", email="A@X.com")
    )
    assert isinstance(result, ContactUpdated)
    assert result.contact.email == "A@X.com"


def test_update_missing_contact() -> None:
    service, storage = _service()
    result = service.update_contact("nope", ContactPatch(full_name="Ana"))
    assert result == ContactNotFound(contact_id="nope")
    assert storage.save_count == 0


def test_update_rejections_leave_storage_untouched() -> None:
    ana = Contact(id=1, full_name="Ana", surname="Silva")
    bia = Contact(id=2, full_name="Bia", surname="Rocha", phone="11988887777")
    service, storage = _service(ana, bia)
    assert isinstance(service.update_contact(1, ContactPatch(email="bad")), Invalid)
    assert isinstance(service.update_contact(1, ContactPatch(phone="11 98888-7777")), Duplicate)
    assert storage.load_all() == [ana, bia]


def test_delete_contact() -> None:
    service, storage = _service(
        Contact(id=1, full_name="Ana", surname="Silva"),
        Contact(id=2, full_name="Bia", surname="Rocha"),
    )
    assert service.delete_contact("1") == ContactDeleted(contact_id="1")
    assert [c.id for c in storage.load_all()] == [2]
    assert service.delete_contact("1") == ContactNotFound(contact_id="1")


def test_remove_duplicates_reports_counts_and_saves_survivors() -> None:
    service, storage = _service(
        Contact(id=1, full_name="Ana", surname="Silva", email="a@x.com"),
        Contact(id=2, full_name="Bia", surname="Rocha", email="A@x.com "),
        Contact(id=3, full_name="Caio", surname="Lima", phone="111-222-3333"),
        Contact(id=4, full_name="Duda", surname="Melo", phone="1112223333"),
    )
    result = service.remove_duplicates()
    assert result == DuplicatesRemoved(removed=2, total_before=4, total_after=2)
    assert [c.id for c in storage.load_all()] == [1, 3]


def test_clear_contacts() -> None:
    service, storage = _service(Contact(id=1, full_name="Ana", surname="Silva"))
    service.clear_contacts()
    assert storage.load_all() == []


def test_storage_errors_propagate() -> None:
    service, _ = _service(Contact(id=1, full_name="Ana", surname="Silva"), fail_writes=True)
    with pytest.raises(StorageError):
        service.create_contact(ContactDraft(full_name="Bia", surname="Rocha"))
    with pytest.raises(StorageError):
        service.update_contact(1, ContactPatch(surname="Souza"))
    with pytest.raises(StorageError):
        service.delete_contact(1)
    with pytest.raises(StorageError):
        service.remove_duplicates()
    with pytest.raises(StorageError):
        service.clear_contacts()


def test_concurrent_creates_in_one_process_are_not_lost(tmp_path) -> None:
    service = ContactService(JsonLinesContactStorage(tmp_path / "list.txt"))
    names = [f"Person{i:02d}" for i in range(20)]

    def create(name: str) -> None:
        service.create_contact(ContactDraft(full_name=name, surname="Tester"))

    threads = [threading.Thread(target=create, args=(name,)) for name in names]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    stored = sorted(c.full_name for c in service.search_contacts())
    assert stored == names
