"""
Agenda core: clean-architecture layout.

- domain: the Contact entity. No outer dependencies.
- application: use cases (ContactService), validation engine, ports (ContactStorage), DTOs.
- infrastructure: adapters (JsonLinesContactStorage, InMemoryContactStorage).
"""

from agenda.application import (
    ContactCreated,
    ContactDraft,
    ContactNotFound,
    ContactPatch,
    ContactService,
    ContactStorage,
    ContactUpdated,
    Duplicate,
    Invalid,
    StorageError,
)
from agenda.domain import Contact
from agenda.infrastructure import InMemoryContactStorage, JsonLinesContactStorage

__all__ = [
    "Contact",
    "ContactCreated",
    "ContactDraft",
    "ContactNotFound",
    "ContactPatch",
    "ContactService",
    "ContactStorage",
    "ContactUpdated",
    "Duplicate",
    "InMemoryContactStorage",
    "Invalid",
    "JsonLinesContactStorage",
    "StorageError",
]
