"""Application ports (interfaces). Implemented by infrastructure adapters."""

from collections.abc import Sequence
from typing import Protocol

from agenda.domain import Contact


class StorageError(Exception):
    """A write to contact storage could not be completed."""


class ContactStorage(Protocol):
    """Loads and replaces the whole contact record set."""

    def load_all(self) -> list[Contact]:
        """Return every readable contact. Never raises; unreadable storage is an empty list."""
        ...

    def save_all(self, records: Sequence[Contact]) -> None:
        """Replace the stored record set. Raises StorageError when the write fails."""
        ...

    def clear_all(self) -> None:
        """Remove every stored record. Raises StorageError when the write fails."""
        ...
