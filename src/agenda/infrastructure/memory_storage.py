"""In-memory implementation of ContactStorage (no file)."""

from collections.abc import Iterable, Sequence

from agenda.application.ports import StorageError
from agenda.domain import Contact


class InMemoryContactStorage:
    """Holds the record set in a list. Order preserved by insertion.
    With fail_writes=True every save/clear raises StorageError, to exercise error paths.
    """

    def __init__(
        self,
        records: Iterable[Contact] | None = None,
        *,
        fail_writes: bool = False,
    ) -> None:
        self._records: list[Contact] = list(records or [])
        self.fail_writes = fail_writes
        self.save_count = 0

    def load_all(self) -> list[Contact]:
        return list(self._records)

    def save_all(self, records: Sequence[Contact]) -> None:
        if self.fail_writes:
            raise StorageError("in-memory storage is read-only")
        self._records = list(records)
        self.save_count += 1

    def clear_all(self) -> None:
        if self.fail_writes:
            raise StorageError("in-memory storage is read-only")
        self._records = []
        self.save_count += 1
