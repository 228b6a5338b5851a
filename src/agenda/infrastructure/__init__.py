"""Infrastructure layer: concrete implementations of application ports."""

from agenda.infrastructure.file_storage import JsonLinesContactStorage
from agenda.infrastructure.memory_storage import InMemoryContactStorage

__all__ = [
    "InMemoryContactStorage",
    "JsonLinesContactStorage",
]
