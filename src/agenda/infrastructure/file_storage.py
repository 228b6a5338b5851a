"""Line-delimited JSON file implementation of ContactStorage.

The file is the whole database: one compact JSON object per line, no
enclosing array, no trailing newline. Every call reads or rewrites the full
file; there is no index and no append log, so this only suits small address
books with a single writer.
"""

import logging
import os
import stat
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError
from pydantic_core import PydanticSerializationError

from agenda.application.ports import StorageError
from agenda.domain import Contact

logger = logging.getLogger(__name__)

DEFAULT_ENCODING = "utf-8"
DEFAULT_FILE_MODE = 0o644


class StoredContact(BaseModel):
    """Shape of one stored line. Strict types: no coercion of numbers into names."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: StrictStr | StrictInt
    full_name: StrictStr = Field(alias="fullName")
    surname: StrictStr
    email: StrictStr | None = None
    phone: StrictStr | None = None

    @classmethod
    def from_contact(cls, contact: Contact) -> "StoredContact":
        return cls(
            id=contact.id,
            full_name=contact.full_name,
            surname=contact.surname,
            email=contact.email,
            phone=contact.phone,
        )

    def to_contact(self) -> Contact:
        return Contact(
            id=self.id,
            full_name=self.full_name,
            surname=self.surname,
            email=self.email,
            phone=self.phone,
        )

    def to_line(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True)


def _first_error(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    loc = ".".join(str(part) for part in first.get("loc", ()))
    return f"{loc}: {first.get('msg')}" if loc else str(first.get("msg"))


class JsonLinesContactStorage:
    """Reads and rewrites a JSON-lines contacts file at path.

    Reads never raise: a missing file is an empty list, unreadable files and
    malformed lines are logged and skipped. Writes replace the file through a
    temporary sibling and os.replace, and raise StorageError on failure.
    """

    def __init__(self, path: str | Path, encoding: str = DEFAULT_ENCODING) -> None:
        self._path = Path(path)
        self._encoding = encoding

    @property
    def path(self) -> Path:
        return self._path

    def _ensure_dir(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)

    def load_all(self) -> list[Contact]:
        try:
            self._ensure_dir()
            data = self._path.read_bytes()
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error("Could not read contacts from %s: %s", self._path, e)
            return []

        # Decoded line by line so one bad byte only costs its own line.
        contacts: list[Contact] = []
        for line_num, raw_line in enumerate(data.split(b"\n"), 1):
            stripped = raw_line.strip()
            if not stripped:
                continue
            try:
                stored = StoredContact.model_validate_json(
                    stripped.decode(self._encoding)
                )
            except UnicodeDecodeError as e:
                logger.warning(
                    "Skipping undecodable line %d in %s: %s", line_num, self._path, e
                )
                continue
            except ValidationError as e:
                logger.warning(
                    "Skipping invalid line %d in %s: %s",
                    line_num,
                    self._path,
                    _first_error(e),
                )
                continue
            contacts.append(stored.to_contact())
        return contacts

    def save_all(self, records: Sequence[Contact]) -> None:
        lines = []
        for contact in records:
            try:
                line = StoredContact.from_contact(contact).to_line()
            except ValidationError as e:
                logger.warning(
                    "Dropping malformed contact id=%r before save: %s",
                    getattr(contact, "id", None),
                    _first_error(e),
                )
                continue
            except (PydanticSerializationError, UnicodeEncodeError) as e:
                logger.warning(
                    "Dropping unencodable contact id=%r before save: %s",
                    getattr(contact, "id", None),
                    e,
                )
                continue
            lines.append(line)
        self._replace_contents("\n".join(lines))

    def clear_all(self) -> None:
        self._replace_contents("")

    def _file_mode(self) -> int:
        try:
            return stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            return DEFAULT_FILE_MODE

    def _replace_contents(self, body: str) -> None:
        try:
            self._ensure_dir()
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            tmp_path = Path(tmp_name)
            try:
                with os.fdopen(fd, "w", encoding=self._encoding, newline="") as fh:
                    fh.write(body)
                # mkstemp creates 0600; keep the data file's existing mode.
                os.chmod(tmp_path, self._file_mode())
                os.replace(tmp_path, self._path)
            except Exception:
                tmp_path.unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Could not write contacts to {self._path}") from e
