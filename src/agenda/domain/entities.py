"""Domain entities: Contact."""

from dataclasses import dataclass

ContactId = str | int


@dataclass(frozen=True)
class Contact:
    """
    A person in the address book.
    Business rules (name lengths, email/phone shape, uniqueness) live in the
    validation engine; a Contact loaded from storage may predate them.
    """

    id: ContactId
    full_name: str
    surname: str
    email: str | None = None
    phone: str | None = None
