"""Normalized keys used to match contacts regardless of case, spacing or punctuation."""

import re

from agenda.domain import ContactId

_NON_DIGITS = re.compile(r"\D")


def normalize_email(raw: str | None) -> str:
    """Lowercase and trim. Returns "" for a missing email."""
    return (raw or "").strip().lower()


def normalize_phone(raw: str | None) -> str:
    """Keep digits only: "(11) 9999-8888" -> "1199998888"."""
    return _NON_DIGITS.sub("", raw or "")


def name_key(full_name: str | None, surname: str | None) -> str:
    """Joint key for the (fullName, surname) pair, each part lowercased and trimmed.

    Returns "" when both parts are missing or blank.
    """
    first = (full_name or "").strip().lower()
    last = (surname or "").strip().lower()
    if not first and not last:
        return ""
    return f"{first}-{last}"


def id_key(contact_id: ContactId | None) -> str:
    """Text form of an id, so 7 and "7" refer to the same record."""
    if contact_id is None:
        return ""
    return str(contact_id)


def blank_to_none(value: str | None) -> str | None:
    if value is None or not value.strip():
        return None
    return value
