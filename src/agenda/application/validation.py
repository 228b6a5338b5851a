"""Validation and deduplication rules for contact record sets.

Every function here is pure: callers load the record set, pass it in, and
persist whatever they decide afterwards. Rejections are returned as values
(Invalid or Duplicate) so the caller can map them to a response; None means
the candidate is acceptable.

Lookups are linear scans over the loaded set, which is fine for a file-backed
address book of a few thousand records.
"""

from collections.abc import Sequence

from agenda.application.dto import (
    ContactDraft,
    ContactPatch,
    DeduplicationResult,
    Duplicate,
    Invalid,
)
from agenda.application.normalize import (
    blank_to_none,
    id_key,
    name_key,
    normalize_email,
    normalize_phone,
)
from agenda.domain import Contact, ContactId

FULL_NAME_MIN_LENGTH = 2
SURNAME_MIN_LENGTH = 3
PHONE_MIN_DIGITS = 8

ValidationFailure = Invalid | Duplicate


def _storable(value: str) -> bool:
    """False for text UTF-8 cannot encode, such as lone surrogates from escaped JSON."""
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        return False
    return True


def _check_fields(
    full_name: str | None,
    surname: str | None,
    email: str | None,
    phone: str | None,
    *,
    partial: bool,
) -> Invalid | None:
    """First structural rule that fails, or None. With partial=True, absent (None) names are skipped."""
    if not partial or full_name is not None:
        if len((full_name or "").strip()) < FULL_NAME_MIN_LENGTH:
            return Invalid(
                reason=f"Full name must have at least {FULL_NAME_MIN_LENGTH} characters."
            )
    if not partial or surname is not None:
        if len((surname or "").strip()) < SURNAME_MIN_LENGTH:
            return Invalid(
                reason=f"Surname must have at least {SURNAME_MIN_LENGTH} characters."
            )
    email = blank_to_none(email)
    if email is not None and "@" not in email:
        return Invalid(reason="Invalid email.")
    phone = blank_to_none(phone)
    if phone is not None and len(normalize_phone(phone)) < PHONE_MIN_DIGITS:
        return Invalid(reason=f"Phone must have at least {PHONE_MIN_DIGITS} digits.")
    for label, value in (
        ("Full name", full_name),
        ("Surname", surname),
        ("Email", email),
        ("Phone", phone),
    ):
        if value is not None and not _storable(value):
            return Invalid(reason=f"{label} contains characters that cannot be stored.")
    return None


def _find_duplicate(
    full_name: str | None,
    surname: str | None,
    email: str | None,
    phone: str | None,
    records: Sequence[Contact],
    *,
    check_name: bool = True,
) -> Duplicate | None:
    """Check name-pair, then email, then phone; the first collision wins."""
    if check_name:
        key = name_key(full_name, surname)
        if key and any(name_key(c.full_name, c.surname) == key for c in records):
            display = f"{(full_name or '').strip()} {(surname or '').strip()}".strip()
            return Duplicate(
                field="name", reason=f'A contact named "{display}" already exists.'
            )

    email_key = normalize_email(email)
    if email_key and any(normalize_email(c.email) == email_key for c in records):
        return Duplicate(
            field="email", reason=f'The email "{email.strip()}" is already in use.'
        )

    phone_key = normalize_phone(phone)
    if phone_key and any(normalize_phone(c.phone) == phone_key for c in records):
        return Duplicate(
            field="phone", reason=f'The phone "{phone.strip()}" is already registered.'
        )
    return None


def find_index_by_id(contact_id: ContactId, records: Sequence[Contact]) -> int:
    """Position of the first record with this id (compared as text), or -1."""
    wanted = id_key(contact_id)
    for index, contact in enumerate(records):
        if id_key(contact.id) == wanted:
            return index
    return -1


def validate_for_creation(
    candidate: ContactDraft, existing: Sequence[Contact]
) -> ValidationFailure | None:
    invalid = _check_fields(
        candidate.full_name,
        candidate.surname,
        candidate.email,
        candidate.phone,
        partial=False,
    )
    if invalid is not None:
        return invalid

    if isinstance(candidate.id, str) and not _storable(candidate.id):
        return Invalid(reason="Id contains characters that cannot be stored.")

    if candidate.id is not None and id_key(candidate.id) != "":
        if find_index_by_id(candidate.id, existing) != -1:
            return Duplicate(
                field="id",
                reason=f'The id "{candidate.id}" already exists. Choose another id.',
            )

    return _find_duplicate(
        candidate.full_name,
        candidate.surname,
        candidate.email,
        candidate.phone,
        existing,
    )


def validate_for_update(
    patch: ContactPatch, existing: Sequence[Contact], target_id: ContactId
) -> ValidationFailure | None:
    """Validate only the fields present in patch, ignoring the target's own values.

    The caller has already checked that target_id exists. When just one half
    of the name is patched, the other half comes from the target record so the
    pair is still compared jointly.
    """
    invalid = _check_fields(
        patch.full_name, patch.surname, patch.email, patch.phone, partial=True
    )
    if invalid is not None:
        return invalid

    target_key = id_key(target_id)
    others = [c for c in existing if id_key(c.id) != target_key]

    full_name, surname = patch.full_name, patch.surname
    check_name = full_name is not None or surname is not None
    if check_name:
        index = find_index_by_id(target_id, existing)
        if index != -1:
            current = existing[index]
            full_name = full_name if full_name is not None else current.full_name
            surname = surname if surname is not None else current.surname

    return _find_duplicate(
        full_name,
        surname,
        patch.email,
        patch.phone,
        others,
        check_name=check_name,
    )


def deduplicate(records: Sequence[Contact]) -> DeduplicationResult:
    """Keep the first record for every email, phone and name-pair; drop later matches.

    A record is dropped when any one of its keys was already seen on a kept
    record, even if its other keys differ. A missing email or phone
    contributes no key. A half-missing name still keys on whatever part is
    present ("ana-" for fullName "Ana" alone). A record with no name at all
    contributes no name key instead of the bare "-": otherwise every nameless
    legacy record would collapse into the first one even when their emails and
    phones differ. Relative order of survivors is preserved.
    """
    seen_emails: set[str] = set()
    seen_phones: set[str] = set()
    seen_names: set[str] = set()
    kept: list[Contact] = []
    removed = 0

    for contact in records:
        email_key = normalize_email(contact.email)
        phone_key = normalize_phone(contact.phone)
        pair_key = name_key(contact.full_name, contact.surname)

        if (
            (email_key and email_key in seen_emails)
            or (phone_key and phone_key in seen_phones)
            or (pair_key and pair_key in seen_names)
        ):
            removed += 1
            continue

        if email_key:
            seen_emails.add(email_key)
        if phone_key:
            seen_phones.add(phone_key)
        if pair_key:
            seen_names.add(pair_key)
        kept.append(contact)

    return DeduplicationResult(kept=kept, removed_count=removed)
