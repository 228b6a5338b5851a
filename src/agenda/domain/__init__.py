"""Domain layer: the Contact entity. No dependencies on outer layers."""

from agenda.domain.entities import Contact, ContactId

__all__ = ["Contact", "ContactId"]
