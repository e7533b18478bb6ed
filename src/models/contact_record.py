from __future__ import annotations

from dataclasses import dataclass

from .field_slot import PhoneLabel

"""ContactRecord model.

One ContactRecord is built from exactly one data row and consumed once by the
vCard serializer. Records are never persisted.
"""

__all__ = [
    "PhoneEntry",
    "ContactRecord",
]


@dataclass(frozen=True)
class PhoneEntry:
    label: PhoneLabel
    value: str


@dataclass(frozen=True)
class ContactRecord:
    """Resolved contact derived from a single sheet row.

    Attributes:
        full_name: Display name, possibly empty
        phones: Up to three phone entries in phone1/phone2/phone3 order
        email, organization, title, address: Free text, empty when unmapped
        category: Originating sheet name when sheet tagging is enabled
    """
    full_name: str = ""
    phones: tuple[PhoneEntry, ...] = ()
    email: str = ""
    organization: str = ""
    title: str = ""
    address: str = ""
    category: str | None = None

    @property
    def is_admissible(self) -> bool:
        """A record is kept only if it carries a name, a phone or an email."""
        return bool(self.full_name or self.phones or self.email)
