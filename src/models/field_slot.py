from __future__ import annotations

from collections.abc import Iterator, Mapping
from enum import Enum

"""Field slots and column mappings.

A column mapping binds each recognized contact field (slot) to at most one
zero-based column index of a sheet. Mappings are immutable: binding or
overriding a slot returns a new mapping.
"""

__all__ = [
    "FieldSlot",
    "PhoneLabel",
    "PHONE_SLOTS",
    "ColumnMapping",
]


class FieldSlot(str, Enum):
    """Semantic contact field a column can be bound to.

    Values are the keys used in YAML configuration files.
    """
    FULL_NAME = "fullName"
    FIRST_NAME = "firstName"
    LAST_NAME = "lastName"
    PHONE1 = "phone1"
    PHONE2 = "phone2"
    PHONE3 = "phone3"
    EMAIL = "email"
    ORGANIZATION = "organization"
    TITLE = "title"
    ADDRESS = "address"


class PhoneLabel(str, Enum):
    """vCard TEL type attached to a phone entry."""
    CELL = "CELL"
    WORK = "WORK"
    HOME = "HOME"


# phone1..3 の順序と TEL 種別は固定 (列の検出順ではなくスロットで決まる)
PHONE_SLOTS: tuple[tuple[FieldSlot, PhoneLabel], ...] = (
    (FieldSlot.PHONE1, PhoneLabel.CELL),
    (FieldSlot.PHONE2, PhoneLabel.WORK),
    (FieldSlot.PHONE3, PhoneLabel.HOME),
)


class ColumnMapping(Mapping[FieldSlot, int]):
    """Immutable partial mapping FieldSlot -> column index for one sheet."""

    __slots__ = ("_bindings",)

    def __init__(self, bindings: Mapping[FieldSlot, int] | None = None) -> None:
        raw = dict(bindings or {})
        # Iteration follows FieldSlot declaration order so reprs and logs are stable
        self._bindings: dict[FieldSlot, int] = {
            slot: raw[slot] for slot in FieldSlot if slot in raw
        }

    def __getitem__(self, slot: FieldSlot) -> int:
        return self._bindings[slot]

    def __iter__(self) -> Iterator[FieldSlot]:
        return iter(self._bindings)

    def __len__(self) -> int:
        return len(self._bindings)

    def __repr__(self) -> str:
        inner = ", ".join(f"{slot.value}={index}" for slot, index in self._bindings.items())
        return f"ColumnMapping({inner})"

    def bind(self, slot: FieldSlot, index: int) -> ColumnMapping:
        """Return a copy with ``slot`` bound to ``index``."""
        bindings = dict(self._bindings)
        bindings[slot] = index
        return ColumnMapping(bindings)

    def with_overrides(self, overrides: Mapping[FieldSlot, int | None]) -> ColumnMapping:
        """Return a copy where each overridden slot is replaced.

        A ``None`` override removes the slot (explicitly unmapped column).
        Slots absent from ``overrides`` keep their current binding.
        """
        bindings = dict(self._bindings)
        for slot, index in overrides.items():
            if index is None:
                bindings.pop(slot, None)
            else:
                bindings[slot] = index
        return ColumnMapping(bindings)

    def slot_for_column(self, index: int) -> FieldSlot | None:
        for slot, bound in self._bindings.items():
            if bound == index:
                return slot
        return None

    def to_dict(self) -> dict[str, int]:
        """Plain ``{slot name: index}`` dict, used for logging and inspection output."""
        return {slot.value: index for slot, index in self._bindings.items()}
