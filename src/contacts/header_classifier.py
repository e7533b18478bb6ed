from __future__ import annotations

import math
import unicodedata
from collections.abc import Sequence
from dataclasses import dataclass
from functools import reduce
from typing import Any

from ..models.field_slot import ColumnMapping, FieldSlot

"""Header row classification.

Maps a row of header cells to a ColumnMapping using an ordered keyword rule
table. Each header cell is matched against the rules in order and the first
matching rule decides the cell's slot; later rules are not consulted for that
cell. The mapping is built by a single left-to-right fold over the cells, so a
slot is bound by the first column that claims it.

Keywords are matched as case-folded substrings. Each rule lists French and
English variants.
"""

__all__ = [
    "KeywordRule",
    "KEYWORD_RULES",
    "classify",
    "normalize_header",
]


_ORGANIZATION_WORDS = ("entreprise", "société", "societe", "company", "organization", "organisation")


@dataclass(frozen=True)
class KeywordRule:
    """One entry of the classification table.

    Attributes:
        name: Label used in logs / debugging
        targets: Candidate slots, bound in order to the first free one
        keywords: Alternatives; an alternative matches when all of its
            fragments occur in the header
        excludes: Fragments that disqualify the header for this rule
        requires_unbound: Slots that must still be free for the rule to match
    """
    name: str
    targets: tuple[FieldSlot, ...]
    keywords: tuple[tuple[str, ...], ...]
    excludes: tuple[str, ...] = ()
    requires_unbound: tuple[FieldSlot, ...] = ()

    def matches(self, header: str, mapping: ColumnMapping) -> bool:
        if any(slot in mapping for slot in self.requires_unbound):
            return False
        if any(word in header for word in self.excludes):
            return False
        return any(all(fragment in header for fragment in alt) for alt in self.keywords)

    def free_target(self, mapping: ColumnMapping) -> FieldSlot | None:
        for slot in self.targets:
            if slot not in mapping:
                return slot
        return None


def _alts(*words: str) -> tuple[tuple[str, ...], ...]:
    return tuple((w,) for w in words)


# 評価順 = 優先順位。順番を入れ替えると判定結果が変わる
KEYWORD_RULES: tuple[KeywordRule, ...] = (
    KeywordRule(
        name="first_name",
        targets=(FieldSlot.FIRST_NAME,),
        keywords=_alts("prénom", "prenom") + (("first", "name"), ("given", "name")),
    ),
    KeywordRule(
        name="last_name",
        targets=(FieldSlot.LAST_NAME,),
        keywords=_alts("nom de famille", "nom", "surname") + (("last", "name"), ("family", "name")),
        excludes=("complet",) + _ORGANIZATION_WORDS,
    ),
    KeywordRule(
        name="full_name",
        targets=(FieldSlot.FULL_NAME,),
        keywords=_alts("nom complet") + (("full", "name"),),
    ),
    KeywordRule(
        name="generic_name",
        targets=(FieldSlot.FULL_NAME,),
        keywords=_alts("nom", "name"),
        excludes=_ORGANIZATION_WORDS,
        requires_unbound=(FieldSlot.FIRST_NAME, FieldSlot.LAST_NAME),
    ),
    KeywordRule(
        name="phone",
        targets=(FieldSlot.PHONE1, FieldSlot.PHONE2, FieldSlot.PHONE3),
        keywords=_alts("téléphone", "telephone", "portable", "phone", "mobile", "cell"),
    ),
    KeywordRule(
        name="email",
        targets=(FieldSlot.EMAIL,),
        keywords=_alts("courriel", "email", "mail"),
    ),
    KeywordRule(
        name="organization",
        targets=(FieldSlot.ORGANIZATION,),
        keywords=_alts(*_ORGANIZATION_WORDS),
    ),
    KeywordRule(
        name="title",
        targets=(FieldSlot.TITLE,),
        keywords=_alts("titre", "poste", "fonction", "title", "job", "position"),
    ),
    KeywordRule(
        name="address",
        targets=(FieldSlot.ADDRESS,),
        keywords=_alts("adresse", "address"),
    ),
)


def normalize_header(cell: Any) -> str:
    """String conversion + case folding of a header cell ("" for empty cells)."""
    if cell is None:
        return ""
    if isinstance(cell, float) and math.isnan(cell):
        return ""
    text = unicodedata.normalize("NFC", str(cell)).strip()
    return text.casefold()


def _classify_cell(
    mapping: ColumnMapping, indexed_cell: tuple[int, Any], rules: Sequence[KeywordRule]
) -> ColumnMapping:
    index, cell = indexed_cell
    header = normalize_header(cell)
    if not header:
        return mapping
    for rule in rules:
        if not rule.matches(header, mapping):
            continue
        # 最初に一致したルールで確定。空きスロットが無ければ列は未割当のまま
        slot = rule.free_target(mapping)
        return mapping if slot is None else mapping.bind(slot, index)
    return mapping


def classify(
    header_row: Sequence[Any] | None, rules: Sequence[KeywordRule] = KEYWORD_RULES
) -> ColumnMapping:
    """Detect the column mapping of a header row.

    Parameters:
        header_row: Header cells (None / str / number); None is treated as an empty row
        rules: Ordered rule table, defaults to KEYWORD_RULES

    Returns:
        ColumnMapping with one binding per recognized slot. Never raises;
        a row without any recognized header yields an empty mapping.
    """
    cells = list(header_row or ())
    return reduce(
        lambda acc, item: _classify_cell(acc, item, rules),
        enumerate(cells),
        ColumnMapping(),
    )
