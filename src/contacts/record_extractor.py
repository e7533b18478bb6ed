from __future__ import annotations

import math
import numbers
from collections.abc import Mapping, Sequence
from datetime import date, datetime, time
from typing import Any

from ..models.contact_record import ContactRecord, PhoneEntry
from ..models.field_slot import PHONE_SLOTS, FieldSlot
from ..models.sheet import Sheet

"""Contact record extraction.

Turns the data rows of a sheet (rows strictly after the chosen header row)
into ContactRecord values according to a column mapping.

Spreadsheet data is assumed to be messy: missing cells, short rows, NaN and
non-string values all degrade to empty strings. Extraction never raises;
rows that yield no name, phone or email are dropped.
"""

__all__ = [
    "cell_text",
    "data_rows",
    "extract",
    "extract_row",
    "is_blank_row",
]


def _is_empty_cell(value: Any) -> bool:
    if value is None or value is False:
        return True
    if isinstance(value, numbers.Real) and (value == 0 or math.isnan(value)):
        return True
    if isinstance(value, str) and not value.strip():
        return True
    return False


def cell_text(value: Any) -> str:
    """Coerce a raw cell value to the text written into the card.

    - None / NaN / False / 0 / whitespace -> ""
    - integral floats lose their ".0" (Excel stores numbers as floats)
    - dates and times use ISO format
    """
    if _is_empty_cell(value):
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    try:
        return str(value).strip()
    except Exception:  # pragma: no cover - exotic cell objects
        return ""


def is_blank_row(row: Sequence[Any] | None) -> bool:
    return not row or all(_is_empty_cell(cell) for cell in row)


def _cell(row: Sequence[Any], index: int | None) -> str:
    if index is None or index < 0 or index >= len(row):
        return ""
    return cell_text(row[index])


def data_rows(sheet: Sheet, header_row_index: int) -> Sequence[Sequence[Any]]:
    """Rows strictly after the header row; empty when the index is out of range."""
    if header_row_index < 0 or header_row_index >= len(sheet.rows):
        return []
    return sheet.rows[header_row_index + 1:]


def extract_row(
    row: Sequence[Any] | None,
    mapping: Mapping[FieldSlot, int],
    category_label: str | None = None,
) -> ContactRecord | None:
    """Build the record for one data row, or None if the row is not admitted."""
    if row is None:
        return None
    try:
        cells = list(row)
    except TypeError:
        return None
    if is_blank_row(cells):
        return None

    if FieldSlot.FULL_NAME in mapping:
        full_name = _cell(cells, mapping[FieldSlot.FULL_NAME])
    else:
        first = _cell(cells, mapping.get(FieldSlot.FIRST_NAME))
        last = _cell(cells, mapping.get(FieldSlot.LAST_NAME))
        full_name = f"{first} {last}".strip()

    phones: list[PhoneEntry] = []
    for slot, label in PHONE_SLOTS:
        value = _cell(cells, mapping.get(slot))
        if value:
            phones.append(PhoneEntry(label=label, value=value))

    record = ContactRecord(
        full_name=full_name,
        phones=tuple(phones),
        email=_cell(cells, mapping.get(FieldSlot.EMAIL)),
        organization=_cell(cells, mapping.get(FieldSlot.ORGANIZATION)),
        title=_cell(cells, mapping.get(FieldSlot.TITLE)),
        address=_cell(cells, mapping.get(FieldSlot.ADDRESS)),
        category=category_label,
    )
    return record if record.is_admissible else None


def extract(
    sheet: Sheet,
    header_row_index: int,
    mapping: Mapping[FieldSlot, int],
    category_label: str | None = None,
) -> list[ContactRecord]:
    """Extract admitted contact records from a sheet, preserving row order.

    Parameters:
        sheet: Source sheet
        header_row_index: 0-based header row; only later rows are data rows
        mapping: Slot -> column index bindings
        category_label: Category written on every record (sheet tagging), or None
    """
    records: list[ContactRecord] = []
    for row in data_rows(sheet, header_row_index):
        record = extract_row(row, mapping, category_label)
        if record is not None:
            records.append(record)
    return records
