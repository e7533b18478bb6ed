from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .contact_record import ContactRecord
from .field_slot import ColumnMapping

"""Conversion result models.

SheetStat captures per-sheet extraction counts; ConversionResult aggregates the
serialized text handed to the delivery step together with run metrics used for
the SUMMARY line.
"""


@dataclass(frozen=True)
class SheetStat:
    """Per-sheet extraction statistics."""
    sheet_name: str
    header_row_index: int
    data_rows: int  # Rows strictly after the header row
    contacts: int  # Admitted records
    mapping: ColumnMapping

    @property
    def skipped_rows(self) -> int:
        return self.data_rows - self.contacts


@dataclass(frozen=True)
class ConversionResult:
    """Serialized vCard text plus metrics for one conversion run."""
    text: str
    file_name: str  # Suggested delivery file name (contacts_YYYY-MM-DD.vcf)
    records: tuple[ContactRecord, ...]
    total_sheets: int  # Sheets present in the workbook
    skipped_sheets: int  # Sheets not included in the conversion
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    sheet_stats: list[SheetStat] = field(default_factory=list)

    @property
    def total_contacts(self) -> int:
        return len(self.records)

    @property
    def converted_sheets(self) -> int:
        return len(self.sheet_stats)

    @property
    def skipped_rows(self) -> int:
        return sum(s.skipped_rows for s in self.sheet_stats)
