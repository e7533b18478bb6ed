from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from .field_slot import FieldSlot

"""Config dataclasses for the Excel -> vCard converter.

ConvertConfig mirrors the YAML file validated by src/config/loader.py.
SheetConfig is the per-sheet processing configuration handed to the
orchestrator (one per workbook sheet).
"""

# Override target: column index, header label, or None (= explicitly unmapped)
MappingTarget = int | str | None


@dataclass(frozen=True)
class SheetConfig:
    """Processing configuration for a single sheet.

    Defaults reproduce the converter's initial state: every sheet included,
    header on the first row, auto-detected mapping, sheet name used as category.
    """
    include: bool = True
    header_row_index: int = 0  # 0-based
    mapping_override: Mapping[FieldSlot, MappingTarget] | None = None
    tag_with_sheet_name: bool = True


@dataclass(frozen=True)
class ConvertConfig:
    """Root configuration object for a conversion run."""
    source_file: str | None = None  # Workbook path (CLI argument takes precedence)
    output_directory: str = "."
    tag_with_sheet_name: bool = True
    escape_values: bool = False  # vCard text escaping (off keeps legacy byte-identical output)
    sheets: dict[str, dict[str, Any]] = field(default_factory=dict)  # Sheet name -> raw sheet section
