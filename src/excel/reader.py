from __future__ import annotations

import zipfile
from collections.abc import Iterable
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.sheet import Sheet

"""Workbook reader.

Reads every sheet of an Excel workbook as a raw grid (no header inference):
the header row is chosen per sheet later on, so nothing is skipped here.
NaN / NaT / empty strings become None. Sheets keep workbook order.
"""

__all__ = [
    "EXCEL_ENGINES",
    "SUPPORTED_SUFFIXES",
    "WorkbookReadError",
    "read_excel_file",
    "dataframe_to_sheet",
    "read_workbook",
    "preview_header_rows",
]

# 拡張子ごとの pandas エンジン (.xls は xlrd が必要)
EXCEL_ENGINES = {".xlsx": "openpyxl", ".xls": "xlrd"}
SUPPORTED_SUFFIXES = tuple(EXCEL_ENGINES)
PREVIEW_ROWS = 10


class WorkbookReadError(Exception):
    """Raised when the workbook cannot be opened or parsed."""


def read_excel_file(
    path: Path, target_sheets: Iterable[str] | None = None
) -> dict[str, pd.DataFrame]:
    """Read an Excel file returning raw DataFrames keyed by sheet name.

    Parameters
    ----------
    path: Excel ファイルパス
    target_sheets: 対象シート制限 (None なら全シート)
    """
    engine = EXCEL_ENGINES.get(path.suffix.lower())
    if engine is None:
        raise WorkbookReadError(f"unsupported file type: {path.name}")
    wanted = set(target_sheets) if target_sheets is not None else None
    try:
        dfs: dict[str, pd.DataFrame] = {}
        with pd.ExcelFile(path, engine=engine) as xls:
            for name in xls.sheet_names:
                if wanted is not None and str(name) not in wanted:
                    continue
                # ヘッダなしで生読み。"NA" 等の文字列は値として残す
                dfs[str(name)] = xls.parse(name, header=None, keep_default_na=False, dtype=object)
    except (OSError, ValueError, KeyError, ImportError, zipfile.BadZipFile) as e:
        raise WorkbookReadError(f"failed to read {path.name}: {e}") from e
    return dfs


def _clean_cell(value: Any) -> Any:
    if value is None:
        return None
    if isinstance(value, str):
        return value if value.strip() else None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):  # pragma: no cover - array-like cell
        return value
    return value


def dataframe_to_sheet(df: pd.DataFrame, sheet_name: str) -> Sheet:
    """Convert a raw (header=None) DataFrame into a Sheet of plain rows."""
    rows = [tuple(_clean_cell(v) for v in raw) for raw in df.itertuples(index=False, name=None)]
    return Sheet(name=sheet_name, rows=rows)


def read_workbook(path: Path, target_sheets: Iterable[str] | None = None) -> list[Sheet]:
    """Read a workbook into Sheets, in workbook order."""
    return [dataframe_to_sheet(df, name) for name, df in read_excel_file(path, target_sheets).items()]


def preview_header_rows(sheet: Sheet, limit: int = PREVIEW_ROWS) -> list[str]:
    """Describe the first rows of a sheet as header-row candidates.

    Each entry reads ``Ligne <n>: <c1>, <c2>, <c3>...`` (1-based row number,
    first three cells).
    """
    previews = []
    for index, row in enumerate(sheet.rows[:limit]):
        cells = ", ".join("" if c is None else str(c) for c in list(row)[:3])
        previews.append(f"Ligne {index + 1}: {cells}...")
    return previews
