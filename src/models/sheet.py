from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

"""Sheet model: the 2-D grid of cell values produced by the workbook reader."""

__all__ = [
    "Sheet",
]


@dataclass(frozen=True)
class Sheet:
    """A named sheet holding rows of raw cell values (None, str or number)."""
    name: str
    rows: Sequence[Sequence[Any]]

    @property
    def total_rows(self) -> int:
        return len(self.rows)

    def row(self, index: int) -> Sequence[Any]:
        """Return row ``index`` or an empty row when out of range."""
        if 0 <= index < len(self.rows):
            return self.rows[index] or ()
        return ()
