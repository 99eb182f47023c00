from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""RowData model for the Excel month splitter.

RowData represents a single row of the source sheet after header processing.
Values are keyed by header column name; empty cells are stored as None.
"""

__all__ = [
    "RowData",
]


@dataclass(frozen=True)
class RowData:
    """Logical representation of a single row after sheet normalization.

    The row_number refers to the original sheet row (header = row 1, so the
    first data row is row 2).
    """
    row_number: int  # 1-based sheet row
    values: dict[str, Any]  # Column name -> cell value (None for empty)

    def get(self, column: str) -> Any:
        return self.values.get(column)
