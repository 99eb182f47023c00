from __future__ import annotations

from dataclasses import dataclass, field

from .row_data import RowData

"""GroupBucket model: the rows sharing one YYYY-MM key.

A bucket is created on the first matching row, appended to in input order,
and handed to the encoder once every input row has been seen.
"""

__all__ = [
    "GroupBucket",
    "GroupingResult",
]


@dataclass
class GroupBucket:
    key: str  # YYYY-MM
    rows: list[RowData] = field(default_factory=list)

    def append(self, row: RowData) -> None:
        self.rows.append(row)

    def __len__(self) -> int:
        return len(self.rows)


@dataclass(frozen=True)
class GroupingResult:
    """Output of the grouping stage.

    buckets keeps first-occurrence order of keys (dict insertion order).
    skipped_rows counts rows excluded for a missing/invalid date; they are
    never written anywhere.
    """
    buckets: dict[str, GroupBucket]
    skipped_rows: int = 0

    @property
    def grouped_rows(self) -> int:
        return sum(len(b) for b in self.buckets.values())
