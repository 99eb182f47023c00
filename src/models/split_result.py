from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Result models for one split invocation.

SplitResult is the success output of the pipeline; to_dict() produces the
external shape {archivePayload, fileCount}. BucketStat keeps per-file detail
for logging and the CLI.
"""


@dataclass(frozen=True)
class BucketStat:
    """Per-archive-entry statistics."""
    key: str  # YYYY-MM
    filename: str  # archive entry name
    rows: int  # data rows written
    size_bytes: int  # encoded .xlsx size


@dataclass(frozen=True)
class SplitResult:
    """Aggregated output of a successful split."""
    archive_payload: str  # data:application/zip;base64,...
    file_count: int  # archive entries written
    total_rows: int  # data rows read from the first sheet
    grouped_rows: int  # rows placed in some bucket
    skipped_rows: int  # rows without a usable date
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    buckets: list[BucketStat] | None = None

    def to_dict(self) -> dict[str, object]:
        return {"archivePayload": self.archive_payload, "fileCount": self.file_count}
