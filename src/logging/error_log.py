from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from src.models.error_record import ErrorRecord

"""Error log for failed split runs.

One JSON line per failed invocation, appended to
`logs/errors-YYYYMMDD-HHMMSS.log` (UTC, stamped at write time). The record
keys are fixed by specs/contracts/error_log_schema.json.
"""

__all__ = [
    "ErrorRecord",
    "error_log_path",
    "append_error",
]

LOGS_DIR = Path("./logs")
TIMESTAMP_FMT = "%Y%m%d-%H%M%S"


def error_log_path(logs_dir: Path | None = None, now: datetime | None = None) -> Path:
    stamp = (now or datetime.now(UTC)).strftime(TIMESTAMP_FMT)
    return (logs_dir or LOGS_DIR) / f"errors-{stamp}.log"


def append_error(record: ErrorRecord, logs_dir: Path | None = None) -> Path:
    """Append one record as a JSON line; creates the logs directory on demand."""
    path = error_log_path(logs_dir)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("a", encoding="utf-8") as f:
        f.write(record.to_json_line() + "\n")
    return path
