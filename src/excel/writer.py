from __future__ import annotations

import io
import logging
from collections.abc import Iterable, Sequence

import pandas as pd

from src.models.config_models import DEFAULT_SHEET_NAME
from src.models.row_data import RowData
from src.models.split_stage import SplitError, SplitStage

"""Excel writer: one bucket of rows -> single-sheet .xlsx bytes."""

__all__ = [
    "EncodeError",
    "bucket_columns",
    "encode_rows",
]

logger = logging.getLogger("excel_month_splitter.writer")


class EncodeError(SplitError):
    """Raised when a bucket's rows cannot be serialized."""

    default_stage = SplitStage.ENCODING


def bucket_columns(rows: Iterable[RowData]) -> list[str]:
    """Union of column names in first-seen order."""
    seen: dict[str, None] = {}
    for row in rows:
        for col in row.values:
            seen.setdefault(col, None)
    return list(seen)


def encode_rows(rows: Sequence[RowData], sheet_name: str = DEFAULT_SHEET_NAME) -> bytes:
    """Serialize rows to .xlsx bytes (header row + one row per record, no index).

    Raises:
        EncodeError: on any serialization failure
    """
    columns = bucket_columns(rows)
    buf = io.BytesIO()
    # close() は to_excel 失敗後に別の例外を出すため、書き込みと保存を分けて扱う
    try:
        df = pd.DataFrame([r.values for r in rows], columns=columns, dtype=object)
        writer = pd.ExcelWriter(buf, engine="openpyxl")
        df.to_excel(writer, sheet_name=sheet_name, index=False)
    except Exception as e:
        raise EncodeError(f"failed to write sheet '{sheet_name}': {e}") from e
    try:
        writer.close()
    except Exception as e:
        raise EncodeError(f"failed to save workbook: {e}") from e
    content = buf.getvalue()
    logger.debug(f"encoded rows={len(rows)} cols={len(columns)} bytes={len(content)}")
    return content
