from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any

import pandas as pd

from src.models.row_data import RowData
from src.models.split_stage import SplitError, SplitStage

"""Excel reader: raw bytes -> first sheet -> ordered row records.

- 1行目をヘッダ行として扱い、2行目以降をデータ行とする。
- 先頭シートのみ読む (2枚目以降は無視)。
- 日付セルは datetime のまま保持する (grouping が構造的に判定するため)。
"""

__all__ = [
    "ParseError",
    "SheetData",
    "read_first_sheet",
    "normalize_sheet",
    "parse_workbook",
]

logger = logging.getLogger("excel_month_splitter.reader")


class ParseError(SplitError):
    """Raised when bytes are not a readable spreadsheet or hold no sheet."""

    default_stage = SplitStage.PARSING


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]
    rows: list[RowData]


def read_first_sheet(content: bytes) -> tuple[str, pd.DataFrame]:
    """Read the first sheet of a workbook held in memory.

    The container format (.xlsx via openpyxl, legacy .xls via xlrd) is
    detected by pandas from the bytes. No NA string conversion is applied,
    so cells such as 'NA' or 'null' keep their text; empty cells arrive as
    empty strings.

    Raises:
        ParseError: not a recognizable workbook, or no sheet present
    """
    if not content:
        raise ParseError("empty input: not a spreadsheet")
    try:
        with pd.ExcelFile(io.BytesIO(content)) as xls:
            if not xls.sheet_names:
                raise ParseError("workbook contains no sheet")
            name = str(xls.sheet_names[0])
            df = xls.parse(xls.sheet_names[0], header=None, keep_default_na=False)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"unreadable spreadsheet: {e}") from e
    logger.debug(f"read sheet '{name}' shape={df.shape}")
    return name, df


def _is_empty(val: Any) -> bool:
    if val is None:
        return True
    if isinstance(val, str):
        return val == ""
    try:
        return bool(pd.isna(val))
    except (TypeError, ValueError):
        return False


def _header_names(raw: list[Any]) -> list[str]:
    columns: list[str] = []
    seen: dict[str, int] = {}
    for idx, cell in enumerate(raw):
        name = f"Unnamed: {idx}" if _is_empty(cell) else str(cell).strip()
        if name in seen:
            base, n = name, seen[name]
            # 既存の列名 (例: 元から "a_1" がある) と衝突しない番号まで進める
            while name in seen:
                n += 1
                name = f"{base}_{n}"
            seen[base] = n
        seen.setdefault(name, 0)
        columns.append(name)
    return columns


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SheetData:
    """Normalize a raw DataFrame using the first non-empty row as header.

    Steps:
    1. Skip leading fully empty rows
    2. Take the next row as header (blank -> 'Unnamed: <i>', duplicates -> '<name>_<n>')
    3. Remaining rows become RowData; fully empty rows are skipped
    4. Empty cells become None; every row carries every header column
    """
    records = [list(r) for r in df.itertuples(index=False, name=None)]
    start = 0
    while start < len(records) and all(_is_empty(v) for v in records[start]):
        start += 1
    if start >= len(records):
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])

    columns = _header_names(records[start])
    rows: list[RowData] = []
    for offset, raw in enumerate(records[start + 1:], start=start + 2):
        if all(_is_empty(v) for v in raw):
            continue
        values: dict[str, Any] = {}
        for i, col in enumerate(columns):
            val = raw[i] if i < len(raw) else None
            values[col] = None if _is_empty(val) else val
        rows.append(RowData(row_number=offset, values=values))
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)


def parse_workbook(content: bytes) -> SheetData:
    """Bytes -> SheetData of the first sheet."""
    name, df = read_first_sheet(content)
    sheet = normalize_sheet(df, name)
    logger.debug(f"sheet '{name}' columns={sheet.columns} rows={len(sheet.rows)}")
    return sheet
