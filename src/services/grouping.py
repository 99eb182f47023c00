from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date, datetime
from typing import Any

import pandas as pd

from ..models.group_bucket import GroupBucket, GroupingResult
from ..models.row_data import RowData

"""Grouping service: bucket rows by the year-month of a date column.

Rows whose date cell is missing or not a calendar date are excluded from
every bucket (silent skip; counted for the summary line only).
"""

logger = logging.getLogger("excel_month_splitter.grouping")


def month_key(value: Any) -> str | None:
    """Return 'YYYY-MM' for date/datetime values, None otherwise.

    Strings are not parsed: only cells the reader materialized as dates
    qualify. pandas NaT is treated as missing.

    >>> month_key(datetime(2024, 1, 15))
    '2024-01'
    >>> month_key("2024-01-15") is None
    True
    """
    if value is None or value is pd.NaT:
        return None
    if not isinstance(value, (datetime, date)):
        return None
    return f"{value.year:04d}-{value.month:02d}"


def group_rows(rows: Iterable[RowData], date_column: str) -> GroupingResult:
    """Group rows into insertion-ordered buckets keyed by 'YYYY-MM'.

    Row order inside each bucket follows input order; keys follow first
    occurrence in the input (not sorted).
    """
    buckets: dict[str, GroupBucket] = {}
    skipped = 0
    for row in rows:
        key = month_key(row.get(date_column))
        if key is None:
            skipped += 1
            logger.debug(f"row {row.row_number}: no usable date in '{date_column}', skipped")
            continue
        bucket = buckets.get(key)
        if bucket is None:
            bucket = GroupBucket(key=key)
            buckets[key] = bucket
        bucket.append(row)
    return GroupingResult(buckets=buckets, skipped_rows=skipped)
