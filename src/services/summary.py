from __future__ import annotations

from ..models.split_result import SplitResult

"""Summary line rendering service for the Excel month splitter.

Format (contract, see tests/contract/test_summary_output_contract.py):
SUMMARY files={n} rows={grouped} skipped_rows={skipped} input_rows={total} elapsed_sec={s}
"""


def _format_seconds(value: float) -> str:
    if value == 0:
        return "0"
    if value == int(value):
        return str(int(value))
    if value < 0.01:
        # Format very small numbers to avoid scientific notation
        return f"{value:.6f}".rstrip('0').rstrip('.')
    return f"{value:.3f}".rstrip('0').rstrip('.')


def render_summary_line(result: SplitResult) -> str:
    """Render a SUMMARY line from SplitResult.

    Examples:
        >>> from datetime import datetime, timezone
        >>> t = datetime(2024, 1, 1, tzinfo=timezone.utc)
        >>> result = SplitResult(
        ...     archive_payload="data:application/zip;base64,", file_count=2,
        ...     total_rows=4, grouped_rows=3, skipped_rows=1,
        ...     start_time=t, end_time=t, elapsed_seconds=2.0,
        ... )
        >>> render_summary_line(result)
        'SUMMARY files=2 rows=3 skipped_rows=1 input_rows=4 elapsed_sec=2'
    """
    return (
        f"SUMMARY files={result.file_count} "
        f"rows={result.grouped_rows} "
        f"skipped_rows={result.skipped_rows} "
        f"input_rows={result.total_rows} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
