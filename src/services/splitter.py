from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from ..archive.builder import ArchiveError, build_archive, entry_filename
from ..codec.payload import DecodeError, decode_payload
from ..excel.reader import ParseError, parse_workbook
from ..excel.writer import EncodeError, encode_rows
from ..models.config_models import SplitterConfig
from ..models.split_result import BucketStat, SplitResult
from ..models.split_stage import SplitError, SplitStage
from .grouping import group_rows
from .progress import StageProgress

"""Split pipeline: the single operation of the tool.

    payload --decode--> bytes --parse--> rows --group--> buckets
            --encode (xN)--> xlsx bytes --archive--> zip payload

No state is kept between calls; every buffer belongs to one invocation, so
concurrent calls are safe. Any failure aborts the whole run: there is no
partial archive and no retry.
"""

__all__ = [
    "split_excel",
    "SplitError",
    "DecodeError",
    "ParseError",
    "EncodeError",
    "ArchiveError",
]

logger = logging.getLogger("excel_month_splitter.splitter")


@contextmanager
def _stage(
    stage: SplitStage,
    error_cls: type[SplitError],
    progress: StageProgress | None,
    message: str | None = None,
) -> Iterator[None]:
    """Run one pipeline stage; wrap unexpected exceptions into error_cls."""
    logger.debug(f"stage={stage.value}")
    if progress is not None:
        progress.start_stage(stage, message)
    try:
        yield
    except SplitError as e:
        e.stage = stage
        raise
    except Exception as e:
        raise error_cls(f"{stage.value} failed: {e}", stage=stage) from e
    if progress is not None:
        progress.finish_stage()


def split_excel(
    file_payload: str,
    date_column: str,
    *,
    config: SplitterConfig | None = None,
    progress: StageProgress | None = None,
) -> SplitResult:
    """Split a spreadsheet payload into one .xlsx per year-month, zipped.

    Args:
        file_payload: ``data:<excel mime>;base64,<body>`` string
        date_column: Header name of the column to group by
        config: Output naming options (prefix / sheet name); defaults if None
        progress: Optional stage progress display

    Returns:
        SplitResult with the zip payload and the number of entries

    Raises:
        DecodeError / ParseError / EncodeError / ArchiveError: stage failure
    """
    cfg = config or SplitterConfig()
    start_time = datetime.now(UTC)

    try:
        with _stage(SplitStage.DECODING, DecodeError, progress):
            payload = decode_payload(file_payload)

        with _stage(SplitStage.PARSING, ParseError, progress):
            sheet = parse_workbook(payload.data)
        logger.info(
            f"sheet '{sheet.sheet_name}': {len(sheet.rows)} rows, {len(sheet.columns)} columns"
        )

        with _stage(SplitStage.GROUPING, ParseError, progress):
            if sheet.columns and date_column not in sheet.columns:
                logger.warning(f"date column '{date_column}' not found in header {sheet.columns}")
            grouping = group_rows(sheet.rows, date_column)
        if grouping.skipped_rows:
            logger.debug(f"{grouping.skipped_rows} rows without a usable date were skipped")

        encoded: list[tuple[str, bytes]] = []
        stats: list[BucketStat] = []
        message = f"Splitting into {len(grouping.buckets)} files..."
        with _stage(SplitStage.ENCODING, EncodeError, progress, message):
            for key, bucket in grouping.buckets.items():
                content = encode_rows(bucket.rows, sheet_name=cfg.output_sheet_name)
                encoded.append((key, content))
                stats.append(
                    BucketStat(
                        key=key,
                        filename=entry_filename(key, cfg.filename_prefix),
                        rows=len(bucket),
                        size_bytes=len(content),
                    )
                )

        with _stage(SplitStage.ARCHIVING, ArchiveError, progress):
            archive = build_archive(encoded, prefix=cfg.filename_prefix)
    except SplitError as e:
        logger.debug(f"split failed stage={e.stage.value} kind={e.kind}: {e.message}")
        raise

    end_time = datetime.now(UTC)
    if progress is not None:
        progress.set_postfix(files=archive.file_count)
    return SplitResult(
        archive_payload=archive.payload,
        file_count=archive.file_count,
        total_rows=len(sheet.rows),
        grouped_rows=grouping.grouped_rows,
        skipped_rows=grouping.skipped_rows,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        buckets=stats,
    )
