from __future__ import annotations

import io
import logging
import zipfile
from collections.abc import Iterable
from dataclasses import dataclass

from src.codec.payload import ZIP_MIME_TYPE, encode_payload
from src.models.config_models import DEFAULT_FILENAME_PREFIX
from src.models.split_stage import SplitError, SplitStage

"""Archive builder: (YYYY-MM, xlsx bytes) pairs -> zip -> encoded payload.

Entry name pattern: <prefix>_<YYYY-MM>-01.xlsx
Entries use a fixed timestamp so identical inputs give identical archives.
"""

__all__ = [
    "ArchiveError",
    "ArchiveResult",
    "entry_filename",
    "build_archive",
]

logger = logging.getLogger("excel_month_splitter.archive")

ZIP_EPOCH = (1980, 1, 1, 0, 0, 0)


class ArchiveError(SplitError):
    """Raised when the archive cannot be built or compressed."""

    default_stage = SplitStage.ARCHIVING


@dataclass(frozen=True)
class ArchiveResult:
    payload: str  # data:application/zip;base64,...
    file_count: int
    entries: list[str]  # entry names in write order
    size_bytes: int


def entry_filename(key: str, prefix: str = DEFAULT_FILENAME_PREFIX) -> str:
    """Archive entry name for a group key ('2024-01' -> '<prefix>_2024-01-01.xlsx')."""
    return f"{prefix}_{key}-01.xlsx"


def build_archive(
    encoded: Iterable[tuple[str, bytes]], prefix: str = DEFAULT_FILENAME_PREFIX
) -> ArchiveResult:
    """Pack encoded buckets into one deflate zip and wrap it as a payload.

    Raises:
        ArchiveError: duplicate entry name or zip failure
    """
    names: list[str] = []
    buf = io.BytesIO()
    try:
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for key, content in encoded:
                name = entry_filename(key, prefix)
                if name in names:
                    raise ArchiveError(f"duplicate archive entry: {name}")
                info = zipfile.ZipInfo(name, date_time=ZIP_EPOCH)
                info.compress_type = zipfile.ZIP_DEFLATED
                zf.writestr(info, content)
                names.append(name)
    except ArchiveError:
        raise
    except Exception as e:
        raise ArchiveError(f"failed to build zip archive: {e}") from e
    data = buf.getvalue()
    logger.debug(f"archive entries={len(names)} bytes={len(data)}")
    return ArchiveResult(
        payload=encode_payload(data, ZIP_MIME_TYPE),
        file_count=len(names),
        entries=names,
        size_bytes=len(data),
    )
