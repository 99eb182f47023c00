from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass
from pathlib import Path

from src.models.split_stage import SplitError, SplitStage

"""Encoded payload codec (data URI with base64 body).

Both directions of the split operation use the same wire form:
    data:<mime-type>;base64,<base64-body>

Input payloads carry the uploaded spreadsheet; the output payload carries the
zip archive.
"""

__all__ = [
    "DecodeError",
    "EncodedPayload",
    "decode_payload",
    "encode_payload",
    "guess_mime_type",
]

logger = logging.getLogger("excel_month_splitter.codec")

DATA_PREFIX = "data:"
BASE64_MARKER = ";base64,"

XLSX_MIME_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
XLS_MIME_TYPE = "application/vnd.ms-excel"
ZIP_MIME_TYPE = "application/zip"
EXCEL_MIME_TYPES = frozenset({XLSX_MIME_TYPE, XLS_MIME_TYPE})

_SUFFIX_MIME = {
    ".xlsx": XLSX_MIME_TYPE,
    ".xls": XLS_MIME_TYPE,
}


class DecodeError(SplitError):
    """Raised when a payload lacks the base64 marker or is malformed."""

    default_stage = SplitStage.DECODING


@dataclass(frozen=True)
class EncodedPayload:
    mime_type: str
    data: bytes


def decode_payload(text: str) -> EncodedPayload:
    """Decode a ``data:<mime>;base64,<body>`` string into raw bytes.

    Parameters between the mime type and the marker (``;name=x.xlsx``) are
    ignored. Whitespace inside the body (line-wrapped base64) is tolerated.

    Raises:
        DecodeError: missing ``data:`` prefix / ``;base64,`` marker, empty
            body, or invalid base64
    """
    if not isinstance(text, str) or not text.startswith(DATA_PREFIX):
        raise DecodeError("invalid data URI: missing 'data:' prefix")
    header, sep, body = text.partition(BASE64_MARKER)
    if not sep:
        raise DecodeError("invalid data URI: missing ';base64,' marker")
    mime_type = header[len(DATA_PREFIX):].split(";", 1)[0].strip().lower()
    body = "".join(body.split())
    if not body:
        raise DecodeError("invalid data URI: empty body")
    try:
        data = base64.b64decode(body, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"invalid base64 body: {e}") from e
    if mime_type not in EXCEL_MIME_TYPES:
        logger.warning(f"payload mime type '{mime_type or '(none)'}' is not an Excel type")
    logger.debug(f"decoded payload mime={mime_type} bytes={len(data)}")
    return EncodedPayload(mime_type=mime_type, data=data)


def encode_payload(data: bytes, mime_type: str) -> str:
    """Wrap raw bytes as ``data:<mime>;base64,<body>``."""
    body = base64.b64encode(data).decode("ascii")
    return f"{DATA_PREFIX}{mime_type}{BASE64_MARKER}{body}"


def guess_mime_type(path: Path) -> str:
    # 未知の拡張子は xlsx 扱い (中身の判定は reader 側)
    return _SUFFIX_MIME.get(path.suffix.lower(), XLSX_MIME_TYPE)
