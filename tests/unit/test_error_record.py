from __future__ import annotations

import json
import re
from pathlib import Path

from src.logging.error_log import append_error, error_log_path
from src.models.error_record import ErrorRecord
from src.codec.payload import DecodeError
from src.excel.reader import ParseError


def test_create_sets_utc_timestamp():
    record = ErrorRecord.create("ventas.xlsx", "parsing", "PARSE_ERROR", "bad file")
    assert re.match(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}(\.\d+)?Z$", record.timestamp)


def test_to_json_line_has_exact_keys():
    record = ErrorRecord.create("ventas.xlsx", "decoding", "DECODE_ERROR", "sin marcador ñ")
    data = json.loads(record.to_json_line())
    assert set(data) == {"timestamp", "file", "stage", "error_type", "message"}
    assert "ñ" in record.to_json_line()


def test_error_type_from_kind():
    assert DecodeError("x").error_type == "DECODE_ERROR"
    assert ParseError("x").error_type == "PARSE_ERROR"


def test_error_log_path_uses_utc_stamp(tmp_path: Path):
    from datetime import datetime, timezone
    path = error_log_path(tmp_path, datetime(2024, 2, 3, 4, 5, 6, tzinfo=timezone.utc))
    assert path == tmp_path / "errors-20240203-040506.log"


def test_append_error_writes_json_lines(tmp_path: Path):
    logs = tmp_path / "logs"
    first = append_error(ErrorRecord.create("a.xlsx", "parsing", "PARSE_ERROR", "m1"), logs)
    assert re.match(r"^errors-\d{8}-\d{6}\.log$", first.name)
    second = append_error(ErrorRecord.create("b.xlsx", "decoding", "DECODE_ERROR", "m2"), logs)
    lines = [l for p in sorted({first, second}) for l in p.read_text(encoding="utf-8").splitlines()]
    assert [json.loads(l)["file"] for l in lines] == ["a.xlsx", "b.xlsx"]
