# Shared pytest fixtures
from __future__ import annotations
import base64
import io
import tempfile
from datetime import datetime
from pathlib import Path

import pandas as pd
import pytest

from src.logging.init import reset_logging

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _make_xlsx(rows: list[list[object]]) -> bytes:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
    return buf.getvalue()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        # .env / 環境変数の影響を排除
        monkeypatch.delenv("SPLITTER_DATE_COLUMN", raising=False)
        monkeypatch.delenv("SPLITTER_FILENAME_PREFIX", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def three_row_sheet() -> list[list[object]]:
    return [
        ["SKU", "dateColumn", "qty"],
        ["A-1", datetime(2024, 1, 15), 3],
        ["A-2", datetime(2024, 1, 20), 5],
        ["B-1", datetime(2024, 2, 1), 7],
    ]


@pytest.fixture()
def three_row_payload(three_row_sheet) -> str:
    body = base64.b64encode(_make_xlsx(three_row_sheet)).decode("ascii")
    return f"data:{XLSX_MIME};base64,{body}"


@pytest.fixture()
def sample_config_yaml() -> str:
    return """date_column: dateColumn
filename_prefix: correciones_SKU
output_sheet_name: Sheet1
output_directory: ./out
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "splitter.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def input_workbook(temp_workdir: Path, three_row_sheet) -> Path:
    f = temp_workdir / "data" / "ventas.xlsx"
    f.write_bytes(_make_xlsx(three_row_sheet))
    return f
