from __future__ import annotations

import base64
import io
import zipfile
from datetime import datetime

import pandas as pd
import pytest

from src.codec.payload import decode_payload
from src.excel.reader import parse_workbook
from src.services.splitter import DecodeError, ParseError, split_excel

"""End-to-end scenarios: payload in -> zip payload out."""

XLSX_MIME = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _payload(sheets: dict[str, list[list[object]]]) -> str:
    buf = io.BytesIO()
    with pd.ExcelWriter(buf, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=name, header=False, index=False)
    return f"data:{XLSX_MIME};base64,{base64.b64encode(buf.getvalue()).decode()}"


def _open_entries(archive_payload: str) -> dict[str, list[dict]]:
    zf = zipfile.ZipFile(io.BytesIO(decode_payload(archive_payload).data))
    return {
        name: [r.values for r in parse_workbook(zf.read(name)).rows]
        for name in zf.namelist()
    }


def test_three_rows_two_months(three_row_payload: str):
    result = split_excel(three_row_payload, "dateColumn")
    assert result.file_count == 2
    entries = _open_entries(result.archive_payload)
    assert {name: len(rows) for name, rows in entries.items()} == {
        "correciones_SKU_2024-01-01.xlsx": 2,
        "correciones_SKU_2024-02-01.xlsx": 1,
    }
    jan = entries["correciones_SKU_2024-01-01.xlsx"]
    assert [r["SKU"] for r in jan] == ["A-1", "A-2"]
    assert jan[0]["dateColumn"] == datetime(2024, 1, 15)


def test_only_row_with_empty_date_gives_empty_archive():
    payload = _payload({"Sheet1": [["SKU", "dateColumn"], ["A-1", ""]]})
    result = split_excel(payload, "dateColumn")
    assert result.file_count == 0
    assert result.skipped_rows == 1
    assert _open_entries(result.archive_payload) == {}


def test_mixed_valid_and_invalid_dates_counts():
    rows = [["id", "Fecha"]]
    dates = [
        datetime(2023, 12, 31), "no date", datetime(2024, 1, 1), None,
        datetime(2023, 12, 1), "2024-01-05", datetime(2024, 3, 10), 45000,
    ]
    for i, d in enumerate(dates):
        rows.append([i, d])
    result = split_excel(_payload({"Sheet1": rows}), "Fecha")
    entries = _open_entries(result.archive_payload)

    n_valid = sum(isinstance(d, datetime) for d in dates)
    distinct = {(d.year, d.month) for d in dates if isinstance(d, datetime)}
    assert result.file_count == len(distinct) == len(entries)
    assert sum(len(v) for v in entries.values()) == n_valid
    assert result.skipped_rows == len(dates) - n_valid
    # first-occurrence order of keys
    assert list(entries) == [
        "correciones_SKU_2023-12-01.xlsx",
        "correciones_SKU_2024-01-01.xlsx",
        "correciones_SKU_2024-03-01.xlsx",
    ]
    # stable order inside a bucket
    assert [r["id"] for r in entries["correciones_SKU_2023-12-01.xlsx"]] == [0, 4]


def test_only_first_sheet_is_split():
    payload = _payload(
        {
            "Primera": [["Fecha"], [datetime(2024, 5, 1)]],
            "Segunda": [["Fecha"], [datetime(2024, 6, 1)], [datetime(2024, 7, 1)]],
        }
    )
    result = split_excel(payload, "Fecha")
    assert result.file_count == 1
    assert list(_open_entries(result.archive_payload)) == ["correciones_SKU_2024-05-01.xlsx"]


def test_round_trip_preserves_all_columns():
    rows = [
        ["SKU", "Fecha", "Cantidad", "Precio", "Nota"],
        ["A", datetime(2024, 1, 2), 10, 1.25, "ok"],
        ["B", datetime(2024, 1, 3), 20, 2.5, None],
    ]
    result = split_excel(_payload({"Sheet1": rows}), "Fecha")
    (only,) = _open_entries(result.archive_payload).values()
    assert only == [
        {"SKU": "A", "Fecha": datetime(2024, 1, 2), "Cantidad": 10, "Precio": 1.25, "Nota": "ok"},
        {"SKU": "B", "Fecha": datetime(2024, 1, 3), "Cantidad": 20, "Precio": 2.5, "Nota": None},
    ]


def test_malformed_payload_gives_decode_error():
    with pytest.raises(DecodeError):
        split_excel(f"data:{XLSX_MIME},AAAA", "dateColumn")


def test_non_spreadsheet_gives_parse_error():
    payload = f"data:{XLSX_MIME};base64,{base64.b64encode(b'%PDF-1.4 nope').decode()}"
    with pytest.raises(ParseError):
        split_excel(payload, "dateColumn")
