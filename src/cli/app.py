from __future__ import annotations

import argparse
import sys
from collections import Counter
from pathlib import Path

from dotenv import load_dotenv

from src.codec.payload import decode_payload, encode_payload, guess_mime_type
from src.config.loader import ConfigError, load_config
from src.excel.reader import parse_workbook
from src.logging.error_log import ErrorRecord, append_error
from src.logging.init import log_summary, setup_logging
from src.models.split_stage import SplitError
from src.services.grouping import month_key
from src.services.progress import StageProgress
from src.services.splitter import split_excel
from src.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env, then config/splitter.yml (or --config)
- Read INPUT, wrap it as an encoded payload, run split_excel
- Write the archive to --output or <output_directory>/<stem>-split.zip
- Print the SUMMARY line; failures go to logs/errors-*.log as JSON Lines
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1

INSPECT_SAMPLE_ROWS = 3


def _load_env_file(path: Path, override: bool = False) -> None:
    """Load .env using python-dotenv.

    override=False: 既にプロセスにある環境変数を優先 (CLI 引数 > 環境変数 > .env > YAML)。
    """
    if path.exists():
        load_dotenv(dotenv_path=path, override=override)


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        description="Split an Excel sheet into one workbook per year-month, zipped"
    )
    p.add_argument("input", help="Input .xlsx / .xls file")
    p.add_argument("--date-column", dest="date_column", help="Header name of the date column")
    p.add_argument("--output", help="Output .zip path (default: <output_directory>/<stem>-split.zip)")
    p.add_argument("--config", help="Config YAML (default: config/splitter.yml if present)")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    p.add_argument(
        "--inspect-data", action="store_true",
        help="Print header, first rows and per-month row counts then exit",
    )
    return p.parse_args(argv)


def _inspect_data(path: Path, date_column: str | None) -> int:
    try:
        sheet = parse_workbook(path.read_bytes())
    except SplitError as e:
        print(f"inspect: {e.kind}: {e.message}")
        return EXIT_FATAL
    print(f"FILE: {path.name}")
    print(f"  SHEET: {sheet.sheet_name} cols={sheet.columns} rows={len(sheet.rows)}")
    # datetime 含む場合 JSON 化できないため isoformat で表示
    safe_rows = []
    for r in sheet.rows[:INSPECT_SAMPLE_ROWS]:
        safe_rows.append(
            {k: (v.isoformat() if hasattr(v, "isoformat") else v) for k, v in r.values.items()}
        )
    print("    sample_rows=", safe_rows)
    if date_column:
        counts = Counter(month_key(r.get(date_column)) for r in sheet.rows)
        skipped = counts.pop(None, 0)
        for key, n in counts.items():
            print(f"    month={key} rows={n}")
        print(f"    skipped_rows={skipped}")
    return EXIT_SUCCESS


def _default_output(input_path: Path, output_directory: str) -> Path:
    return Path(output_directory) / f"{input_path.stem}-split.zip"


def main(argv: list[str] | None = None) -> int:
    # NOTE: None のときのみ sys.argv を読む (テストで main([...]) を呼ぶため)
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    logger = setup_logging(debug=args.debug)
    if args.debug:
        logger.debug("debug mode enabled")

    _load_env_file(Path(".env"))
    try:
        cfg = load_config(Path(args.config) if args.config else None)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    input_path = Path(args.input)
    if not input_path.is_file():
        logger.error(f"input not found: {input_path}")
        return EXIT_FATAL

    date_column = args.date_column or cfg.date_column
    if args.inspect_data:
        return _inspect_data(input_path, date_column)
    if not date_column:
        logger.error("date column not set (use --date-column, SPLITTER_DATE_COLUMN or config date_column)")
        return EXIT_FATAL

    logger.info(f"Splitting {input_path.name} by '{date_column}'")
    payload = encode_payload(input_path.read_bytes(), guess_mime_type(input_path))

    try:
        with StageProgress(description=input_path.name) as progress:
            result = split_excel(payload, date_column, config=cfg, progress=progress)
    except SplitError as e:
        logger.error(f"{e.stage.value}: {e.kind}: {e.message}")
        log_path = append_error(
            ErrorRecord.create(input_path.name, e.stage.value, e.error_type, e.message)
        )
        logger.info(f"error log: {log_path}")
        return EXIT_FATAL

    out_path = Path(args.output) if args.output else _default_output(input_path, cfg.output_directory)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_bytes(decode_payload(result.archive_payload).data)

    for stat in result.buckets or []:
        logger.info(f"{stat.filename} rows={stat.rows}")
    logger.info(f"archive written: {out_path}")

    # log_summary が "SUMMARY " を付与するので先頭を除去
    summary_content = render_summary_line(result)[len("SUMMARY "):]
    log_summary(summary_content)
    return EXIT_SUCCESS
