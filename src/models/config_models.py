from __future__ import annotations

from dataclasses import dataclass

"""Config dataclasses for the Excel month splitter.

SplitterConfig is the resolved configuration (YAML < environment < CLI flags)
handed to the pipeline. The loader in src/config/loader.py builds it.
"""

DEFAULT_FILENAME_PREFIX = "correciones_SKU"
DEFAULT_SHEET_NAME = "Sheet1"


@dataclass(frozen=True)
class SplitterConfig:
    """Root configuration object for a split run."""
    date_column: str | None = None  # Column grouped by (required at run time)
    filename_prefix: str = DEFAULT_FILENAME_PREFIX  # <prefix>_<YYYY-MM>-01.xlsx
    output_sheet_name: str = DEFAULT_SHEET_NAME  # Sheet name in each output file
    output_directory: str = "."  # CLI only: where <stem>-split.zip is written
