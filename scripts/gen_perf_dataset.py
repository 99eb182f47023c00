#!/usr/bin/env python3
"""Dataset generation script for splitter performance testing.

Generates a synthetic Excel file whose rows spread over several months, for
manual runs of `python -m src.cli` and for sizing experiments.
The generated file follows the layout the splitter expects:
- Row 1: Header row with column names
- Row 2+: Data rows, the date column holding real date cells
A share of rows gets a blank date cell so the skip path is exercised too.
"""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd


def generate_dated_data(
    rows: int,
    months: int,
    *,
    date_column: str = "Fecha",
    start: str = "2024-01-01",
    blank_ratio: float = 0.02,
    seed: int = 42,
) -> pd.DataFrame:
    """Generate a DataFrame of SKU corrections spread across `months` months.

    Args:
        rows: Number of data rows to generate
        months: Number of distinct year-months in the date column
        date_column: Name of the date column
        start: First day of the first month
        blank_ratio: Share of rows whose date cell is left blank
        seed: Random seed for reproducible data

    Returns:
        DataFrame with mixed synthetic data (dates as Timestamps / None)
    """
    rng = np.random.default_rng(seed)

    month_starts = pd.date_range(start, periods=months, freq="MS")
    picked = month_starts[rng.integers(0, months, rows)]
    days = pd.to_timedelta(rng.integers(0, 28, rows), unit="D")
    dates: list[Any] = list(picked + days)
    for idx in np.flatnonzero(rng.random(rows) < blank_ratio):
        dates[idx] = None

    categories = ["Electronics", "Clothing", "Books", "Food", "Sports", "Home"]
    data: dict[str, list[Any]] = {
        "SKU": [f"SKU-{rng.integers(10000, 99999)}" for _ in range(rows)],
        "Descripcion": rng.choice(categories, rows).tolist(),
        "Cantidad": rng.integers(1, 1000, rows).tolist(),
        "Precio": np.round(rng.uniform(0.01, 9999.99, rows), 2).tolist(),
        date_column: dates,
    }
    return pd.DataFrame(data)


def create_excel_file(output_path: Path, df: pd.DataFrame, sheet_name: str = "Sheet1") -> None:
    """Write the DataFrame with a header row and no index."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with pd.ExcelWriter(output_path, engine="openpyxl") as writer:
        df.to_excel(writer, sheet_name=sheet_name, index=False)

    print(f"Created Excel file: {output_path}")
    print(f"  Rows: {len(df)} (+ 1 header row)")
    print(f"  Columns: {len(df.columns)}")


def main() -> int:
    """Main CLI interface for dataset generation."""
    parser = argparse.ArgumentParser(
        description="Generate synthetic dated Excel datasets for the month splitter",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate default 50k rows over 12 months
  %(prog)s output.xlsx

  # 2 years, no blank dates
  %(prog)s big.xlsx --rows 200000 --months 24 --blank-ratio 0
        """
    )
    parser.add_argument("output", type=Path, help="Output Excel file path")
    parser.add_argument("--rows", type=int, default=50_000, help="Number of data rows (default: 50,000)")
    parser.add_argument("--months", type=int, default=12, help="Distinct months (default: 12)")
    parser.add_argument("--date-column", default="Fecha", help="Date column name (default: Fecha)")
    parser.add_argument("--start", default="2024-01-01", help="First month (default: 2024-01-01)")
    parser.add_argument("--blank-ratio", type=float, default=0.02, help="Share of blank dates (default: 0.02)")
    parser.add_argument("--seed", type=int, default=42, help="Random seed (default: 42)")
    args = parser.parse_args()

    if args.rows <= 0:
        print("Error: --rows must be positive", file=sys.stderr)
        return 1
    if args.months <= 0:
        print("Error: --months must be positive", file=sys.stderr)
        return 1
    if not 0 <= args.blank_ratio < 1:
        print("Error: --blank-ratio must be in [0, 1)", file=sys.stderr)
        return 1

    try:
        df = generate_dated_data(
            args.rows,
            args.months,
            date_column=args.date_column,
            start=args.start,
            blank_ratio=args.blank_ratio,
            seed=args.seed,
        )
        create_excel_file(args.output, df)
        return 0
    except Exception as e:
        print(f"\nError generating dataset: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
