"""
Convert a Varlık İşlem Fişi export into a library catalog import workbook.

Usage:
    python scripts/convert_varlik.py data/varlik_fisi.xlsx
    python scripts/convert_varlik.py data/varlik_fisi.csv -o katalog.xlsx --policy positional
    python scripts/convert_varlik.py data/varlik_fisi.xlsx --skip-blank-rows
    python scripts/convert_varlik.py data/varlik_fisi.xlsx --preview 10
"""

import argparse
import os
import sys
from pathlib import Path

# Allow imports from the project root when running as a script
_root_dir = os.path.join(os.path.dirname(__file__), "..")
sys.path.insert(0, _root_dir)

from config import settings
from exceptions import AppError
from models.catalog import CATALOG_COLUMNS, TitlePolicy
from parsers.varlik_parser import read_varlik_file
from services.conversion_service import ConversionService
from services.export_service import ExportService


def print_preview(rows: list[dict[str, str]], limit: int):
    """Print the first converted rows."""
    print(f"\nPreview (first {min(limit, len(rows))} of {len(rows)}):")
    print("  " + " | ".join(CATALOG_COLUMNS))
    for row in rows[:limit]:
        print("  " + " | ".join(row[col] for col in CATALOG_COLUMNS))


def convert(
    input_path: Path,
    output_path: Path,
    policy: TitlePolicy,
    preview: int = 0,
    skip_blank_rows: bool = False,
) -> int:
    """Run one conversion. Returns the process exit code."""
    print(f"\n{'='*60}")
    print("VARLIK FISI -> CATALOG")
    print(f"{'='*60}")
    print(f"Input:  {input_path}")
    print(f"Policy: {policy.value}")

    try:
        dataset = read_varlik_file(input_path, skip_blank_rows=skip_blank_rows)
    except AppError as e:
        print(f"\n[ERROR] {e.message}")
        return 1

    print(f"Read {dataset.row_count} rows from sheet {dataset.sheet or '(csv)'}")
    if dataset.skipped_blank_rows:
        print(f"Skipped {dataset.skipped_blank_rows} blank rows")

    result = ConversionService(policy).transform(dataset.records)

    if not result.success:
        error = result.failure.to_error()
        print(f"\n[ERROR] {error.message}")
        return 1

    with_isbn = sum(1 for r in result.records if r.isbn)
    print(f"\nConverted {result.row_count} rows")
    print(f"  With ISBN:    {with_isbn}")
    print(f"  Without ISBN: {result.row_count - with_isbn}")

    if preview > 0:
        print_preview(result.to_rows(), preview)

    output = ExportService(settings.output_sheet_name).generate_catalog_excel(result.records)
    output_path.write_bytes(output.getvalue())
    print(f"\n[OK] Wrote {output_path}")

    return 0


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Convert a Varlık İşlem Fişi export (.xlsx/.csv) into a catalog import workbook."
    )
    parser.add_argument(
        "input",
        help="Path to the Varlık export (.xlsx or .csv)",
    )
    parser.add_argument(
        "-o", "--output",
        default="",
        help=f"Output .xlsx path (default: {settings.output_filename} next to the input)",
    )
    parser.add_argument(
        "--policy",
        choices=[p.value for p in TitlePolicy],
        default=settings.title_policy,
        help="ISBN/title splitting rule (default: TITLE_POLICY setting)",
    )
    parser.add_argument(
        "--preview",
        type=int,
        default=0,
        help="Print the first N converted rows",
    )
    parser.add_argument(
        "--skip-blank-rows",
        action="store_true",
        default=settings.skip_blank_rows,
        help="Drop fully blank rows instead of converting them to empty catalog rows",
    )
    args = parser.parse_args(argv)

    input_path = Path(args.input)
    output_path = Path(args.output) if args.output else input_path.with_name(settings.output_filename)

    sys.exit(convert(
        input_path,
        output_path,
        TitlePolicy(args.policy),
        args.preview,
        args.skip_blank_rows,
    ))


if __name__ == "__main__":
    main()
