"""Validate and bulk-import students or faculty from a CSV file.

Usage: python scripts/import_csv.py students.csv --kind student [--dry-run]
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.edumark.edumark.container import build_container
from src.edumark.edumark.core.exceptions import DomainError
from src.edumark.edumark.imports.csv_parser import validate_csv


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("path", type=Path)
    parser.add_argument("--kind", choices=["student", "faculty"], required=True)
    parser.add_argument("--dry-run", action="store_true", help="validate only, create no accounts")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s [%(name)s] %(message)s")

    text = args.path.read_text(encoding="utf-8-sig")
    checked = validate_csv(text, args.kind)
    if not checked.valid:
        for error in checked.errors:
            print(error, file=sys.stderr)
        return 1

    print(f"OK: {len(checked.rows)} valid {args.kind} rows")
    if args.dry_run:
        return 0

    settings = importlib.import_module(get_settings_module())
    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        import_settings={
            "row_delay": settings.IMPORT_ROW_DELAY_SECONDS,
            "max_retries": settings.IMPORT_MAX_RETRIES,
            "base_delay": settings.IMPORT_BASE_DELAY_SECONDS,
        },
    )
    try:
        result = container.import_service.import_rows(checked.rows, args.kind)
    except DomainError as exc:
        print(f"Import failed: {exc}", file=sys.stderr)
        return 1

    print(f"Created {result.success}, failed {result.errors}")
    for detail in result.error_details:
        print(f"  {detail}", file=sys.stderr)
    return 0 if result.errors == 0 else 2


if __name__ == "__main__":
    raise SystemExit(main())
