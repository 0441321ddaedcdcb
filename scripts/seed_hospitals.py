# =============================================================================
# scripts/seed_hospitals.py
# Push hospitals from a CSV file into the Realtime Database
# =============================================================================
"""
Reads a CSV with a YEAR column and adds every row under hospitals/{YEAR}.
Blank cells are left out of the stored record.

Usage:
    python scripts/seed_hospitals.py data/hospitals_2024.csv
    python scripts/seed_hospitals.py data/hospitals.csv --year 2023 --dry-run

Requirements:
    - firebase-admin package installed
    - .streamlit/secrets.toml with a [firebase] section
"""

from __future__ import annotations
import argparse
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

import pandas as pd
import toml

from hospital_core.data.firebase_client import (
    cleanup_firebase_app,
    get_database_reference,
    get_firebase_app,
    load_firebase_settings,
)
from hospital_core.data.snapshot import YEAR_FIELD
from hospital_core.errors import HospitalRegistryError
from hospital_core.logging import setup_logging
from hospital_core.services.hospital_service import HospitalBinding


def load_rows(csv_path: Path, year: Optional[str] = None) -> List[Dict[str, Any]]:
    """Read the CSV as strings; ``year`` overrides/fills the YEAR column."""
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=False)
    if year is not None:
        df[YEAR_FIELD] = year
    elif YEAR_FIELD not in df.columns:
        raise ValueError(f"{csv_path} has no {YEAR_FIELD} column; pass --year")

    rows = []
    for record in df.to_dict(orient="records"):
        rows.append({k: v.strip() for k, v in record.items() if v and v.strip()})
    return rows


def load_secrets_section(secrets_path: Path) -> Dict[str, Any]:
    if not secrets_path.exists():
        print(f"[ERROR] Secrets file not found at {secrets_path}")
        return {}
    return dict(toml.load(secrets_path).get("firebase", {}))


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Seed hospitals into Firebase")
    parser.add_argument("csv", type=Path, help="CSV file with one hospital per row")
    parser.add_argument("--year", help="Use this YEAR for every row")
    parser.add_argument(
        "--secrets",
        type=Path,
        default=project_root / ".streamlit" / "secrets.toml",
        help="Path to secrets.toml",
    )
    parser.add_argument("--dry-run", action="store_true", help="Only print what would be added")
    args = parser.parse_args(argv)

    setup_logging(log_to_file=False)

    rows = load_rows(args.csv, args.year)
    print(f"[INFO] {len(rows)} hospital(s) read from {args.csv}")

    if args.dry_run:
        for row in rows:
            print(f"  [DRY-RUN] hospitals/{row.get(YEAR_FIELD, '?')} <- {row}")
        return 0

    try:
        settings = load_firebase_settings(load_secrets_section(args.secrets))
        app = get_firebase_app(settings)
    except HospitalRegistryError as e:
        print(f"[ERROR] {e}")
        return 1

    try:
        binding = HospitalBinding(reference_factory=lambda path: get_database_reference(path, app=app))
        binding.set_progress_callback(lambda pct, msg: print(f"  [UPLOAD] {msg} ({pct}%)"))
        result = binding.import_hospitals(rows)
    finally:
        cleanup_firebase_app(settings.app_name)

    summary = result.data if result else result.details
    print(f"[OK] Added {len(summary['added'])} hospital(s)")
    for failure in summary["failed"]:
        print(f"[ERROR] Row {failure['row']}: {failure['error']}")

    return 0 if result else 1


if __name__ == "__main__":
    sys.exit(main())
