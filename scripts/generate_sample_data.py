#!/usr/bin/env python3
"""Generate sample data files for validation.

Writes one JSON file per table, using the backend's column names, so the files
can be inspected or imported into the hosted backend.
"""

import argparse
import json
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_tracker.backend import mapping as maps
from loan_tracker.sample import SampleDataGenerator


def save_json(mapping: maps.TableMapping, records: list, output_dir: Path) -> None:
    """Save records to ``<table>.json``."""
    filepath = output_dir / f"{mapping.table}.json"
    rows = [mapping.to_row(record) for record in records]
    with open(filepath, "w", encoding="utf-8") as f:
        json.dump(rows, f, indent=2, ensure_ascii=False)
    print(f"Saved {len(rows)} records to {filepath}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate sample JSON files")
    parser.add_argument("--output-dir", type=Path, default=project_root / "local")
    parser.add_argument("--companies", type=int, default=3)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    args.output_dir.mkdir(parents=True, exist_ok=True)
    dataset = SampleDataGenerator(seed=args.seed).generate(companies=args.companies)

    save_json(maps.COMPANIES, dataset.companies, args.output_dir)
    save_json(maps.LOANS, dataset.loans, args.output_dir)
    save_json(maps.INSTALLMENTS, dataset.installments, args.output_dir)
    save_json(maps.CONSORTIUMS, dataset.consortiums, args.output_dir)
    save_json(maps.USER_PROFILES, dataset.users, args.output_dir)


if __name__ == "__main__":
    main()
