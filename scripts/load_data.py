#!/usr/bin/env python3
"""Create the backend tables in PostgreSQL and load sample data.

Connects directly to the hosted database (``DATABASE_URL``), creates the five
tables if needed, loads either the static mock dataset or a generated one, and
validates the resulting row counts.
"""

import argparse
import sys
import time
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from loan_tracker.backend import postgres
from loan_tracker.config import AppConfig
from loan_tracker.logging import get_logger, setup_logging
from loan_tracker.sample import SampleDataGenerator, SampleDataset, fixtures

logger = get_logger("load_data")


def static_dataset() -> SampleDataset:
    return SampleDataset(
        companies=fixtures.companies(),
        loans=fixtures.loans(),
        installments=fixtures.installments(),
        consortiums=fixtures.consortiums(),
        users=fixtures.users(),
    )


def main() -> int:
    """Main entry point."""
    config = AppConfig.from_env()
    parser = argparse.ArgumentParser(description="Create tables and load sample data into PostgreSQL")
    parser.add_argument(
        "--postgres-url",
        type=str,
        default=config.postgres.connection_string,
        help="PostgreSQL connection string (default: DATABASE_URL or POSTGRES_* settings)",
    )
    parser.add_argument(
        "--generated",
        action="store_true",
        help="Load a Faker-generated dataset instead of the static sample data",
    )
    parser.add_argument(
        "--companies",
        type=int,
        default=5,
        help="Companies to generate with --generated (default: 5)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=config.seed if config.seed is not None else 42,
        help="Random seed for --generated (default: SEED or 42)",
    )
    parser.add_argument(
        "--truncate",
        action="store_true",
        help="Empty the tables before loading (allows re-running)",
    )
    parser.add_argument(
        "--schema-only",
        action="store_true",
        help="Create the tables and stop",
    )
    args = parser.parse_args()
    setup_logging(config.log_level, config.log_format)

    if args.generated:
        dataset = SampleDataGenerator(seed=args.seed).generate(companies=args.companies)
    else:
        dataset = static_dataset()

    logger.info("=" * 60)
    logger.info("loan-tracker - Load to PostgreSQL")
    logger.info("=" * 60)
    logger.info("Dataset: %s", "generated (seed %d)" % args.seed if args.generated else "static sample")

    start = time.perf_counter()
    with postgres.connect(args.postgres_url) as conn:
        postgres.create_schema(conn)
        if args.schema_only:
            return 0
        if args.truncate:
            postgres.truncate(conn)
        postgres.load_dataset(conn, dataset)
        conn.commit()
        mismatches = postgres.validate_counts(conn, dataset.counts())

    logger.info("Load complete (%.1fs)", time.perf_counter() - start)
    if mismatches:
        for mismatch in mismatches:
            logger.error("  [MISMATCH] %s", mismatch)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
