"""Schema bootstrap and bulk loading over a direct PostgreSQL connection.

The hosted backend exposes the same database through its REST API; this module
talks to it directly to create the tables and seed them.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Iterable

import psycopg

from loan_tracker.backend import mapping as maps
from loan_tracker.logging import get_logger
from loan_tracker.sample import SampleDataset

logger = get_logger(__name__)

SCHEMA = [
    """
    CREATE TABLE IF NOT EXISTS companies (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        name TEXT NOT NULL,
        nickname TEXT NOT NULL DEFAULT '',
        cnpj TEXT NOT NULL DEFAULT '',
        address TEXT NOT NULL DEFAULT '',
        created_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS loans (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        company_id TEXT NOT NULL REFERENCES companies(id),
        reference TEXT NOT NULL,
        bank TEXT NOT NULL,
        total_value NUMERIC(16, 2) NOT NULL DEFAULT 0,
        start_date DATE,
        end_date DATE,
        status TEXT NOT NULL DEFAULT 'ACTIVE' CHECK (status IN ('ACTIVE', 'FINISHED')),
        operation TEXT NOT NULL DEFAULT '',
        operation_number TEXT NOT NULL DEFAULT '',
        upfront_value NUMERIC(16, 2) NOT NULL DEFAULT 0,
        financed_value NUMERIC(16, 2) NOT NULL DEFAULT 0,
        interest_value NUMERIC(16, 2) NOT NULL DEFAULT 0,
        installments INTEGER NOT NULL DEFAULT 0,
        installment_value NUMERIC(16, 2) NOT NULL DEFAULT 0,
        installment_value_no_interest NUMERIC(16, 2) NOT NULL DEFAULT 0,
        interest_per_installment NUMERIC(16, 2) NOT NULL DEFAULT 0,
        nominal_rate NUMERIC(8, 4) NOT NULL DEFAULT 0,
        effective_annual_rate NUMERIC(8, 4) NOT NULL DEFAULT 0,
        paid_installments INTEGER NOT NULL DEFAULT 0,
        remaining_installments INTEGER NOT NULL DEFAULT 0,
        amount_paid NUMERIC(16, 2) NOT NULL DEFAULT 0,
        amount_to_pay NUMERIC(16, 2) NOT NULL DEFAULT 0,
        as_of_date DATE,
        contract_start DATE
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS installments (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        loan_id TEXT NOT NULL REFERENCES loans(id),
        sequence INTEGER NOT NULL CHECK (sequence >= 1),
        date DATE NOT NULL,
        value NUMERIC(16, 2) NOT NULL DEFAULT 0,
        interest NUMERIC(16, 2) NOT NULL DEFAULT 0,
        status TEXT NOT NULL DEFAULT 'PENDING' CHECK (status IN ('PAID', 'PENDING', 'OVERDUE')),
        UNIQUE (loan_id, sequence)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS consortiums (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        company_id TEXT NOT NULL REFERENCES companies(id),
        observation TEXT NOT NULL,
        group_code TEXT NOT NULL,
        quota TEXT NOT NULL,
        administrator TEXT NOT NULL,
        category TEXT NOT NULL,
        current_installment_value NUMERIC(16, 2) NOT NULL DEFAULT 0,
        total_installments INTEGER NOT NULL DEFAULT 0,
        credit_to_receive NUMERIC(16, 2) NOT NULL DEFAULT 0,
        outstanding_balance NUMERIC(16, 2) NOT NULL DEFAULT 0,
        amount_paid NUMERIC(16, 2) NOT NULL DEFAULT 0,
        amount_to_pay NUMERIC(16, 2) NOT NULL DEFAULT 0,
        installments_to_pay INTEGER NOT NULL DEFAULT 0,
        paid_installments INTEGER NOT NULL DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS user_profiles (
        id TEXT PRIMARY KEY DEFAULT gen_random_uuid()::text,
        user_id TEXT UNIQUE,
        name TEXT NOT NULL,
        email TEXT NOT NULL UNIQUE,
        role TEXT NOT NULL DEFAULT 'MANAGER' CHECK (role IN ('MASTER', 'MANAGER', 'FINANCE')),
        created_at TIMESTAMPTZ NOT NULL DEFAULT now(),
        updated_at TIMESTAMPTZ NOT NULL DEFAULT now()
    )
    """,
]

# Parents before children
LOAD_ORDER = (maps.COMPANIES, maps.LOANS, maps.INSTALLMENTS, maps.CONSORTIUMS, maps.USER_PROFILES)


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def row_values(mapping: maps.TableMapping, record: Any) -> tuple[list[str], list[Any]]:
    """Writable column names and native values of a record."""
    columns = [c for c in mapping.columns if c.writable]
    return (
        [c.name for c in columns],
        [_db_value(getattr(record, c.attr)) for c in columns],
    )


def connect(url: str) -> psycopg.Connection:
    return psycopg.connect(url)


def create_schema(conn: psycopg.Connection) -> None:
    with conn.cursor() as cur:
        for statement in SCHEMA:
            cur.execute(statement)
    logger.info("Schema ready (%d tables)", len(SCHEMA))


def truncate(conn: psycopg.Connection) -> None:
    tables = ", ".join(mapping.table for mapping in reversed(LOAD_ORDER))
    with conn.cursor() as cur:
        cur.execute(f"TRUNCATE {tables} CASCADE")


def insert_records(conn: psycopg.Connection, mapping: maps.TableMapping, records: Iterable[Any]) -> int:
    """Insert records of one table with ``executemany``; returns the row count."""
    rows = []
    columns: list[str] = []
    for record in records:
        columns, values = row_values(mapping, record)
        rows.append(values)
    if not rows:
        return 0

    placeholders = ", ".join(["%s"] * len(columns))
    query = (
        f"INSERT INTO {mapping.table} ({', '.join(columns)}) VALUES ({placeholders}) "  # noqa: S608
        "ON CONFLICT (id) DO NOTHING"
    )
    with conn.cursor() as cur:
        cur.executemany(query, rows)
    logger.info("  %s: %d rows", mapping.table, len(rows))
    return len(rows)


def load_dataset(conn: psycopg.Connection, dataset: SampleDataset) -> dict[str, int]:
    """Insert a dataset, parents first; returns rows sent per table."""
    records = {
        "companies": dataset.companies,
        "loans": dataset.loans,
        "installments": dataset.installments,
        "consortiums": dataset.consortiums,
        "user_profiles": dataset.users,
    }
    return {mapping.table: insert_records(conn, mapping, records[mapping.table]) for mapping in LOAD_ORDER}


def count_rows(conn: psycopg.Connection) -> dict[str, int]:
    counts = {}
    with conn.cursor() as cur:
        for mapping in LOAD_ORDER:
            cur.execute(f"SELECT COUNT(*) FROM {mapping.table}")  # noqa: S608
            counts[mapping.table] = cur.fetchone()[0]
    return counts


def validate_counts(conn: psycopg.Connection, expected: dict[str, int]) -> list[str]:
    """Compare table row counts with ``expected``; returns mismatch messages."""
    mismatches = []
    for table, actual in count_rows(conn).items():
        wanted = expected.get(table, 0)
        if actual != wanted:
            mismatches.append(f"{table}: expected {wanted}, got {actual}")
        else:
            logger.info("  [OK] %s: %d rows", table, actual)
    return mismatches
