"""Pytest configuration and fixtures."""

from datetime import date
from decimal import Decimal
from typing import Callable, Iterable

import pytest

from loan_tracker.backend import MemoryBackend, StorageBackend, TableStore
from loan_tracker.config import BackendConfig
from loan_tracker.exceptions import BackendError
from loan_tracker.models import Company, Consortium, Loan
from loan_tracker.store import DataStore

TODAY = date(2024, 9, 10)


class FailingTableStore(TableStore):
    """Wraps a table and raises ``BackendError`` from the selected methods."""

    def __init__(self, inner: TableStore, fail_on: Iterable[str]) -> None:
        super().__init__(inner.mapping)
        self.inner = inner
        self.fail_on = set(fail_on)
        self.calls: list[str] = []

    def _call(self, name: str, *args):
        self.calls.append(name)
        if name in self.fail_on:
            raise BackendError(f"{self.table}.{name} failed")
        return getattr(self.inner, name)(*args)

    def list(self):
        return self._call("list")

    def upsert(self, record):
        return self._call("upsert", record)

    def upsert_many(self, records):
        return self._call("upsert_many", records)

    def delete(self, record_id):
        return self._call("delete", record_id)

    def delete_many(self, record_ids):
        return self._call("delete_many", record_ids)

    def clear(self):
        return self._call("clear")

    def __len__(self) -> int:
        return len(self.inner)


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def today() -> date:
    """Fixed business date."""
    return TODAY


@pytest.fixture
def sample_backend() -> MemoryBackend:
    """In-memory backend seeded with the static sample data."""
    return MemoryBackend.with_sample_data()


@pytest.fixture
def empty_backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def store(sample_backend: MemoryBackend, today: date) -> DataStore:
    """Store loaded from the sample data on a fixed date."""
    data_store = DataStore(sample_backend, today=lambda: today)
    data_store.refresh()
    return data_store


@pytest.fixture
def empty_store(empty_backend: MemoryBackend, today: date) -> DataStore:
    data_store = DataStore(empty_backend, today=lambda: today)
    data_store.refresh()
    return data_store


@pytest.fixture
def fail() -> Callable[..., FailingTableStore]:
    """Make one table of a backend fail on the given methods."""

    def install(backend: StorageBackend, table: str, *methods: str) -> FailingTableStore:
        failing = FailingTableStore(getattr(backend, table), methods)
        setattr(backend, table, failing)
        return failing

    return install


@pytest.fixture
def sample_company() -> Company:
    return Company(
        id="comp-001",
        name="Acme Indústria",
        nickname="Acme",
        tax_id="11.222.333/0001-44",
        address="Rua Um, 1 - São Paulo/SP",
    )


@pytest.fixture
def sample_loan(sample_company: Company) -> Loan:
    """Three monthly installments of 100, the second due on ``TODAY``."""
    return Loan(
        company_id=sample_company.id,
        reference="CDC 001",
        bank="Banco Teste",
        total_value=Decimal("300"),
        start_date=date(2024, 8, 10),
        end_date=date(2024, 10, 10),
        installments=3,
        installment_value=Decimal("100"),
        interest_per_installment=Decimal("10"),
        nominal_rate=Decimal("1.5"),
    )


@pytest.fixture
def sample_consortium(sample_company: Company) -> Consortium:
    return Consortium(
        company_id=sample_company.id,
        observation="Caminhão ABC-1234",
        group_code="1001",
        quota="12",
        administrator="Porto Seguro",
        category="VEHICLE",
        current_installment_value=Decimal("1500"),
        total_installments=60,
        outstanding_balance=Decimal("30000"),
        amount_paid=Decimal("60000"),
        amount_to_pay=Decimal("30000"),
        installments_to_pay=20,
        paid_installments=40,
    )


@pytest.fixture
def connected_config() -> BackendConfig:
    return BackendConfig(url="https://demo.supabase.co", anon_key="anon-key")


@pytest.fixture
def admin_config() -> BackendConfig:
    return BackendConfig(
        url="https://demo.supabase.co",
        anon_key="anon-key",
        service_role_key="service-key",
    )
