"""Non-persistent in-memory backend used when no hosted backend is configured."""

from __future__ import annotations

from dataclasses import replace
from typing import Iterable, TypeVar

from loan_tracker.backend import mapping as maps
from loan_tracker.backend.base import StorageBackend, TableStore
from loan_tracker.config import BackendMode
from loan_tracker.logging import get_logger
from loan_tracker.models import new_id, sort_records

logger = get_logger(__name__)

R = TypeVar("R")


class MemoryTableStore(TableStore[R]):
    """Dict-backed table; records are copied in and out so callers never alias."""

    def __init__(self, mapping: maps.TableMapping, records: Iterable[R] = ()) -> None:
        super().__init__(mapping)
        self._records: dict[str, R] = {}
        for record in records:
            stored = self._with_id(record)
            self._records[stored.id] = stored

    def _with_id(self, record: R) -> R:
        return replace(record, id=record.id or new_id())

    def list(self) -> list[R]:
        return sort_records(self.mapping.entity, (replace(r) for r in self._records.values()))

    def upsert(self, record: R) -> R:
        stored = self._with_id(record)
        self._records[stored.id] = stored
        return replace(stored)

    def upsert_many(self, records: Iterable[R]) -> list[R]:
        return [self.upsert(record) for record in records]

    def delete(self, record_id: str) -> None:
        self._records.pop(record_id, None)

    def delete_many(self, record_ids: Iterable[str]) -> None:
        for record_id in record_ids:
            self._records.pop(record_id, None)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


class MemoryBackend(StorageBackend):
    """All five tables held in memory, optionally seeded with sample data."""

    def __init__(
        self,
        companies: Iterable = (),
        loans: Iterable = (),
        installments: Iterable = (),
        consortiums: Iterable = (),
        user_profiles: Iterable = (),
    ) -> None:
        super().__init__(
            mode=BackendMode.MOCK,
            companies=MemoryTableStore(maps.COMPANIES, companies),
            loans=MemoryTableStore(maps.LOANS, loans),
            installments=MemoryTableStore(maps.INSTALLMENTS, installments),
            consortiums=MemoryTableStore(maps.CONSORTIUMS, consortiums),
            user_profiles=MemoryTableStore(maps.USER_PROFILES, user_profiles),
        )

    @classmethod
    def with_sample_data(cls) -> "MemoryBackend":
        """Backend seeded with the static sample dataset."""
        from loan_tracker.sample import fixtures

        logger.info("No backend configured; using in-memory sample data")
        return cls(
            companies=fixtures.companies(),
            loans=fixtures.loans(),
            installments=fixtures.installments(),
            consortiums=fixtures.consortiums(),
            user_profiles=fixtures.users(),
        )
