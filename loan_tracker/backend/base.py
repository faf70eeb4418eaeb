"""Storage capability shared by the live and in-memory backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Iterable, TypeVar

from loan_tracker.backend.mapping import TableMapping
from loan_tracker.config import BackendMode
from loan_tracker.models import Company, Consortium, Installment, Loan, UserProfile

R = TypeVar("R")


class TableStore(ABC, Generic[R]):
    """One backend collection.

    Implementations raise ``BackendError`` on failure and never change what
    they hold when a call fails.
    """

    def __init__(self, mapping: TableMapping) -> None:
        self.mapping = mapping

    @property
    def table(self) -> str:
        return self.mapping.table

    @abstractmethod
    def list(self) -> list[R]:
        """Return every record, ordered by the table's display order."""

    @abstractmethod
    def upsert(self, record: R) -> R:
        """Insert or update ``record`` by id; returns the authoritative record."""

    @abstractmethod
    def upsert_many(self, records: Iterable[R]) -> list[R]:
        """Insert or update several records in one call."""

    @abstractmethod
    def delete(self, record_id: str) -> None:
        """Delete one record by id (deleting a missing id is not an error)."""

    @abstractmethod
    def delete_many(self, record_ids: Iterable[str]) -> None:
        """Delete several records by id."""

    @abstractmethod
    def clear(self) -> None:
        """Delete every record."""


@dataclass
class StorageBackend:
    """The five tables plus the mode they were selected for."""

    mode: BackendMode
    companies: TableStore[Company]
    loans: TableStore[Loan]
    installments: TableStore[Installment]
    consortiums: TableStore[Consortium]
    user_profiles: TableStore[UserProfile]

    @property
    def is_connected(self) -> bool:
        return self.mode == BackendMode.CONNECTED

    def close(self) -> None:
        """Release network resources held by the tables, if any."""
