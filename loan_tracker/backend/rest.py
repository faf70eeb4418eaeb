"""Live backend over the hosted service's REST data API."""

from __future__ import annotations

from typing import Iterable, TypeVar

import httpx

from loan_tracker.backend import mapping as maps
from loan_tracker.backend.base import StorageBackend, TableStore
from loan_tracker.backend.http import HttpApi
from loan_tracker.config import BackendConfig, BackendMode
from loan_tracker.exceptions import BackendError, ConfigurationError
from loan_tracker.logging import get_logger

logger = get_logger(__name__)

R = TypeVar("R")

# Insert-or-merge on the primary key, returning the stored rows
UPSERT_PREFER = "resolution=merge-duplicates,return=representation"


def _in_filter(values: Iterable[str]) -> str:
    quoted = ",".join(f'"{value}"' for value in values)
    return f"in.({quoted})"


class RestTableStore(TableStore[R]):
    """One table of the REST data API."""

    def __init__(self, mapping: maps.TableMapping, api: HttpApi) -> None:
        super().__init__(mapping)
        self.api = api

    @property
    def path(self) -> str:
        return f"/{self.table}"

    def list(self) -> list[R]:
        direction = "asc" if self.mapping.ascending else "desc"
        rows = self.api.request(
            "GET",
            self.path,
            params={"select": "*", "order": f"{self.mapping.order_by}.{direction}"},
        )
        return [self.mapping.from_row(row) for row in rows or []]

    def upsert(self, record: R) -> R:
        rows = self._post([self.mapping.to_row(record)])
        if not rows:
            raise BackendError(f"{self.table}: upsert returned no row")
        return rows[0]

    def upsert_many(self, records: Iterable[R]) -> list[R]:
        payload = [self.mapping.to_row(record) for record in records]
        if not payload:
            return []
        return self._post(payload)

    def _post(self, payload: list[dict]) -> list[R]:
        rows = self.api.request(
            "POST",
            self.path,
            params={"on_conflict": "id"},
            json=payload if len(payload) > 1 else payload[0],
            headers={"Prefer": UPSERT_PREFER},
        )
        if isinstance(rows, dict):
            rows = [rows]
        return [self.mapping.from_row(row) for row in rows or []]

    def delete(self, record_id: str) -> None:
        self.api.request("DELETE", self.path, params={"id": f"eq.{record_id}"})

    def delete_many(self, record_ids: Iterable[str]) -> None:
        ids = list(record_ids)
        if not ids:
            return
        self.api.request("DELETE", self.path, params={"id": _in_filter(ids)})

    def clear(self) -> None:
        self.api.request("DELETE", self.path, params={"id": "not.is.null"})


class RestBackend(StorageBackend):
    """All five tables on the hosted backend, sharing one HTTP client."""

    def __init__(
        self,
        config: BackendConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        if not config.is_configured:
            raise ConfigurationError("Backend URL and anonymous key are required for connected mode")
        self.api = HttpApi(config.rest_url, config.anon_key, timeout=config.timeout, transport=transport)
        super().__init__(
            mode=BackendMode.CONNECTED,
            companies=RestTableStore(maps.COMPANIES, self.api),
            loans=RestTableStore(maps.LOANS, self.api),
            installments=RestTableStore(maps.INSTALLMENTS, self.api),
            consortiums=RestTableStore(maps.CONSORTIUMS, self.api),
            user_profiles=RestTableStore(maps.USER_PROFILES, self.api),
        )
        logger.info("Connected to backend at %s", config.url)

    def close(self) -> None:
        self.api.close()
