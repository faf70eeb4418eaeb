"""Storage, authentication and administration backends."""

from __future__ import annotations

import httpx

from loan_tracker.backend.admin import AdminGateway
from loan_tracker.backend.auth import AuthGateway, AuthUser, DisabledAuthGateway, RestAuthGateway, Session
from loan_tracker.backend.base import StorageBackend, TableStore
from loan_tracker.backend.memory import MemoryBackend, MemoryTableStore
from loan_tracker.backend.rest import RestBackend, RestTableStore
from loan_tracker.config import BackendConfig, BackendMode


def create_backend(
    config: BackendConfig,
    transport: httpx.BaseTransport | None = None,
) -> StorageBackend:
    """Select the storage implementation once, from configuration."""
    if config.mode == BackendMode.CONNECTED:
        return RestBackend(config, transport=transport)
    return MemoryBackend.with_sample_data()


def create_auth(
    config: BackendConfig,
    backend: StorageBackend | None = None,
    transport: httpx.BaseTransport | None = None,
) -> AuthGateway:
    """Authentication gateway; data requests of ``backend`` follow its session."""
    if not config.is_configured:
        return DisabledAuthGateway()
    auth = RestAuthGateway(config, transport=transport)
    if isinstance(backend, RestBackend):
        api = backend.api
        auth.on_session_change(lambda session: api.set_access_token(session.access_token if session else None))
    return auth


__all__ = [
    "AdminGateway",
    "AuthGateway",
    "AuthUser",
    "DisabledAuthGateway",
    "MemoryBackend",
    "MemoryTableStore",
    "RestAuthGateway",
    "RestBackend",
    "RestTableStore",
    "Session",
    "StorageBackend",
    "TableStore",
    "create_auth",
    "create_backend",
]
