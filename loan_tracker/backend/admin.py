"""User administration with the backend's service-role key."""

from __future__ import annotations

from typing import Any

import httpx

from loan_tracker.backend.auth import AuthUser
from loan_tracker.backend.http import HttpApi
from loan_tracker.config import BackendConfig
from loan_tracker.exceptions import AuthError, BackendNotConfiguredError
from loan_tracker.logging import get_logger

logger = get_logger(__name__)

ADMIN_NOT_CONFIGURED_MESSAGE = (
    "User administration is not configured. Set SUPABASE_SERVICE_ROLE_KEY to manage users."
)


class AdminGateway:
    """Creates, invites, updates and deletes authentication users.

    Without a service-role key every call raises
    ``BackendNotConfiguredError``, independently of whether the data API is
    configured.
    """

    def __init__(
        self,
        config: BackendConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.config = config
        self.api: HttpApi | None = None
        if config.has_admin:
            self.api = HttpApi(
                config.auth_url,
                config.service_role_key,
                timeout=config.timeout,
                transport=transport,
                error_cls=AuthError,
            )

    @property
    def is_configured(self) -> bool:
        return self.api is not None

    def _require_api(self) -> HttpApi:
        if self.api is None:
            raise BackendNotConfiguredError(ADMIN_NOT_CONFIGURED_MESSAGE)
        return self.api

    def invite_user(self, email: str, data: dict[str, Any] | None = None) -> AuthUser:
        """Send an invitation e-mail; returns the pending user."""
        payload = self._require_api().request("POST", "/invite", json={"email": email, "data": data or {}})
        logger.info("Invited %s", email)
        return AuthUser.from_payload(payload or {})

    def create_user(self, email: str, password: str, name: str) -> AuthUser:
        payload = self._require_api().request(
            "POST",
            "/admin/users",
            json={
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"name": name},
            },
        )
        return AuthUser.from_payload(payload or {})

    def update_user(
        self,
        user_id: str,
        email: str,
        name: str,
        password: str | None = None,
    ) -> AuthUser:
        body: dict[str, Any] = {"email": email, "user_metadata": {"name": name}}
        if password:
            body["password"] = password
        payload = self._require_api().request("PUT", f"/admin/users/{user_id}", json=body)
        return AuthUser.from_payload(payload or {"id": user_id, "email": email})

    def delete_user(self, user_id: str) -> None:
        self._require_api().request("DELETE", f"/admin/users/{user_id}")
        logger.info("Deleted auth user %s", user_id)

    def close(self) -> None:
        if self.api is not None:
            self.api.close()
