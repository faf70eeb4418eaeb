"""Authentication against the hosted backend.

Authentication itself is the backend's job; this module only forwards
credentials, keeps the current session, and tells subscribers when it changes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable
from urllib.parse import urlencode

import httpx

from loan_tracker.backend.http import HttpApi
from loan_tracker.config import BackendConfig
from loan_tracker.exceptions import AuthError, BackendNotConfiguredError
from loan_tracker.logging import get_logger

logger = get_logger(__name__)

SessionListener = Callable[["Session | None"], None]

NOT_CONFIGURED_MESSAGE = (
    "Backend not configured. Set SUPABASE_URL and SUPABASE_ANON_KEY to enable authentication."
)


@dataclass(frozen=True)
class AuthUser:
    """Authentication user as reported by the backend."""

    id: str
    email: str | None = None
    metadata: dict[str, Any] | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AuthUser":
        return cls(
            id=str(payload.get("id", "")),
            email=payload.get("email"),
            metadata=payload.get("user_metadata") or None,
        )


@dataclass(frozen=True)
class Session:
    """Signed-in session."""

    access_token: str
    refresh_token: str | None
    user: AuthUser
    expires_in: int | None = None

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "Session":
        return cls(
            access_token=payload["access_token"],
            refresh_token=payload.get("refresh_token"),
            user=AuthUser.from_payload(payload.get("user") or {}),
            expires_in=payload.get("expires_in"),
        )


class AuthGateway(ABC):
    """Session holder plus the sign-in operations of the backend."""

    def __init__(self) -> None:
        self._session: Session | None = None
        self._listeners: list[SessionListener] = []

    @property
    @abstractmethod
    def is_configured(self) -> bool:
        """Whether sign-in operations can reach a backend."""

    def get_session(self) -> Session | None:
        return self._session

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """Subscribe to session changes; returns a function that unsubscribes."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def _set_session(self, session: Session | None) -> None:
        self._session = session
        for listener in list(self._listeners):
            listener(session)

    @abstractmethod
    def sign_in_with_password(self, email: str, password: str) -> Session:
        """Sign in with e-mail and password."""

    @abstractmethod
    def sign_up(self, email: str, password: str) -> Session | None:
        """Register; returns a session unless e-mail confirmation is pending."""

    @abstractmethod
    def sign_in_with_oauth(self, provider: str, redirect_to: str | None = None) -> str:
        """Return the URL that starts the provider's sign-in flow."""

    @abstractmethod
    def sign_out(self) -> None:
        """End the current session."""

    def close(self) -> None:
        """Release network resources, if any."""


class DisabledAuthGateway(AuthGateway):
    """Gateway used without backend credentials: every sign-in fails."""

    @property
    def is_configured(self) -> bool:
        return False

    def sign_in_with_password(self, email: str, password: str) -> Session:
        raise BackendNotConfiguredError(NOT_CONFIGURED_MESSAGE)

    def sign_up(self, email: str, password: str) -> Session | None:
        raise BackendNotConfiguredError(NOT_CONFIGURED_MESSAGE)

    def sign_in_with_oauth(self, provider: str, redirect_to: str | None = None) -> str:
        raise BackendNotConfiguredError(NOT_CONFIGURED_MESSAGE)

    def sign_out(self) -> None:
        raise BackendNotConfiguredError(NOT_CONFIGURED_MESSAGE)


class RestAuthGateway(AuthGateway):
    """Gateway talking to the backend's authentication API."""

    def __init__(
        self,
        config: BackendConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        super().__init__()
        self.config = config
        self.api = HttpApi(
            config.auth_url,
            config.anon_key,
            timeout=config.timeout,
            transport=transport,
            error_cls=AuthError,
        )

    @property
    def is_configured(self) -> bool:
        return True

    def sign_in_with_password(self, email: str, password: str) -> Session:
        payload = self.api.request(
            "POST",
            "/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        session = Session.from_payload(payload)
        logger.info("Signed in as %s", session.user.email)
        self._set_session(session)
        return session

    def sign_up(self, email: str, password: str) -> Session | None:
        payload = self.api.request("POST", "/signup", json={"email": email, "password": password})
        if payload and payload.get("access_token"):
            session = Session.from_payload(payload)
            self._set_session(session)
            return session
        logger.info("Sign-up for %s awaits e-mail confirmation", email)
        return None

    def sign_in_with_oauth(self, provider: str, redirect_to: str | None = None) -> str:
        params = {"provider": provider}
        if redirect_to:
            params["redirect_to"] = redirect_to
        return f"{self.config.auth_url}/authorize?{urlencode(params)}"

    def sign_out(self) -> None:
        session = self._session
        if session is None:
            return
        self.api.request("POST", "/logout", bearer=session.access_token)
        self._set_session(None)

    def close(self) -> None:
        self.api.close()
