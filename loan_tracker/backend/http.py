"""Thin httpx wrapper shared by the data, auth and admin APIs."""

from __future__ import annotations

from typing import Any

import httpx

from loan_tracker.exceptions import BackendError
from loan_tracker.logging import get_logger

logger = get_logger(__name__)


def error_message(response: httpx.Response) -> str:
    """Human-readable message from an error response, as the backend wrote it."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "msg", "error_description", "error"):
            if body.get(key):
                return str(body[key])
    text = response.text.strip()
    return text or f"HTTP {response.status_code}"


class HttpApi:
    """JSON-over-HTTP API with fixed credentials.

    Parameters
    ----------
    base_url : str
        API root, e.g. ``https://xyz.supabase.co/rest/v1``.
    api_key : str
        Key sent in the ``apikey`` header and as the default bearer token.
    timeout : float | None
        Request timeout in seconds; ``None`` waits indefinitely.
    transport : httpx.BaseTransport | None
        Custom transport (tests use ``httpx.MockTransport``).
    error_cls : type[BackendError]
        Exception raised for failed requests.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
        error_cls: type[BackendError] = BackendError,
    ) -> None:
        self.api_key = api_key
        self.access_token: str | None = None
        self.error_cls = error_cls
        self._client = httpx.Client(base_url=base_url, timeout=timeout, transport=transport)

    def set_access_token(self, token: str | None) -> None:
        """Send ``token`` instead of the API key as bearer from now on."""
        self.access_token = token

    def headers(self, bearer: str | None = None) -> dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {bearer or self.access_token or self.api_key}",
        }

    def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        headers: dict[str, str] | None = None,
        bearer: str | None = None,
    ) -> Any:
        """Send a request and decode the JSON response.

        Raises
        ------
        BackendError
            On transport failure or an HTTP error status.
        """
        merged = self.headers(bearer)
        if headers:
            merged.update(headers)
        try:
            response = self._client.request(method, path, params=params, json=json, headers=merged)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise self.error_cls(str(e) or type(e).__name__) from e

        if response.is_error:
            message = error_message(response)
            logger.warning("%s %s returned %d: %s", method, path, response.status_code, message)
            raise self.error_cls(message)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            logger.warning("%s %s returned a non-JSON body", method, path)
            raise self.error_cls(f"Unexpected response from backend: {e}") from e

    def close(self) -> None:
        self._client.close()
