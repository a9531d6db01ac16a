"""Async client for the n8n public REST API."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Optional

import httpx

from .errors import ERROR_PREFIX, N8nConfigError, N8nError, N8nHTTPError, N8nTransportError

if TYPE_CHECKING:
    from ..config import Settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = "X-N8N-API-KEY"


class N8nClient:
    """Performs single authenticated requests against an n8n instance.

    Required settings: N8N_API_KEY
    Optional: N8N_PROTOCOL (http), N8N_HOST (localhost), N8N_PORT (5678),
    N8N_API_TIMEOUT in milliseconds (10000)

    Every failure surfaces as an ``N8nError``. Nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str],
        timeout_ms: int = 10000,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base = base_url.rstrip("/")
        self._api_key = api_key
        self._timeout_ms = timeout_ms
        self._owns_http = http_client is None
        self.http = http_client or httpx.AsyncClient()

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        http_client: httpx.AsyncClient | None = None,
    ) -> N8nClient:
        return cls(
            settings.n8n_base_url,
            settings.n8n_api_key,
            settings.n8n_api_timeout,
            http_client,
        )

    @property
    def base_url(self) -> str:
        return self._base

    def is_configured(self) -> bool:
        return bool(self._api_key)

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        headers: dict[str, str] | None = None,
        body: Any = None,
        params: Any = None,
    ) -> Any:
        """Send one request to ``path`` (relative to the API root) and return parsed JSON."""
        if not self._api_key:
            raise N8nConfigError("N8N_API_KEY environment variable is not set")

        merged_headers = httpx.Headers({API_KEY_HEADER: self._api_key})
        if body is not None:
            merged_headers["Content-Type"] = "application/json"
        merged_headers.update(headers or {})

        url = f"{self._base}{path}"
        logger.debug("n8n %s %s", method, url)
        try:
            resp = await self.http.request(
                method,
                url,
                headers=merged_headers,
                json=body,
                params=params,
                timeout=self._timeout_ms / 1000,
            )
        except httpx.TimeoutException as e:
            logger.warning("n8n %s %s timed out after %sms", method, path, self._timeout_ms)
            raise N8nTransportError(
                f"request timed out after {self._timeout_ms}ms", "timeout"
            ) from e
        except httpx.HTTPError as e:
            logger.warning("n8n %s %s failed: %s", method, path, e)
            raise N8nTransportError(str(e) or e.__class__.__name__) from e

        self._check_error(resp)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError as e:
            raise N8nError(
                f"{ERROR_PREFIX}invalid JSON in response from {path}", "invalid_response"
            ) from e

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _check_error(self, resp: httpx.Response) -> None:
        if resp.is_success:
            return
        detail = None
        try:
            payload = resp.json()
        except ValueError:
            payload = None
        if isinstance(payload, dict) and payload.get("message"):
            detail = str(payload["message"])
        error = N8nHTTPError(resp.status_code, resp.reason_phrase, detail)
        logger.warning("%s", error)
        raise error
