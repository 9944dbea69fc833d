"""HTTP proxy to a WebDriverAgent-style automation endpoint.

Only the request/response envelope is handled here; session creation and
lifecycle are owned by whoever builds the proxy.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

import httpx

from xcui_commands.errors import RemoteCommandError

logger = logging.getLogger(__name__)

_ALLOWED_METHODS = {"GET", "POST", "DELETE"}


def _error_from_value(value: Any) -> Optional[tuple[str, str]]:
    if isinstance(value, dict) and isinstance(value.get("error"), str):
        return value["error"], str(value.get("message") or "")
    return None


class WdaProxy:
    """Send commands to the remote endpoint and unwrap the `value` envelope."""

    def __init__(
        self,
        base_url: str,
        *,
        session_id: Optional[str] = None,
        timeout_s: float = 60.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._base_url = str(base_url).rstrip("/")
        self._session_id = session_id
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    @property
    def session_id(self) -> Optional[str]:
        return self._session_id

    def url_for(self, path: str, *, is_session_command: bool = True) -> str:
        if not path.startswith("/"):
            path = "/" + path
        if is_session_command and self._session_id:
            return f"{self._base_url}/session/{self._session_id}{path}"
        return f"{self._base_url}{path}"

    async def command(
        self,
        path: str,
        method: str = "GET",
        params: Optional[Mapping[str, Any]] = None,
        is_session_command: bool = True,
    ) -> Any:
        method = method.upper()
        if method not in _ALLOWED_METHODS:
            raise RemoteCommandError(f"unsupported HTTP method {method!r}", path=path)

        url = self.url_for(path, is_session_command=is_session_command)
        body = dict(params or {}) if method == "POST" else None
        logger.debug("Proxying [%s %s] with body: %s", method, url, body)
        try:
            resp = await self._client.request(method, url, json=body)
        except httpx.HTTPError as e:
            raise RemoteCommandError(
                f"{method} {path} failed: {type(e).__name__}: {e}", path=path
            ) from e

        try:
            payload = resp.json()
        except (json.JSONDecodeError, ValueError):
            payload = None

        value = payload.get("value") if isinstance(payload, dict) else payload
        err = _error_from_value(value)
        legacy_status = payload.get("status") if isinstance(payload, dict) else None
        if resp.status_code >= 400 or err is not None or legacy_status not in (None, 0):
            error, message = err or ("unknown error", resp.text[:500])
            raise RemoteCommandError(
                f"{method} {path} failed (http={resp.status_code}): {error}: {message}",
                path=path,
                status_code=resp.status_code,
                error=error,
                payload=payload,
            )

        logger.debug("Got response with status %s: %s", resp.status_code, value)
        return value

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WdaProxy":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.aclose()
