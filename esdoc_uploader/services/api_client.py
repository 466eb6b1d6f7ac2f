"""HTTP adapter for the ESDoc API."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

log = logging.getLogger(__name__)


class APIError(RuntimeError):
    """Raised (and returned) when the API answers with an error status."""

    def __init__(self, status_code: int, body: Optional[str] = None):
        super().__init__(f"The API responded with a {status_code}")
        self.status_code = status_code
        self.body = body


@dataclass(frozen=True)
class APIResponse:
    """Outcome of a single request: an error, a raw body, or both."""
    error: Optional[Exception] = None
    body: Optional[str] = None
    status_code: Optional[int] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class HTTPAPIClient:
    """
    HTTPS client adapter for the documentation API.

    Implements IAPIClient protocol. Errors are returned inside the
    APIResponse, never raised.
    """

    def __init__(
        self,
        host: str,
        timeout: float = 60,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = f"https://{host}"
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self):
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *args):
        if self._client:
            await self._client.aclose()
            self._client = None

    async def post_json(self, path: str, body: Dict[str, Any]) -> APIResponse:
        data = json.dumps(body).encode("utf-8")
        headers = {
            "Content-Type": "application/json",
            "Content-Length": str(len(data)),
        }
        return await self._request("POST", path, content=data, headers=headers)

    async def get_raw(self, path: str) -> APIResponse:
        return await self._request("GET", path)

    async def _request(self, method: str, path: str, **kwargs) -> APIResponse:
        if not self._client:
            raise RuntimeError("HTTPAPIClient not initialized. Use 'async with' context.")

        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            log.debug("%s %s failed: %s", method, path, exc)
            return APIResponse(error=exc)

        text = response.text
        log.debug("%s %s -> %s", method, path, response.status_code)
        if response.status_code >= 400:
            return APIResponse(
                error=APIError(response.status_code, text),
                body=text,
                status_code=response.status_code,
            )
        return APIResponse(body=text, status_code=response.status_code)
