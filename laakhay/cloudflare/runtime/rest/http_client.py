"""HTTP client helper."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import aiohttp
from multidict import CIMultiDict, CIMultiDictProxy


@dataclass(frozen=True)
class RawResponse:
    """Status, headers and fully read body of one HTTP exchange."""

    status: int
    headers: CIMultiDictProxy[str]
    body: bytes

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Decode the body as JSON (empty body decodes to None)."""
        if not self.body:
            return None
        return json.loads(self.body)


def encode_body(body: Any) -> bytes | None:
    """Serialize a request body; bytes and str pass through untouched."""
    if body is None:
        return None
    if isinstance(body, bytes):
        return body
    if isinstance(body, str):
        return body.encode()
    return json.dumps(body).encode()


class HTTPClient:
    """Async HTTP client wrapper owning one aiohttp session."""

    def __init__(self, base_url: str | None = None, timeout: float = 30.0) -> None:
        self.base_url = base_url
        self.timeout = aiohttp.ClientTimeout(total=timeout)
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self._session

    def url_for(self, path: str) -> str:
        """Combine base_url with a relative path; absolute URLs pass through."""
        if self.base_url and not path.startswith(("http://", "https://")):
            return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"
        return path

    async def request(
        self,
        method: str,
        path: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: Any = None,
        params: Mapping[str, Any] | None = None,
    ) -> RawResponse:
        """Send one request and read the whole response body.

        Raises:
            aiohttp.ClientError: On connection or protocol failures
            asyncio.TimeoutError: When the session timeout elapses
        """
        async with self.session.request(
            method.upper(),
            self.url_for(path),
            headers=CIMultiDict(headers or {}),
            data=encode_body(body),
            params=params,
        ) as response:
            payload = await response.read()
            return RawResponse(status=response.status, headers=response.headers, body=payload)

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()
