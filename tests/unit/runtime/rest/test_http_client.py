"""Precise unit tests for HTTPClient.

Tests focus on session management, URL joining, and body encoding.
"""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest
from multidict import CIMultiDict, CIMultiDictProxy

from laakhay.cloudflare.runtime.rest import HTTPClient, RawResponse
from laakhay.cloudflare.runtime.rest.http_client import encode_body

API = "https://api.cloudflare.com/client/v4"


def make_response(status=200, body=b'{"success": true}', headers=None):
    response = AsyncMock()
    response.status = status
    response.headers = CIMultiDictProxy(CIMultiDict(headers or {}))
    response.read = AsyncMock(return_value=body)
    response.__aenter__ = AsyncMock(return_value=response)
    response.__aexit__ = AsyncMock(return_value=None)
    return response


def mock_session(response):
    session = MagicMock()
    session.closed = False
    session.request = MagicMock(return_value=response)
    return session


class TestHTTPClientSessionManagement:
    """Test HTTPClient session management."""

    def test_init(self):
        """Test HTTPClient initialization."""
        client = HTTPClient(timeout=10.0)
        assert client.timeout.total == 10.0
        assert client._session is None

    @pytest.mark.asyncio
    async def test_session_property_creates_session(self):
        """Test session property creates session when needed."""
        client = HTTPClient()
        session = client.session
        assert isinstance(session, aiohttp.ClientSession)
        assert client._session is session
        await client.close()

    @pytest.mark.asyncio
    async def test_session_property_recreates_closed_session(self):
        """Test session property recreates closed session."""
        client = HTTPClient()
        session1 = client.session
        await session1.close()

        session2 = client.session
        assert session1 is not session2
        assert not session2.closed
        await client.close()

    @pytest.mark.asyncio
    async def test_close_idempotent(self):
        """Test close() can be called multiple times."""
        client = HTTPClient()
        client.session
        await client.close()
        await client.close()

    @pytest.mark.asyncio
    async def test_context_manager(self):
        """Test HTTPClient as async context manager."""
        async with HTTPClient() as client:
            assert client.session is not None
        assert client._session.closed


class TestHTTPClientRequest:
    """Test request building and response reading."""

    @pytest.mark.parametrize(
        ("base_url", "path", "expected"),
        [
            (API, "/user", f"{API}/user"),
            (f"{API}/", "/user", f"{API}/user"),
            (API, "zones", f"{API}/zones"),
            (API, "https://other.com/x", "https://other.com/x"),
            (None, "/user", "/user"),
        ],
    )
    def test_url_for(self, base_url, path, expected):
        """Test base_url joining."""
        assert HTTPClient(base_url=base_url).url_for(path) == expected

    @pytest.mark.asyncio
    async def test_request_reads_body(self):
        """Test request() returns status, headers and full body."""
        client = HTTPClient(base_url="https://api.example.com")
        client._session = mock_session(make_response(201, b'{"ok": 1}', {"cf-ray": "abc"}))

        result = await client.request("post", "/things", headers={"X-A": "1"}, body={"k": "v"})

        assert isinstance(result, RawResponse)
        assert result.status == 201
        assert result.ok
        assert result.json() == {"ok": 1}
        assert result.headers["CF-Ray"] == "abc"

        args, kwargs = client._session.request.call_args
        assert args == ("POST", "https://api.example.com/things")
        assert kwargs["data"] == b'{"k": "v"}'
        assert kwargs["headers"]["x-a"] == "1"

    @pytest.mark.asyncio
    async def test_request_propagates_client_errors(self):
        """Test aiohttp errors are not swallowed."""
        client = HTTPClient(base_url="https://api.example.com")
        session = MagicMock()
        session.closed = False
        session.request = MagicMock(side_effect=aiohttp.ClientConnectionError("refused"))
        client._session = session

        with pytest.raises(aiohttp.ClientConnectionError):
            await client.request("GET", "/user")


class TestRawResponse:
    """Test RawResponse helpers."""

    def test_empty_body_decodes_to_none(self):
        response = RawResponse(status=200, headers=CIMultiDictProxy(CIMultiDict()), body=b"")
        assert response.json() is None

    def test_not_ok(self):
        response = RawResponse(status=404, headers=CIMultiDictProxy(CIMultiDict()), body=b"")
        assert not response.ok


def test_encode_body():
    """Test body encoding for each supported type."""
    assert encode_body(None) is None
    assert encode_body(b"raw") == b"raw"
    assert encode_body("text") == b"text"
    assert encode_body({"a": [1, 2]}) == b'{"a": [1, 2]}'
