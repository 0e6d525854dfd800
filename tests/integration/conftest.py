"""Shared fixtures for live Cloudflare API tests."""

import pytest_asyncio

from laakhay.cloudflare import CloudflareAPI


@pytest_asyncio.fixture
async def api():
    """Client built from CLOUDFLARE_* environment variables."""
    async with CloudflareAPI.from_env() as client:
        yield client
