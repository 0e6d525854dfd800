"""Integration tests against the live Cloudflare API.

Credentials come from CLOUDFLARE_* environment variables.
"""

import os

import pytest

from laakhay.cloudflare import APIError, CloudflareAPI, RequestContext

pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_LAAKHAY_NETWORK_TESTS") != "1",
    reason="Requires network access and CLOUDFLARE_* credentials",
)


class TestLiveAPI:
    """Test read-only calls against the real service."""

    @pytest.mark.asyncio
    async def test_user_details(self, api):
        """Test the authenticated user can be fetched."""
        with RequestContext.with_timeout(30) as ctx:
            user = await api.user_details(ctx=ctx)
        assert user.id

    @pytest.mark.asyncio
    async def test_zone_pages_are_consistent(self, api):
        """Test the service's own pagination metadata passes validation."""
        page = await api.list_zones(per_page=5, ctx=RequestContext.with_timeout(30))
        assert page.consistent

    @pytest.mark.asyncio
    async def test_bad_token_rejected(self):
        """Test an invalid token maps to an APIError subclass."""
        async with CloudflareAPI.from_api_token("invalid-token") as api:
            with pytest.raises(APIError):
                await api.user_details(ctx=RequestContext.with_timeout(30))
