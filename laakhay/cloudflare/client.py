"""Cloudflare v4 API client.

Architecture:
    CloudflareAPI is a thin facade over RequestExecutor. It owns the
    credentials and configuration, builds the executor and HTTP client, and
    exposes a few typed calls on top of ``make_request``.

    Credentials are read by the executor at send time, so ``set_credentials``
    takes effect on the next request. Reconfiguring while requests are in
    flight is the caller's responsibility to serialize.

Example:
    >>> async with CloudflareAPI.from_api_token("token") as api:
    ...     page = await api.list_zones(per_page=50)
    ...     if not page.consistent:
    ...         ...
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from typing import Any, TypeVar

from pydantic import ValidationError

from .config import ClientConfig
from .core.auth import (
    APIKeyAuth,
    APITokenAuth,
    AuthType,
    Credentials,
    UserServiceKeyAuth,
    credentials_from_env,
)
from .core.context import RequestContext
from .core.exceptions import ConfigurationError, TransportError
from .core.pagination import check_result_info
from .models import Envelope, Page, ResultInfo, User, Zone
from .runtime.rest import HTTPClient, RequestExecutor

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CloudflareAPI:
    """Async client for the Cloudflare v4 REST API."""

    def __init__(
        self,
        credentials: Credentials,
        *,
        config: ClientConfig | None = None,
        **options: Any,
    ) -> None:
        """Initialize client.

        Args:
            credentials: Credentials for the auth mode to use
            config: Full client configuration
            **options: ClientConfig fields, used when ``config`` is not given

        Raises:
            ConfigurationError: If credentials are missing or options are invalid
        """
        if not isinstance(credentials, Credentials):
            raise ConfigurationError("credentials are required")
        if config is not None and options:
            raise ConfigurationError("pass either config or keyword options, not both")
        try:
            self.config = config or ClientConfig(**options)
        except TypeError as e:
            raise ConfigurationError(f"invalid client option: {e}") from e

        self._credentials = credentials
        self._http = HTTPClient(base_url=self.config.base_url, timeout=self.config.timeout)
        self._executor = RequestExecutor(self._http, self.config, lambda: self._credentials)

    @classmethod
    def from_api_key(cls, key: str, email: str, **options: Any) -> CloudflareAPI:
        """Client using the global API key and account email."""
        return cls(APIKeyAuth(key, email), **options)

    @classmethod
    def from_user_service_key(cls, service_key: str, **options: Any) -> CloudflareAPI:
        """Client using an Origin CA user service key."""
        return cls(UserServiceKeyAuth(service_key), **options)

    @classmethod
    def from_api_token(cls, token: str, **options: Any) -> CloudflareAPI:
        """Client using a scoped API token."""
        return cls(APITokenAuth(token), **options)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **options: Any) -> CloudflareAPI:
        """Client with credentials taken from CLOUDFLARE_* environment variables."""
        return cls(credentials_from_env(environ), **options)

    @property
    def credentials(self) -> Credentials:
        return self._credentials

    @property
    def auth_type(self) -> AuthType:
        return self._credentials.auth_type

    def set_credentials(self, credentials: Credentials) -> None:
        """Switch auth mode; applies from the next request on."""
        if not isinstance(credentials, Credentials):
            raise ConfigurationError("credentials are required")
        logger.debug(
            "auth_mode_changed",
            extra={
                "previous": self._credentials.auth_type.value,
                "current": credentials.auth_type.value,
            },
        )
        self._credentials = credentials

    @property
    def base_url(self) -> str | None:
        return self._http.base_url

    @base_url.setter
    def base_url(self, value: str) -> None:
        self._http.base_url = value

    async def make_request(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        ctx: RequestContext | None = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Send a raw API request and return the decoded JSON body."""
        return await self._executor.execute(
            method, path, body, ctx=ctx, headers=headers, params=params
        )

    async def user_details(self, ctx: RequestContext | None = None) -> User:
        """Fetch the authenticated user."""
        payload = await self.make_request("GET", "/user", ctx=ctx)
        return self._result(payload, User, "/user")

    async def zone_details(self, zone_id: str, ctx: RequestContext | None = None) -> Zone:
        """Fetch a single zone by ID."""
        if not zone_id:
            raise ValueError("zone_id must be a non-empty string")
        path = f"/zones/{zone_id}"
        payload = await self.make_request("GET", path, ctx=ctx)
        return self._result(payload, Zone, path)

    async def list_zones(
        self,
        page: int = 1,
        per_page: int = 20,
        *,
        name: str | None = None,
        ctx: RequestContext | None = None,
    ) -> Page[Zone]:
        """Fetch one page of zones.

        The returned page is never rejected for bad pagination metadata;
        check ``page.consistent`` before relying on ``result_info``.
        """
        if page < 1 or per_page < 1:
            raise ValueError("page and per_page must be positive")
        params: dict[str, Any] = {"page": page, "per_page": per_page}
        if name:
            params["name"] = name

        payload = await self.make_request("GET", "/zones", ctx=ctx, params=params)
        envelope = self._envelope(payload, list[Zone], "/zones")
        items = envelope.result or []
        info = envelope.result_info or ResultInfo()
        consistent = check_result_info(per_page, page, len(items), info)
        if not consistent:
            logger.debug(
                "result_info_inconsistent",
                extra={
                    "path": "/zones",
                    "requested_page": page,
                    "requested_per_page": per_page,
                    "items": len(items),
                    "result_info": info.model_dump(),
                },
            )
        return Page[Zone](items=items, result_info=info, consistent=consistent)

    async def iter_zones(
        self,
        per_page: int = 50,
        *,
        name: str | None = None,
        ctx: RequestContext | None = None,
    ) -> AsyncIterator[Zone]:
        """Iterate over every zone, page by page.

        Stops early if a page's pagination metadata is inconsistent, since
        the remaining page count can no longer be trusted.
        """
        page = 1
        while True:
            result = await self.list_zones(page, per_page, name=name, ctx=ctx)
            for zone in result.items:
                yield zone
            if not result.consistent:
                logger.warning(
                    "pagination_stopped",
                    extra={"path": "/zones", "page": page, "reason": "inconsistent result_info"},
                )
                return
            if result.is_last:
                return
            page += 1

    def _envelope(self, payload: Any, result_type: Any, path: str) -> Envelope[Any]:
        try:
            return Envelope[result_type].model_validate(payload)
        except ValidationError as e:
            raise TransportError(f"{path}: unexpected response shape: {e}") from e

    def _result(self, payload: Any, result_type: type[T], path: str) -> T:
        envelope = self._envelope(payload, result_type, path)
        if envelope.result is None:
            raise TransportError(f"{path}: response has no result")
        return envelope.result

    async def close(self) -> None:
        await self._http.close()

    async def __aenter__(self) -> CloudflareAPI:
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
