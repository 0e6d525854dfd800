"""Request execution bound to a cancellable context.

Architecture:
    RequestExecutor turns ``(method, path, body)`` into a decoded JSON result.
    Each attempt goes through the same steps:

    1. Backoff (retries only), bounded by the caller's context
    2. Rate limiter slot, bounded by the caller's context
    3. Header assembly from the credentials current at send time
    4. The HTTP round-trip, raced against the context via ``ctx.run``

    Transport errors, 429 and 5xx responses are retried according to the
    RetryPolicy. Context expiry or cancellation is never retried.

Error Mapping:
    - Context deadline      → DeadlineExceededError
    - Context cancelled     → RequestCancelledError
    - aiohttp failure       → TransportError
    - Non-2xx status        → APIError subclass chosen by status code
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from time import perf_counter
from typing import Any

import aiohttp
from multidict import CIMultiDictProxy

from ...config import ClientConfig
from ...core.auth import Credentials, build_request_headers
from ...core.context import RequestContext
from ...core.exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    CloudflareError,
    DeadlineExceededError,
    NotFoundError,
    RateLimitError,
    RequestCancelledError,
    RequestError,
    ServiceError,
    TransportError,
)
from ...models.envelope import parse_errors
from .http_client import HTTPClient, RawResponse
from .rate_limit import RateLimiter
from .telemetry import (
    log_request_aborted,
    log_request_completed,
    log_request_failed,
    log_request_sent,
    log_retry_scheduled,
)

_STATUS_ERRORS: dict[int, type[APIError]] = {
    401: AuthenticationError,
    403: AuthorizationError,
    404: NotFoundError,
    429: RateLimitError,
}


def _is_retryable(status: int) -> bool:
    return status == 429 or status >= 500


def _parse_retry_after(headers: CIMultiDictProxy[str] | Mapping[str, str]) -> float | None:
    value = headers.get("Retry-After")
    if value is None:
        return None
    try:
        seconds = float(value)
    except ValueError:
        return None
    return seconds if seconds > 0 else None


def error_for_status(status: int) -> type[APIError]:
    """Pick the APIError subclass for a non-2xx status."""
    if status in _STATUS_ERRORS:
        return _STATUS_ERRORS[status]
    if status >= 500:
        return ServiceError
    return RequestError


class RequestExecutor:
    """Executes API requests with retries, rate limiting and context binding."""

    def __init__(
        self,
        http: HTTPClient,
        config: ClientConfig,
        credentials: Callable[[], Credentials],
    ) -> None:
        """Initialize executor.

        Args:
            http: HTTP client owning the aiohttp session
            config: Client configuration (retry policy, rate limit, headers)
            credentials: Returns the credentials to use; called once per attempt
        """
        self._http = http
        self._config = config
        self._credentials = credentials
        self._limiter = RateLimiter(config.rate_limit)

    async def execute(
        self,
        method: str,
        path: str,
        body: Any = None,
        *,
        ctx: RequestContext | None = None,
        headers: Mapping[str, str] | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> Any:
        """Execute a request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path relative to the configured base URL
            body: JSON-serializable body, or raw bytes/str
            ctx: Context bounding the whole call, backoff included
            headers: Per-call custom headers (override config headers)
            params: Query string parameters

        Raises:
            DeadlineExceededError: Context deadline elapsed
            RequestCancelledError: Context was cancelled
            TransportError: Network failure or undecodable success body
            APIError: Remote error status (see module docstring)
        """
        ctx = ctx or RequestContext.background()
        method = method.upper()
        policy = self._config.retry_policy
        custom = {**self._config.headers, **(headers or {})}

        response: RawResponse | None = None
        transport_error: Exception | None = None
        retry_after: float | None = None

        for attempt in range(policy.max_retries + 1):
            if attempt > 0:
                delay = self._retry_delay(attempt, retry_after)
                reason = (
                    f"HTTP {response.status}"
                    if response is not None
                    else type(transport_error).__name__
                )
                log_retry_scheduled(
                    method=method, path=path, attempt=attempt, delay=delay, reason=reason
                )
                await self._bounded(ctx.sleep(delay), method, path, "backoff")

            await self._bounded(self._limiter.wait(ctx), method, path, "rate_limit")

            credentials = self._credentials()
            request_headers = build_request_headers(
                credentials, self._config.default_headers(), custom
            )
            log_request_sent(
                method=method, path=path, attempt=attempt, auth_type=credentials.auth_type.value
            )

            start = perf_counter()
            try:
                response = await self._bounded(
                    ctx.run(
                        self._http.request(
                            method, path, headers=request_headers, body=body, params=params
                        )
                    ),
                    method,
                    path,
                    "request",
                )
            except CloudflareError:
                raise
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                response = None
                transport_error = e
                retry_after = None
                continue

            log_request_completed(
                method=method,
                path=path,
                status=response.status,
                attempt=attempt,
                latency_ms=(perf_counter() - start) * 1000.0,
            )
            if not _is_retryable(response.status):
                break
            retry_after = _parse_retry_after(response.headers)

        if response is None:
            log_request_failed(
                method=method,
                path=path,
                error_type=type(transport_error).__name__,
                error_message=str(transport_error),
            )
            raise TransportError(
                f"{method} {path} failed: {transport_error or 'no response'}"
            ) from transport_error

        return self._handle_response(method, path, response)

    async def _bounded(self, awaitable: Any, method: str, path: str, stage: str) -> Any:
        try:
            return await awaitable
        except (DeadlineExceededError, RequestCancelledError) as e:
            log_request_aborted(method=method, path=path, reason=f"{stage}: {e}")
            raise

    def _retry_delay(self, attempt: int, retry_after: float | None) -> float:
        policy = self._config.retry_policy
        delay = policy.backoff(attempt)
        if retry_after is not None:
            delay = max(delay, min(retry_after, policy.max_retry_delay))
        return delay

    def _handle_response(self, method: str, path: str, response: RawResponse) -> Any:
        if response.ok:
            try:
                return response.json()
            except ValueError as e:
                raise TransportError(f"{method} {path}: invalid JSON in response body") from e

        try:
            payload = response.json()
        except ValueError:
            payload = None
        envelope = parse_errors(payload)

        detail = "; ".join(f"{e.message} ({e.code})" for e in envelope.errors)
        message = f"HTTP status {response.status}"
        if detail:
            message = f"{message}: {detail}"

        error_cls = error_for_status(response.status)
        kwargs: dict[str, Any] = {
            "status_code": response.status,
            "errors": envelope.errors,
            "messages": envelope.messages,
            "ray_id": response.headers.get("cf-ray"),
        }
        log_request_failed(
            method=method,
            path=path,
            status=response.status,
            error_type=error_cls.__name__,
            error_message=message,
        )
        if error_cls is RateLimitError:
            raise RateLimitError(
                message, retry_after=_parse_retry_after(response.headers), **kwargs
            )
        raise error_cls(message, **kwargs)
