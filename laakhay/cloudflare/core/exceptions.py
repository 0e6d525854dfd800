"""Custom exception hierarchy."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.envelope import ResponseInfo


class CloudflareError(Exception):
    """Base exception for all library errors."""

    pass


class ConfigurationError(CloudflareError):
    """Client configuration is invalid or incomplete.

    Raised at construction time, e.g. when the selected auth mode is
    missing one of its credential values.
    """

    pass


class DeadlineExceededError(CloudflareError, TimeoutError):
    """Request context deadline elapsed before the call completed."""

    def __init__(self, message: str = "context deadline exceeded") -> None:
        super().__init__(message)


class RequestCancelledError(CloudflareError):
    """Request context was cancelled before the call completed."""

    def __init__(self, message: str = "context cancelled") -> None:
        super().__init__(message)


class TransportError(CloudflareError):
    """Network-level failure or an unreadable response body."""

    pass


class APIError(CloudflareError):
    """Error status reported by the Cloudflare API.

    Carries the HTTP status together with the error and message entries of
    the response envelope.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[ResponseInfo] | None = None,
        messages: list[ResponseInfo] | None = None,
        ray_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.errors = errors or []
        self.messages = messages or []
        self.ray_id = ray_id

    @property
    def error_codes(self) -> list[int]:
        return [e.code for e in self.errors]

    @property
    def error_messages(self) -> list[str]:
        return [e.message for e in self.errors]


class AuthenticationError(APIError):
    """HTTP 401: credentials were not accepted."""

    pass


class AuthorizationError(APIError):
    """HTTP 403: credentials lack permission for the resource."""

    pass


class NotFoundError(APIError):
    """HTTP 404."""

    pass


class RateLimitError(APIError):
    """HTTP 429 after retries were exhausted."""

    def __init__(self, message: str, retry_after: float | None = None, **kwargs) -> None:
        kwargs.setdefault("status_code", 429)
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class ServiceError(APIError):
    """HTTP 5xx after retries were exhausted."""

    pass


class RequestError(APIError):
    """Any other 4xx status."""

    pass
