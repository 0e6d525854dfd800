"""Client configuration and defaults.

This module centralizes the API base URL, default headers and the retry and
rate limit knobs so the client and executor can stay small and focused.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from .core.exceptions import ConfigurationError

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_USER_AGENT = "laakhay-cloudflare/0.1"
DEFAULT_CONTENT_TYPE = "application/json"

# Requests per second; the API allows 1200 requests per 5 minutes
DEFAULT_RATE_LIMIT = 4.0
DEFAULT_TIMEOUT = 30.0

DEFAULT_MAX_RETRIES = 3
DEFAULT_MIN_RETRY_DELAY = 1.0
DEFAULT_MAX_RETRY_DELAY = 30.0


@dataclass(frozen=True)
class RetryPolicy:
    """Exponential backoff policy for failed attempts.

    Attributes:
        max_retries: Retries after the first attempt (0 disables retrying)
        min_retry_delay: Delay before the first retry, in seconds
        max_retry_delay: Upper bound for any single delay, in seconds
    """

    max_retries: int = DEFAULT_MAX_RETRIES
    min_retry_delay: float = DEFAULT_MIN_RETRY_DELAY
    max_retry_delay: float = DEFAULT_MAX_RETRY_DELAY

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ConfigurationError("max_retries must be >= 0")
        if self.min_retry_delay < 0 or self.max_retry_delay < 0:
            raise ConfigurationError("retry delays must be >= 0")
        if self.max_retry_delay < self.min_retry_delay:
            raise ConfigurationError("max_retry_delay must be >= min_retry_delay")

    @classmethod
    def disabled(cls) -> RetryPolicy:
        return cls(max_retries=0, min_retry_delay=0.0, max_retry_delay=0.0)

    def backoff(self, attempt: int) -> float:
        """Delay before retry ``attempt`` (1-based)."""
        if attempt < 1:
            return 0.0
        return min(2 ** (attempt - 1) * self.min_retry_delay, self.max_retry_delay)


@dataclass(frozen=True)
class ClientConfig:
    """Immutable client settings.

    Attributes:
        base_url: API root every request path is appended to
        headers: Extra headers; these override defaults such as Content-Type
            but never the credential headers
        user_agent: Value of the default User-Agent header
        rate_limit: Maximum requests per second (None disables limiting)
        retry_policy: Backoff policy for retryable failures
        timeout: aiohttp total timeout per attempt, in seconds
    """

    base_url: str = DEFAULT_BASE_URL
    headers: Mapping[str, str] = field(default_factory=dict)
    user_agent: str = DEFAULT_USER_AGENT
    rate_limit: float | None = DEFAULT_RATE_LIMIT
    retry_policy: RetryPolicy = field(default_factory=RetryPolicy)
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.base_url:
            raise ConfigurationError("base_url must not be empty")
        if self.rate_limit is not None and self.rate_limit <= 0:
            raise ConfigurationError("rate_limit must be positive or None")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be positive")

    def default_headers(self) -> dict[str, str]:
        return {"Content-Type": DEFAULT_CONTENT_TYPE, "User-Agent": self.user_agent}
