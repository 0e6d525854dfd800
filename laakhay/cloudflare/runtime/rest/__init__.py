"""REST runtime abstractions."""

from .executor import RequestExecutor, error_for_status
from .http_client import HTTPClient, RawResponse
from .rate_limit import RateLimiter

__all__ = [
    "HTTPClient",
    "RawResponse",
    "RateLimiter",
    "RequestExecutor",
    "error_for_status",
]
