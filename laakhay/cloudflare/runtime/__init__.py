"""Runtime layer: HTTP transport and request execution."""

from .rest import HTTPClient, RateLimiter, RawResponse, RequestExecutor

__all__ = ["HTTPClient", "RateLimiter", "RawResponse", "RequestExecutor"]
