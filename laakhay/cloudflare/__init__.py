"""Laakhay Cloudflare - Async client for the Cloudflare v4 REST API."""

from .client import CloudflareAPI
from .config import (
    DEFAULT_BASE_URL,
    ClientConfig,
    RetryPolicy,
)
from .core import (
    APIError,
    APIKeyAuth,
    APITokenAuth,
    AuthenticationError,
    AuthorizationError,
    AuthType,
    CloudflareError,
    ConfigurationError,
    Credentials,
    DeadlineExceededError,
    NotFoundError,
    RateLimitError,
    RequestCancelledError,
    RequestContext,
    RequestError,
    ServiceError,
    TransportError,
    UserServiceKeyAuth,
    check_result_info,
    credentials_from_env,
)
from .models import Envelope, Page, Response, ResponseInfo, ResultInfo, User, Zone

__version__ = "0.1.0"

__all__ = [
    # Client
    "CloudflareAPI",
    "ClientConfig",
    "RetryPolicy",
    "DEFAULT_BASE_URL",
    # Auth
    "AuthType",
    "Credentials",
    "APIKeyAuth",
    "APITokenAuth",
    "UserServiceKeyAuth",
    "credentials_from_env",
    # Context and pagination
    "RequestContext",
    "check_result_info",
    # Models
    "Envelope",
    "Page",
    "Response",
    "ResponseInfo",
    "ResultInfo",
    "User",
    "Zone",
    # Exceptions
    "CloudflareError",
    "ConfigurationError",
    "DeadlineExceededError",
    "RequestCancelledError",
    "TransportError",
    "APIError",
    "AuthenticationError",
    "AuthorizationError",
    "NotFoundError",
    "RateLimitError",
    "ServiceError",
    "RequestError",
]
