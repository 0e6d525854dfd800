"""Core components."""

from .auth import (
    APIKeyAuth,
    APITokenAuth,
    AuthType,
    Credentials,
    UserServiceKeyAuth,
    build_request_headers,
    credentials_from_env,
)
from .context import RequestContext
from .exceptions import (
    APIError,
    AuthenticationError,
    AuthorizationError,
    CloudflareError,
    ConfigurationError,
    DeadlineExceededError,
    NotFoundError,
    RateLimitError,
    RequestCancelledError,
    RequestError,
    ServiceError,
    TransportError,
)
from .pagination import check_result_info

__all__ = [
    "AuthType",
    "Credentials",
    "APIKeyAuth",
    "APITokenAuth",
    "UserServiceKeyAuth",
    "build_request_headers",
    "credentials_from_env",
    "RequestContext",
    "check_result_info",
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
