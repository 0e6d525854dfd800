"""Credential schemes and authentication header selection.

Architecture:
    Each auth mode is its own frozen credential class holding exactly the
    values that mode needs. Header building is a method on the credential,
    so selection is a plain method call on whatever credential the client
    currently holds.

Design Decisions:
    - Frozen dataclasses: credentials are replaced, never mutated
    - Validation in __post_init__: a missing value fails at construction
    - Disjoint header sets: every mode knows only its own header names

Headers:
    - APIKeyAuth:          X-Auth-Email, X-Auth-Key
    - UserServiceKeyAuth:  X-Auth-User-Service-Key
    - APITokenAuth:        Authorization: Bearer <token>
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from multidict import CIMultiDict

from .exceptions import ConfigurationError

HEADER_AUTH_EMAIL = "X-Auth-Email"
HEADER_AUTH_KEY = "X-Auth-Key"
HEADER_USER_SERVICE_KEY = "X-Auth-User-Service-Key"
HEADER_AUTHORIZATION = "Authorization"

# Every header name owned by some auth mode
CREDENTIAL_HEADERS = frozenset(
    {HEADER_AUTH_EMAIL, HEADER_AUTH_KEY, HEADER_USER_SERVICE_KEY, HEADER_AUTHORIZATION}
)
_CREDENTIAL_HEADERS_LOWER = frozenset(h.lower() for h in CREDENTIAL_HEADERS)

ENV_API_TOKEN = "CLOUDFLARE_API_TOKEN"
ENV_API_KEY = "CLOUDFLARE_API_KEY"
ENV_API_EMAIL = "CLOUDFLARE_EMAIL"
ENV_USER_SERVICE_KEY = "CLOUDFLARE_API_USER_SERVICE_KEY"


class AuthType(str, Enum):
    """Authentication scheme used for outgoing requests."""

    KEY_EMAIL = "key_email"
    USER_SERVICE = "user_service"
    TOKEN = "token"


def _require(value: str | None, name: str, mode: AuthType) -> None:
    if not value or not value.strip():
        raise ConfigurationError(f"{name} is required for {mode.value} authentication")


class Credentials(ABC):
    """Base class for a single auth mode's credential values."""

    auth_type: AuthType

    @abstractmethod
    def headers(self) -> dict[str, str]:
        """Return the credential headers this mode sends."""


@dataclass(frozen=True)
class APIKeyAuth(Credentials):
    """Global API key plus account email (the default mode)."""

    key: str = field(repr=False)
    email: str
    auth_type: AuthType = field(default=AuthType.KEY_EMAIL, init=False)

    def __post_init__(self) -> None:
        _require(self.key, "API key", self.auth_type)
        _require(self.email, "API email", self.auth_type)

    def headers(self) -> dict[str, str]:
        return {HEADER_AUTH_EMAIL: self.email, HEADER_AUTH_KEY: self.key}


@dataclass(frozen=True)
class UserServiceKeyAuth(Credentials):
    """Origin CA user service key."""

    service_key: str = field(repr=False)
    auth_type: AuthType = field(default=AuthType.USER_SERVICE, init=False)

    def __post_init__(self) -> None:
        _require(self.service_key, "User service key", self.auth_type)

    def headers(self) -> dict[str, str]:
        return {HEADER_USER_SERVICE_KEY: self.service_key}


@dataclass(frozen=True)
class APITokenAuth(Credentials):
    """Scoped API token sent as a bearer token."""

    token: str = field(repr=False)
    auth_type: AuthType = field(default=AuthType.TOKEN, init=False)

    def __post_init__(self) -> None:
        _require(self.token, "API token", self.auth_type)

    def headers(self) -> dict[str, str]:
        return {HEADER_AUTHORIZATION: f"Bearer {self.token}"}


def build_request_headers(
    credentials: Credentials,
    defaults: Mapping[str, str] | None = None,
    custom: Mapping[str, str] | None = None,
) -> CIMultiDict[str]:
    """Assemble outgoing headers for one request.

    Precedence, lowest first: defaults, caller custom headers, credential
    headers. Custom headers naming any credential header are dropped so
    headers of inactive auth modes are never sent.
    """
    headers: CIMultiDict[str] = CIMultiDict(defaults or {})
    for name, value in (custom or {}).items():
        if name.lower() in _CREDENTIAL_HEADERS_LOWER:
            continue
        headers[name] = value
    for name, value in credentials.headers().items():
        headers[name] = value
    return headers


def credentials_from_env(environ: Mapping[str, str] | None = None) -> Credentials:
    """Load credentials from environment variables.

    Precedence: API token, then key + email, then user service key.

    Raises:
        ConfigurationError: If no complete set of credentials is present
    """
    env = os.environ if environ is None else environ

    if env.get(ENV_API_TOKEN):
        return APITokenAuth(env[ENV_API_TOKEN])
    if env.get(ENV_API_KEY) or env.get(ENV_API_EMAIL):
        return APIKeyAuth(env.get(ENV_API_KEY, ""), env.get(ENV_API_EMAIL, ""))
    if env.get(ENV_USER_SERVICE_KEY):
        return UserServiceKeyAuth(env[ENV_USER_SERVICE_KEY])

    raise ConfigurationError(
        f"No credentials found; set {ENV_API_TOKEN}, {ENV_API_KEY} and {ENV_API_EMAIL}, "
        f"or {ENV_USER_SERVICE_KEY}"
    )
