"""Response and resource models."""

from .envelope import Envelope, Page, Response, ResponseInfo, ResultInfo, parse_errors
from .user import User
from .zone import Zone, ZoneAccount, ZoneOwner

__all__ = [
    "Envelope",
    "Page",
    "Response",
    "ResponseInfo",
    "ResultInfo",
    "parse_errors",
    "User",
    "Zone",
    "ZoneAccount",
    "ZoneOwner",
]
