"""Cloudflare v4 response envelope models.

Every v4 response wraps its payload as::

    {
        "success": true,
        "errors": [{"code": 1003, "message": "..."}],
        "messages": [],
        "result": {...} | [...],
        "result_info": {"page": 1, "per_page": 20, "count": 20,
                        "total_count": 42, "total_pages": 3}
    }
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

T = TypeVar("T")


class ResponseInfo(BaseModel):
    """Single error or informational message."""

    code: int = 0
    message: str = ""

    model_config = ConfigDict(extra="ignore")


class ResultInfo(BaseModel):
    """Pagination descriptor for one page of a listing."""

    page: int = Field(0, description="1-based current page")
    per_page: int = Field(0, description="Items requested per page")
    count: int = Field(0, description="Items returned in this page")
    total: int = Field(0, alias="total_count", description="Items across all pages")
    total_pages: int = Field(0, description="Number of pages")

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class Response(BaseModel):
    """Envelope fields common to every response."""

    success: bool = False
    errors: list[ResponseInfo] = Field(default_factory=list)
    messages: list[ResponseInfo] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class Envelope(Response, Generic[T]):
    """Envelope with a typed ``result`` and optional pagination block."""

    result: T | None = None
    result_info: ResultInfo | None = None


class Page(BaseModel, Generic[T]):
    """One validated page of a listing.

    ``consistent`` is the pagination check verdict; an inconsistent page is
    still returned so the caller can decide what to do with it.
    """

    items: list[T] = Field(default_factory=list)
    result_info: ResultInfo
    consistent: bool

    @property
    def is_last(self) -> bool:
        return self.result_info.page >= self.result_info.total_pages


def parse_errors(payload: Any) -> Response:
    """Best-effort parse of the common envelope fields from an error body."""
    if not isinstance(payload, dict):
        return Response()
    try:
        return Response.model_validate(payload)
    except ValidationError:
        return Response()
