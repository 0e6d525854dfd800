"""User account model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """Details of the authenticated user (``GET /user``)."""

    id: str = ""
    email: str = ""
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    telephone: str | None = None
    country: str | None = None
    zipcode: str | None = None
    two_factor_authentication_enabled: bool = False
    suspended: bool = False
    created_on: datetime | None = None
    modified_on: datetime | None = None
    betas: list[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")
