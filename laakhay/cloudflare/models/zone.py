"""Zone model."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ZoneOwner(BaseModel):
    id: str | None = None
    email: str | None = None
    type: str | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")


class ZoneAccount(BaseModel):
    id: str = ""
    name: str = ""

    model_config = ConfigDict(frozen=True, extra="ignore")


class Zone(BaseModel):
    """A DNS zone (``GET /zones/{id}``)."""

    id: str = Field(..., min_length=1)
    name: str = ""
    status: str = ""
    paused: bool = False
    type: str = ""
    development_mode: int = 0
    name_servers: list[str] = Field(default_factory=list)
    original_name_servers: list[str] | None = None
    owner: ZoneOwner | None = None
    account: ZoneAccount | None = None
    permissions: list[str] = Field(default_factory=list)
    created_on: datetime | None = None
    modified_on: datetime | None = None
    activated_on: datetime | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")
