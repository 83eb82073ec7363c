from __future__ import annotations

from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


class ShareLink(BaseModel):
    id: UUID
    data: dict[str, Any]
    expires_at: datetime
    created_at: datetime

    @field_validator("expires_at", "created_at")
    def ensure_utc(cls, v: datetime) -> datetime:
        return _as_utc(v)

    def is_expired(self, now: datetime) -> bool:
        return _as_utc(now) >= self.expires_at


class ShareLinkCreated(BaseModel):
    short_link: str = Field(serialization_alias="shortLink")
    id: UUID
    expires_at: datetime


class ShareLinkView(BaseModel):
    id: UUID
    data: dict[str, Any]
    expires_at: datetime
    created_at: datetime


class ShareLinkRequest(BaseModel):
    data: dict[str, Any]

    model_config = ConfigDict(extra="ignore")
