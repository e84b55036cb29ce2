"""Pydantic v2 schemas for chapter operations."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, HttpUrl


class ChapterResponse(BaseModel):
    """A community chapter."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    name: str
    slug: str | None = None
    location: str | None = None
    meetup_url: str | None = None
    discord_url: str | None = None
    is_active: bool
    event_count: int = 0
    created_at: datetime
    updated_at: datetime


class ChapterCreateRequest(BaseModel):
    """Request body for creating a chapter. The slug defaults to one derived from the name."""

    name: str = Field(min_length=1, max_length=200)
    slug: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    meetup_url: HttpUrl | None = None
    discord_url: HttpUrl | None = None
    is_active: bool = True


class ChapterUpdateRequest(BaseModel):
    """Request body for a partial chapter update."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    slug: str | None = Field(default=None, max_length=200)
    location: str | None = Field(default=None, max_length=200)
    meetup_url: HttpUrl | None = None
    discord_url: HttpUrl | None = None
    is_active: bool | None = None


class ChapterListResponse(BaseModel):
    """Chapters ordered by name."""

    items: list[ChapterResponse]
