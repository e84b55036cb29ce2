"""Pydantic v2 schemas for the tech stack catalogue."""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from community_api.lib.tech_import.urls import require_url


class TechCreateRequest(BaseModel):
    """Request body for creating a tech stack.

    ``img_url`` may be a bare domain; ``https://`` is prepended when no
    scheme is given.
    """

    label: str = Field(min_length=1, max_length=100)
    slug: str | None = Field(default=None, max_length=100)
    img_url: str = Field(min_length=1, max_length=500)

    @field_validator("label")
    @classmethod
    def strip_label(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            msg = "Label is required"
            raise ValueError(msg)
        return stripped

    @field_validator("img_url")
    @classmethod
    def normalize_img_url(cls, v: str) -> str:
        return require_url(v)


class TechUpdateRequest(BaseModel):
    """Request body for a partial tech stack update."""

    label: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(default=None, max_length=100)
    img_url: str | None = Field(default=None, max_length=500)

    @field_validator("img_url")
    @classmethod
    def normalize_img_url(cls, v: str | None) -> str | None:
        return None if v is None else require_url(v)


class TechResponse(BaseModel):
    """A catalogue tech with its project usage count."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    slug: str
    label: str
    img_url: str
    usage_count: int = 0
    created_at: datetime
    updated_at: datetime


class TechListResponse(BaseModel):
    """All catalogue techs."""

    items: list[TechResponse]
    total: int
