"""Pydantic v2 schemas for repository contributors."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class ContributorResponse(BaseModel):
    """A mirrored GitHub contributor."""

    model_config = {"from_attributes": True}

    id: uuid.UUID
    github_login: str
    name: str | None = None
    img_url: str
    github_url: str
    contributions: int
    sort_rank: int
    show_public: bool
    last_fetched: datetime


class ContributorListResponse(BaseModel):
    """Contributors ordered by rank."""

    items: list[ContributorResponse]


class ContributorVisibilityRequest(BaseModel):
    """Request to show or hide a contributor on public pages."""

    show_public: bool


class ContributorSyncResponse(BaseModel):
    """Result of a GitHub sync."""

    processed: int
