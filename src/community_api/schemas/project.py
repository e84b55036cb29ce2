"""Pydantic v2 schemas for past projects."""

import uuid
from datetime import datetime

from pydantic import BaseModel


class ProjectTechResponse(BaseModel):
    """A tech referenced by a project."""

    id: uuid.UUID
    slug: str
    label: str
    img_url: str


class PastProjectResponse(BaseModel):
    """A past project with the fields used to pre-fill a new one."""

    id: uuid.UUID
    name: str
    description: str | None = None
    created_at: datetime
    techs: list[ProjectTechResponse]


class PastProjectListResponse(BaseModel):
    """A member's projects, newest first."""

    items: list[PastProjectResponse]
