"""Past project API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.dependencies import get_async_session, get_current_user
from community_api.models.project import Project
from community_api.models.user import ROLE_ADMIN, User
from community_api.schemas.project import PastProjectListResponse, PastProjectResponse, ProjectTechResponse
from community_api.services import project_service

projects_router = APIRouter(prefix="/projects", tags=["projects"])


def _to_response(project: Project) -> PastProjectResponse:
    return PastProjectResponse(
        id=project.id,
        name=project.name,
        description=project.description,
        created_at=project.created_at,
        techs=[
            ProjectTechResponse(
                id=link.master_tech.id,
                slug=link.master_tech.slug,
                label=link.master_tech.label,
                img_url=link.master_tech.img_url,
            )
            for link in project.techs
        ],
    )


@projects_router.get("/past")
async def list_past_projects_endpoint(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(get_current_user)],
    user_id: Annotated[uuid.UUID | None, Query()] = None,
) -> PastProjectListResponse:
    """List a member's past projects, newest first.

    Defaults to the caller's own projects. Only admins may read another
    member's projects.
    """
    owner_id = user_id or current_user.id
    if owner_id != current_user.id and current_user.role != ROLE_ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not allowed to read another user's projects",
        )
    try:
        projects = await project_service.list_past_projects(session, owner_id)
    except Exception as e:
        logger.error(f"Unexpected error listing past projects for {owner_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error listing past projects.",
        ) from e
    return PastProjectListResponse(items=[_to_response(p) for p in projects])
