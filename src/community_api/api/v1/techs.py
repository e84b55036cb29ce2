"""Tech stack catalogue API endpoints."""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.dependencies import get_async_session, require_role
from community_api.models.master_tech import MasterTech
from community_api.models.user import User
from community_api.schemas.tech import TechCreateRequest, TechListResponse, TechResponse, TechUpdateRequest
from community_api.services import tech_service

techs_router = APIRouter(prefix="/techs", tags=["techs"])

_ANY_ROLE = ("user", "mod", "admin")


def _to_response(tech: MasterTech, usage_count: int) -> TechResponse:
    return TechResponse.model_validate(tech).model_copy(update={"usage_count": usage_count})


def _http_error(e: ValueError) -> HTTPException:
    error_msg = str(e)
    if "not found" in error_msg:
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_msg)
    if "already exists" in error_msg or error_msg.startswith("Cannot delete"):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error_msg)
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error_msg)


@techs_router.get("")
async def list_techs_endpoint(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*_ANY_ROLE))],
    search: Annotated[str | None, Query(max_length=100)] = None,
) -> TechListResponse:
    """List catalogue techs ordered by label, with usage counts."""
    try:
        rows = await tech_service.list_techs(session, search=search)
    except Exception as e:
        logger.error(f"Unexpected error listing tech stacks: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error listing tech stacks.",
        ) from e
    return TechListResponse(items=[_to_response(t, n) for t, n in rows], total=len(rows))


@techs_router.get("/slug/{slug}")
async def get_tech_by_slug_endpoint(
    slug: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*_ANY_ROLE))],
) -> TechResponse:
    """Get a tech by slug."""
    try:
        tech = await tech_service.get_tech_by_slug(session, slug)
    except ValueError as e:
        raise _http_error(e) from e
    return _to_response(tech, await tech_service.get_usage_count(session, tech.id))


@techs_router.post("", status_code=status.HTTP_201_CREATED)
async def create_tech_endpoint(
    body: TechCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> TechResponse:
    """Create a tech stack (admin only)."""
    try:
        tech = await tech_service.create_tech(session, label=body.label, slug=body.slug, img_url=body.img_url)
    except ValueError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error creating tech stack: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error creating tech stack.",
        ) from e
    logger.info(f"Admin {current_user.username} created tech stack {tech.slug}")
    return _to_response(tech, 0)


@techs_router.get("/{tech_id}")
async def get_tech_endpoint(
    tech_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    _user: Annotated[User, Depends(require_role(*_ANY_ROLE))],
) -> TechResponse:
    """Get a tech by id."""
    try:
        tech = await tech_service.get_tech(session, tech_id)
    except ValueError as e:
        raise _http_error(e) from e
    return _to_response(tech, await tech_service.get_usage_count(session, tech.id))


@techs_router.patch("/{tech_id}")
async def update_tech_endpoint(
    tech_id: uuid.UUID,
    body: TechUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> TechResponse:
    """Update a tech stack (admin only). Only provided fields change."""
    try:
        tech = await tech_service.update_tech(session, tech_id, data=body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error updating tech stack {tech_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error updating tech stack.",
        ) from e
    logger.info(f"Admin {current_user.username} updated tech stack {tech.id}")
    return _to_response(tech, await tech_service.get_usage_count(session, tech.id))


@techs_router.delete("/{tech_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_tech_endpoint(
    tech_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> None:
    """Delete a tech stack (admin only). Refused while any project uses it."""
    try:
        await tech_service.delete_tech(session, tech_id)
    except ValueError as e:
        raise _http_error(e) from e
    except Exception as e:
        logger.error(f"Unexpected error deleting tech stack {tech_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error deleting tech stack.",
        ) from e
    logger.info(f"Admin {current_user.username} deleted tech stack {tech_id}")
