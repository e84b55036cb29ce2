"""Chapter API endpoints.

Listing and lookup are public; anonymous callers and plain members only
see active chapters. Writes require the admin role.
"""

import uuid
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.dependencies import get_async_session, get_optional_user, require_role
from community_api.models.chapter import Chapter
from community_api.models.user import ROLE_ADMIN, ROLE_MOD, User
from community_api.schemas.chapter import (
    ChapterCreateRequest,
    ChapterListResponse,
    ChapterResponse,
    ChapterUpdateRequest,
)
from community_api.services import chapter_service

chapters_router = APIRouter(prefix="/chapters", tags=["chapters"])


def _is_moderator(user: User | None) -> bool:
    return user is not None and user.role in (ROLE_ADMIN, ROLE_MOD)


def _visible_or_404(chapter: Chapter, user: User | None) -> ChapterResponse:
    if not chapter.is_active and not _is_moderator(user):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Chapter not found")
    return ChapterResponse.model_validate(chapter)


@chapters_router.get("")
async def list_chapters_endpoint(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    user: Annotated[User | None, Depends(get_optional_user)],
    include_inactive: Annotated[bool, Query()] = False,
) -> ChapterListResponse:
    """List chapters ordered by name. ``include_inactive`` is honored for admins and moderators only."""
    try:
        chapters = await chapter_service.list_chapters(
            session,
            include_inactive=include_inactive and _is_moderator(user),
        )
    except Exception as e:
        logger.error(f"Unexpected error listing chapters: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error listing chapters.",
        ) from e
    return ChapterListResponse(items=[ChapterResponse.model_validate(c) for c in chapters])


@chapters_router.get("/slug/{slug}")
async def get_chapter_by_slug_endpoint(
    slug: str,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    user: Annotated[User | None, Depends(get_optional_user)],
) -> ChapterResponse:
    """Get a chapter by slug."""
    try:
        chapter = await chapter_service.get_chapter_by_slug(session, slug)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return _visible_or_404(chapter, user)


@chapters_router.post("", status_code=status.HTTP_201_CREATED)
async def create_chapter_endpoint(
    body: ChapterCreateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> ChapterResponse:
    """Create a chapter (admin only)."""
    try:
        chapter = await chapter_service.create_chapter(
            session,
            name=body.name,
            slug=body.slug,
            location=body.location,
            meetup_url=str(body.meetup_url) if body.meetup_url is not None else None,
            discord_url=str(body.discord_url) if body.discord_url is not None else None,
            is_active=body.is_active,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error creating chapter: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error creating chapter.",
        ) from e
    logger.info(f"Admin {current_user.username} created chapter {chapter.id}")
    return ChapterResponse.model_validate(chapter)


@chapters_router.get("/{chapter_id}")
async def get_chapter_endpoint(
    chapter_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    user: Annotated[User | None, Depends(get_optional_user)],
) -> ChapterResponse:
    """Get a chapter by id."""
    try:
        chapter = await chapter_service.get_chapter(session, chapter_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    return _visible_or_404(chapter, user)


@chapters_router.patch("/{chapter_id}")
async def update_chapter_endpoint(
    chapter_id: uuid.UUID,
    body: ChapterUpdateRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> ChapterResponse:
    """Update a chapter (admin only). Only provided fields change."""
    updates = body.model_dump(exclude_unset=True)
    for url_field in ("meetup_url", "discord_url"):
        if updates.get(url_field) is not None:
            updates[url_field] = str(updates[url_field])
    try:
        chapter = await chapter_service.update_chapter(session, chapter_id, data=updates)
    except ValueError as e:
        error_msg = str(e)
        if "not found" in error_msg:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error_msg) from e
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error_msg) from e
    except Exception as e:
        logger.error(f"Unexpected error updating chapter {chapter_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error updating chapter.",
        ) from e
    logger.info(f"Admin {current_user.username} updated chapter {chapter.id}")
    return ChapterResponse.model_validate(chapter)


@chapters_router.delete("/{chapter_id}")
async def delete_chapter_endpoint(
    chapter_id: uuid.UUID,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> ChapterResponse:
    """Deactivate a chapter (admin only). Returns the deactivated chapter."""
    try:
        chapter = await chapter_service.delete_chapter(session, chapter_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    except Exception as e:
        logger.error(f"Unexpected error deleting chapter {chapter_id}: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error deleting chapter.",
        ) from e
    logger.info(f"Admin {current_user.username} deactivated chapter {chapter_id}")
    return ChapterResponse.model_validate(chapter)
