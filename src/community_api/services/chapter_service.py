"""Chapter service: listing, CRUD and soft delete."""

import re
import uuid

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.models.chapter import Chapter

_UPDATABLE_FIELDS: frozenset[str] = frozenset(
    {"name", "slug", "location", "meetup_url", "discord_url", "is_active"}
)
_WHITESPACE_RUN = re.compile(r"\s+")


def chapter_slug(value: str) -> str:
    """Lower-case ``value`` and replace whitespace runs with hyphens.

    >>> chapter_slug("New  York City")
    'new-york-city'
    """
    return _WHITESPACE_RUN.sub("-", value.strip().lower())


async def list_chapters(session: AsyncSession, *, include_inactive: bool = False) -> list[Chapter]:
    """Return chapters ordered by name.

    Args:
        session: Database session.
        include_inactive: Include deactivated chapters.
    """
    query = select(Chapter).order_by(Chapter.name)
    if not include_inactive:
        query = query.where(Chapter.is_active.is_(True))
    result = await session.execute(query)
    chapters = list(result.scalars().all())
    logger.info(f"Listed {len(chapters)} chapters (include_inactive={include_inactive})")
    return chapters


async def get_chapter(session: AsyncSession, chapter_id: uuid.UUID) -> Chapter:
    """Return one chapter.

    Raises:
        ValueError: If the chapter is not found.
    """
    chapter = await session.get(Chapter, chapter_id)
    if chapter is None:
        msg = f"Chapter {chapter_id} not found"
        raise ValueError(msg)
    return chapter


async def get_chapter_by_slug(session: AsyncSession, slug: str) -> Chapter:
    """Return the chapter owning ``slug``.

    Raises:
        ValueError: If no chapter has that slug.
    """
    result = await session.execute(select(Chapter).where(Chapter.slug == slug))
    chapter = result.scalar_one_or_none()
    if chapter is None:
        msg = f"Chapter with slug '{slug}' not found"
        raise ValueError(msg)
    return chapter


async def create_chapter(
    session: AsyncSession,
    *,
    name: str,
    slug: str | None = None,
    location: str | None = None,
    meetup_url: str | None = None,
    discord_url: str | None = None,
    is_active: bool = True,
) -> Chapter:
    """Create a chapter. The slug defaults to one derived from ``name``.

    Raises:
        ValueError: If the slug is already taken.
    """
    resolved_slug = chapter_slug(slug) if slug and slug.strip() else chapter_slug(name)
    chapter = Chapter(
        name=name.strip(),
        slug=resolved_slug,
        location=location,
        meetup_url=meetup_url,
        discord_url=discord_url,
        is_active=is_active,
    )
    session.add(chapter)
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        msg = f"Chapter with slug '{resolved_slug}' already exists"
        raise ValueError(msg) from None
    await session.refresh(chapter)
    logger.info(f"Created chapter {chapter.id} ({chapter.name}, slug={resolved_slug})")
    return chapter


async def update_chapter(session: AsyncSession, chapter_id: uuid.UUID, *, data: dict) -> Chapter:
    """Partially update a chapter; a supplied slug is normalized like a new one.

    Raises:
        ValueError: If the chapter is not found or the slug is taken.
    """
    chapter = await get_chapter(session, chapter_id)

    for field_name, value in data.items():
        if field_name not in _UPDATABLE_FIELDS:
            continue
        if field_name == "slug" and value is not None:
            value = chapter_slug(value) or None
        setattr(chapter, field_name, value)

    slug = chapter.slug
    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        msg = f"Chapter with slug '{slug}' already exists"
        raise ValueError(msg) from None
    await session.refresh(chapter)
    logger.info(f"Updated chapter {chapter.id}")
    return chapter


async def delete_chapter(session: AsyncSession, chapter_id: uuid.UUID) -> Chapter:
    """Soft-delete a chapter by deactivating it.

    Raises:
        ValueError: If the chapter is not found.
    """
    chapter = await get_chapter(session, chapter_id)
    chapter.is_active = False
    await session.commit()
    await session.refresh(chapter)
    logger.info(f"Deactivated chapter {chapter.id}")
    return chapter
