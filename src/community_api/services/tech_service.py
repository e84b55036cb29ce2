"""Tech stack catalogue service: CRUD with slug and usage rules."""

import uuid

from loguru import logger
from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.logging import audit_logger
from community_api.lib.tech_import import generate_slug, require_url
from community_api.models.master_tech import MasterTech
from community_api.models.project import ProjectTech

SLUG_CONFLICT = "A tech stack with this slug already exists"


def _usage_counts():
    return (
        select(ProjectTech.master_tech_id, func.count(func.distinct(ProjectTech.project_id)).label("usage_count"))
        .group_by(ProjectTech.master_tech_id)
        .subquery()
    )


async def list_techs(session: AsyncSession, search: str | None = None) -> list[tuple[MasterTech, int]]:
    """Return every tech ordered by label, paired with its usage count.

    Args:
        session: Database session.
        search: Optional case-insensitive substring matched against label or slug.

    Returns:
        List of (tech, number of projects using it) tuples.
    """
    usage = _usage_counts()
    query = select(MasterTech, func.coalesce(usage.c.usage_count, 0)).outerjoin(
        usage, usage.c.master_tech_id == MasterTech.id
    )
    if search and search.strip():
        pattern = f"%{search.strip().lower()}%"
        query = query.where(or_(func.lower(MasterTech.label).like(pattern), MasterTech.slug.like(pattern)))
    result = await session.execute(query.order_by(MasterTech.label))
    rows = [(tech, int(count)) for tech, count in result.all()]
    logger.info(f"Listed {len(rows)} tech stacks")
    return rows


async def get_tech(session: AsyncSession, tech_id: uuid.UUID) -> MasterTech:
    """Return one tech.

    Raises:
        ValueError: If no tech has ``tech_id``.
    """
    tech = await session.get(MasterTech, tech_id)
    if tech is None:
        msg = f"Tech stack {tech_id} not found"
        raise ValueError(msg)
    return tech


async def get_tech_by_slug(session: AsyncSession, slug: str) -> MasterTech:
    """Return the tech owning ``slug``.

    Raises:
        ValueError: If no tech has that slug.
    """
    result = await session.execute(select(MasterTech).where(MasterTech.slug == slug.lower()))
    tech = result.scalar_one_or_none()
    if tech is None:
        msg = f"Tech stack with slug '{slug}' not found"
        raise ValueError(msg)
    return tech


async def get_usage_count(session: AsyncSession, tech_id: uuid.UUID) -> int:
    """Number of distinct projects referencing the tech."""
    result = await session.execute(
        select(func.count(func.distinct(ProjectTech.project_id))).where(ProjectTech.master_tech_id == tech_id)
    )
    return result.scalar_one()


async def create_tech(
    session: AsyncSession,
    *,
    label: str,
    img_url: str,
    slug: str | None = None,
) -> MasterTech:
    """Create a catalogue tech.

    An explicit slug is lower-cased; otherwise it is generated from the
    label. ``img_url`` is normalized to an absolute URL.

    Raises:
        ValueError: If the slug is taken, cannot be derived, or the image
            URL is invalid.
    """
    label = label.strip()
    resolved_slug = _resolve_slug(label, slug)
    normalized_url = require_url(img_url)
    await _ensure_slug_available(session, resolved_slug)

    tech = MasterTech(label=label, slug=resolved_slug, img_url=normalized_url)
    try:
        async with session.begin_nested():
            session.add(tech)
    except IntegrityError:
        raise ValueError(SLUG_CONFLICT) from None
    await session.commit()
    await session.refresh(tech)
    logger.info(f"Created tech stack {tech.id} ({label}, slug={resolved_slug})")
    return tech


async def update_tech(session: AsyncSession, tech_id: uuid.UUID, *, data: dict) -> MasterTech:
    """Partially update a tech.

    A supplied slug is lower-cased, or regenerated from the label when
    blank. Changing only the label regenerates the slug.

    Raises:
        ValueError: If the tech is not found, or the new slug belongs to
            another tech.
    """
    tech = await get_tech(session, tech_id)

    label = data.get("label")
    if label is not None:
        tech.label = label.strip()
    if data.get("img_url") is not None:
        tech.img_url = require_url(data["img_url"])

    new_slug: str | None = None
    if "slug" in data and data["slug"] is not None:
        new_slug = _resolve_slug(tech.label, data["slug"])
    elif label is not None:
        new_slug = _resolve_slug(tech.label, None)
    if new_slug is not None and new_slug != tech.slug:
        await _ensure_slug_available(session, new_slug, exclude_id=tech.id)
        tech.slug = new_slug

    try:
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise ValueError(SLUG_CONFLICT) from None
    await session.refresh(tech)
    logger.info(f"Updated tech stack {tech.id}")
    return tech


async def delete_tech(session: AsyncSession, tech_id: uuid.UUID) -> None:
    """Delete a tech that no project uses.

    Raises:
        ValueError: If the tech is not found or still in use.
    """
    tech = await get_tech(session, tech_id)
    usage = await get_usage_count(session, tech_id)
    if usage > 0:
        msg = f"Cannot delete tech stack. It is used in {usage} project(s)."
        raise ValueError(msg)

    slug = tech.slug
    await session.delete(tech)
    await session.commit()
    audit_logger.info(f"Deleted tech stack {tech_id} ({slug})")


def _resolve_slug(label: str, slug: str | None) -> str:
    resolved = slug.strip().lower() if slug and slug.strip() else generate_slug(label)
    if not resolved:
        msg = "Slug cannot be generated from this label"
        raise ValueError(msg)
    return resolved


async def _ensure_slug_available(
    session: AsyncSession,
    slug: str,
    exclude_id: uuid.UUID | None = None,
) -> None:
    query = select(MasterTech.id).where(MasterTech.slug == slug)
    if exclude_id is not None:
        query = query.where(MasterTech.id != exclude_id)
    if (await session.execute(query)).scalar_one_or_none() is not None:
        raise ValueError(SLUG_CONFLICT)
