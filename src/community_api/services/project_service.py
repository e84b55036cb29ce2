"""Past project lookup used to pre-fill new projects."""

import uuid

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.models.project import Project


async def list_past_projects(session: AsyncSession, owner_id: uuid.UUID) -> list[Project]:
    """Return a member's projects, newest first, with their techs loaded.

    Args:
        session: Database session.
        owner_id: The member whose projects are listed.
    """
    result = await session.execute(
        select(Project).where(Project.owner_id == owner_id).order_by(Project.created_at.desc())
    )
    projects = list(result.scalars().all())
    logger.info(f"Listed {len(projects)} past projects for user {owner_id}")
    return projects
