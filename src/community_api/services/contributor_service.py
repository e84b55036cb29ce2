"""Contributor service: mirrors repository contributors from GitHub.

``sync_contributors`` upserts by GitHub login. Public listings read only
the local mirror; syncing is an explicit admin action.
"""

import uuid
from datetime import UTC, datetime

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.lib.github import GitHubClient, GitHubClientError
from community_api.models.contributor import Contributor


async def sync_contributors(session: AsyncSession, client: GitHubClient) -> int:
    """Fetch contributors from GitHub and upsert them by login.

    ``sort_rank`` is the 1-based position in GitHub's listing. A failed
    profile lookup stores ``name = None`` and the sync continues.

    Args:
        session: Database session.
        client: GitHub client bound to the platform repository.

    Returns:
        Number of contributors processed.

    Raises:
        GitHubClientError: If the contributor listing cannot be fetched.
    """
    contributors = await client.fetch_contributors()

    result = await session.execute(select(Contributor))
    by_login = {c.github_login: c for c in result.scalars().all()}
    now = datetime.now(UTC)

    for rank, item in enumerate(contributors, start=1):
        try:
            profile = await client.fetch_user_profile(item.login)
            name = profile.get("name") or None
        except GitHubClientError as e:
            logger.warning(f"Could not fetch GitHub profile for {item.login}: {e}")
            name = None

        contributor = by_login.get(item.login)
        if contributor is None:
            contributor = Contributor(github_login=item.login, show_public=True)
            session.add(contributor)
            by_login[item.login] = contributor
        contributor.name = name
        contributor.img_url = item.avatar_url
        contributor.github_url = item.html_url
        contributor.contributions = item.contributions
        contributor.sort_rank = rank
        contributor.last_fetched = now

    await session.commit()
    logger.info(f"Synced {len(contributors)} contributors from {client.repo}")
    return len(contributors)


async def list_public_contributors(session: AsyncSession) -> list[Contributor]:
    """Return contributors marked public, ordered by rank."""
    result = await session.execute(
        select(Contributor).where(Contributor.show_public.is_(True)).order_by(Contributor.sort_rank)
    )
    return list(result.scalars().all())


async def list_all_contributors(session: AsyncSession) -> list[Contributor]:
    """Return every contributor, hidden ones included, ordered by rank."""
    result = await session.execute(select(Contributor).order_by(Contributor.sort_rank))
    return list(result.scalars().all())


async def update_visibility(session: AsyncSession, contributor_id: uuid.UUID, *, show_public: bool) -> Contributor:
    """Show or hide a contributor on public pages.

    Raises:
        ValueError: If the contributor is not found.
    """
    contributor = await session.get(Contributor, contributor_id)
    if contributor is None:
        msg = f"Contributor {contributor_id} not found"
        raise ValueError(msg)
    contributor.show_public = show_public
    await session.commit()
    await session.refresh(contributor)
    logger.info(f"Set show_public={show_public} for contributor {contributor.github_login}")
    return contributor
