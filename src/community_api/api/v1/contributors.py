"""Repository contributor API endpoints."""

import uuid
from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.config import Settings, get_settings
from community_api.core.dependencies import get_async_session, get_optional_user, require_role
from community_api.lib.github import GitHubClient, GitHubClientError
from community_api.models.user import ROLE_ADMIN, ROLE_MOD, User
from community_api.schemas.contributor import (
    ContributorListResponse,
    ContributorResponse,
    ContributorSyncResponse,
    ContributorVisibilityRequest,
)
from community_api.services import contributor_service

contributors_router = APIRouter(prefix="/contributors", tags=["contributors"])


async def get_github_client(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AsyncGenerator[GitHubClient]:
    """Yield a GitHub client for the configured repository, closed after the request."""
    client = GitHubClient(settings.github_repo, token=settings.github_token, timeout=settings.github_timeout)
    try:
        yield client
    finally:
        await client.close()


@contributors_router.get("")
async def list_contributors_endpoint(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    user: Annotated[User | None, Depends(get_optional_user)],
    include_hidden: Annotated[bool, Query()] = False,
) -> ContributorListResponse:
    """List public contributors by rank. Admins and moderators may include hidden ones."""
    show_all = include_hidden and user is not None and user.role in (ROLE_ADMIN, ROLE_MOD)
    try:
        if show_all:
            contributors = await contributor_service.list_all_contributors(session)
        else:
            contributors = await contributor_service.list_public_contributors(session)
    except Exception as e:
        logger.error(f"Unexpected error listing contributors: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error listing contributors.",
        ) from e
    return ContributorListResponse(items=[ContributorResponse.model_validate(c) for c in contributors])


@contributors_router.post("/sync")
async def sync_contributors_endpoint(
    session: Annotated[AsyncSession, Depends(get_async_session)],
    client: Annotated[GitHubClient, Depends(get_github_client)],
    current_user: Annotated[User, Depends(require_role("admin"))],
) -> ContributorSyncResponse:
    """Refresh the contributor mirror from GitHub (admin only)."""
    try:
        processed = await contributor_service.sync_contributors(session, client)
    except GitHubClientError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=e.message) from e
    except Exception as e:
        logger.error(f"Unexpected error syncing contributors: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error syncing contributors.",
        ) from e
    logger.info(f"Admin {current_user.username} synced {processed} contributors")
    return ContributorSyncResponse(processed=processed)


@contributors_router.patch("/{contributor_id}/visibility")
async def update_visibility_endpoint(
    contributor_id: uuid.UUID,
    body: ContributorVisibilityRequest,
    session: Annotated[AsyncSession, Depends(get_async_session)],
    current_user: Annotated[User, Depends(require_role("admin", "mod"))],
) -> ContributorResponse:
    """Show or hide a contributor (admin or moderator)."""
    try:
        contributor = await contributor_service.update_visibility(
            session,
            contributor_id,
            show_public=body.show_public,
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e)) from e
    logger.info(f"{current_user.username} set contributor {contributor.github_login} show_public={body.show_public}")
    return ContributorResponse.model_validate(contributor)
