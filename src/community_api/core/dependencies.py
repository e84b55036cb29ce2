"""FastAPI dependency injection for database sessions, auth, and access control.

Provides get_async_session, get_current_user, get_optional_user and the
require_role factory used by every admin/moderator endpoint.
"""

from collections.abc import AsyncGenerator, Callable
from typing import Annotated, Any

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.config import Settings, get_settings
from community_api.core.database import get_session_factory
from community_api.core.security import decode_token
from community_api.models.user import User

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login")
optional_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/v1/auth/login", auto_error=False)


async def get_async_session() -> AsyncGenerator[AsyncSession]:
    """Yield an async database session with per-request lifecycle."""
    factory = get_session_factory()
    async with factory() as session:
        yield session


async def _load_user(session: AsyncSession, token: str, settings: Settings) -> User | None:
    try:
        payload = decode_token(token, settings.jwt_secret_key, settings.jwt_algorithm, expected_type="access")
    except jwt.InvalidTokenError:
        return None
    username: str | None = payload.get("sub")
    if username is None:
        return None
    result = await session.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        return None
    return user


async def get_current_user(
    token: Annotated[str, Depends(oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User:
    """Decode the bearer JWT and return the authenticated user.

    Raises:
        HTTPException: 401 if the token is invalid or the user is unknown/inactive.
    """
    user = await _load_user(session, token, settings)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user


async def get_optional_user(
    token: Annotated[str | None, Depends(optional_oauth2_scheme)],
    session: Annotated[AsyncSession, Depends(get_async_session)],
    settings: Annotated[Settings, Depends(get_settings)],
) -> User | None:
    """Return the authenticated user, or None for anonymous callers.

    Public read endpoints use this to widen results for moderators
    without rejecting anonymous requests.
    """
    if token is None:
        return None
    return await _load_user(session, token, settings)


def require_role(*roles: str) -> Callable[..., Any]:
    """Factory that creates a dependency requiring specific user roles.

    Args:
        *roles: Allowed role names (e.g., "admin", "mod", "user").

    Returns:
        A FastAPI dependency function that validates the user's role.
    """

    async def role_checker(
        current_user: Annotated[User, Depends(get_current_user)],
    ) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Role '{current_user.role}' does not have access to this resource",
            )
        return current_user

    return role_checker
