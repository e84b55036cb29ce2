"""Authentication and member management service.

Handles login, token issuance and refresh, member creation and role changes.
"""

import uuid
from datetime import UTC, datetime

import jwt
from loguru import logger
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.config import Settings
from community_api.core.logging import audit_logger
from community_api.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_password,
    verify_password,
)
from community_api.models.user import ROLES, User
from community_api.schemas.auth import TokenResponse, UserCreateRequest


async def authenticate_user(session: AsyncSession, username: str, password: str) -> User | None:
    """Authenticate a member by username and password.

    Args:
        session: The database session.
        username: The username to authenticate.
        password: The plaintext password.

    Returns:
        The User if authentication succeeds, None otherwise.
    """
    result = await session.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active or not verify_password(password, user.hashed_password):
        return None
    user.last_login_at = datetime.now(UTC)
    await session.commit()
    return user


async def create_user(session: AsyncSession, request: UserCreateRequest) -> User:
    """Create a new member account.

    Raises:
        ValueError: If the username or email already exists.
    """
    existing = await session.execute(
        select(User).where((User.username == request.username) | (User.email == request.email))
    )
    if existing.scalar_one_or_none() is not None:
        msg = "Username or email already exists"
        raise ValueError(msg)

    user = User(
        username=request.username,
        email=request.email,
        hashed_password=hash_password(request.password),
        role=request.role,
    )
    session.add(user)
    await session.commit()
    await session.refresh(user)
    logger.info(f"Created user {user.username} with role {user.role}")
    return user


async def list_users(session: AsyncSession, page: int = 1, page_size: int = 20) -> tuple[list[User], int]:
    """List members ordered by creation time.

    Args:
        session: The database session.
        page: Page number (1-based).
        page_size: Items per page.

    Returns:
        Tuple of (users list, total count).
    """
    total = (await session.execute(select(func.count(User.id)))).scalar_one()

    offset = (page - 1) * page_size
    result = await session.execute(select(User).order_by(User.created_at).offset(offset).limit(page_size))
    return list(result.scalars().all()), total


async def get_user(session: AsyncSession, user_id: uuid.UUID) -> User | None:
    """Get a member by ID, or None."""
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def update_role(session: AsyncSession, user_id: uuid.UUID, role: str) -> User:
    """Change a member's role.

    Args:
        session: The database session.
        user_id: The member to update.
        role: One of ``user``, ``mod``, ``admin``.

    Returns:
        The updated User.

    Raises:
        ValueError: If the role is unknown or the member is not found.
    """
    if role not in ROLES:
        msg = f"Invalid role '{role}'"
        raise ValueError(msg)

    user = await get_user(session, user_id)
    if user is None:
        msg = f"User {user_id} not found"
        raise ValueError(msg)

    previous = user.role
    user.role = role
    await session.commit()
    await session.refresh(user)
    audit_logger.info(f"Changed role of user {user.username} from {previous} to {role}")
    return user


def generate_tokens(user: User, settings: Settings) -> TokenResponse:
    """Generate access and refresh tokens for a member."""
    access_token = create_access_token(
        subject=user.username,
        role=user.role,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_minutes=settings.jwt_access_token_expire_minutes,
    )
    refresh_token = create_refresh_token(
        subject=user.username,
        secret_key=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_days=settings.jwt_refresh_token_expire_days,
    )
    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        expires_in=settings.jwt_access_token_expire_minutes * 60,
    )


async def refresh_access_token(
    session: AsyncSession,
    refresh_token_str: str,
    settings: Settings,
) -> TokenResponse:
    """Issue a new token pair from a refresh token.

    Raises:
        ValueError: If the refresh token is invalid or the member is unknown/inactive.
    """
    try:
        payload = decode_token(
            refresh_token_str,
            settings.jwt_secret_key,
            settings.jwt_algorithm,
            expected_type="refresh",
        )
    except jwt.InvalidTokenError as e:
        msg = "Invalid refresh token"
        raise ValueError(msg) from e

    username = payload.get("sub")
    if username is None:
        msg = "Invalid token payload"
        raise ValueError(msg)

    result = await session.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        msg = "User not found or inactive"
        raise ValueError(msg)

    return generate_tokens(user, settings)
