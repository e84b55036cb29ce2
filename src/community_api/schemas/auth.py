"""Authentication and member Pydantic v2 schemas.

Defines request/response schemas for login, token refresh, and member
role management.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from community_api.schemas.common import PaginationMeta

ROLE_PATTERN = "^(user|mod|admin)$"


class LoginRequest(BaseModel):
    """Login request with username and password."""

    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=8)


class RefreshRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str


class TokenResponse(BaseModel):
    """JWT token pair response."""

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token expiration in seconds")


class UserCreateRequest(BaseModel):
    """Request to create a new member account."""

    username: str = Field(min_length=3, max_length=100)
    email: EmailStr
    password: str = Field(min_length=8)
    role: str = Field(default="user", pattern=ROLE_PATTERN)


class UserRoleUpdateRequest(BaseModel):
    """Request to change a member's role."""

    role: str = Field(pattern=ROLE_PATTERN)


class UserResponse(BaseModel):
    """Member information response."""

    id: UUID
    username: str
    email: str
    role: str
    is_active: bool
    created_at: datetime
    last_login_at: datetime | None = None

    model_config = {"from_attributes": True}


class PaginatedUserResponse(BaseModel):
    """Paginated list of members."""

    items: list[UserResponse]
    pagination: PaginationMeta
