"""Chapter model: a local community group. Deleting a chapter deactivates it."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from community_api.models.base import Base, TimestampMixin, UUIDMixin


class Chapter(Base, UUIDMixin, TimestampMixin):
    """A community chapter.

    Attributes:
        name: Display name.
        slug: URL-safe identifier, unique when set.
        location: Free-text city/region.
        meetup_url: Meetup group URL.
        discord_url: Discord invite URL.
        is_active: Inactive chapters are hidden from public listings.
        event_count: Number of events held (maintained by the events feature).
    """

    __tablename__ = "chapters"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(200), nullable=True, unique=True)
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    meetup_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    discord_url: Mapped[str | None] = mapped_column(String(500), nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    event_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")
