"""Contributor model: GitHub contributors mirrored from the platform repository."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from community_api.models.base import Base, UUIDMixin


class Contributor(Base, UUIDMixin):
    """A repository contributor, upserted by ``github_login``."""

    __tablename__ = "contributors"

    github_login: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    img_url: Mapped[str] = mapped_column(String(500), nullable=False)
    github_url: Mapped[str] = mapped_column(String(500), nullable=False)
    contributions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sort_rank: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    show_public: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True, server_default="true")
    last_fetched: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
