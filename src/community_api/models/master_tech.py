"""MasterTech model: the catalogue of tech-stack tags projects can reference.

Rows are created by admins one at a time or through the bulk import
pipeline. A tech that any project references cannot be deleted.
"""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from community_api.models.base import Base, TimestampMixin, UUIDMixin


class MasterTech(Base, UUIDMixin, TimestampMixin):
    """A tech-stack tag.

    Attributes:
        slug: URL-safe identifier (e.g., "next-js"). Unique, lower-case.
        label: Display name (e.g., "Next.js").
        img_url: Absolute http(s) URL of the logo image.
    """

    __tablename__ = "master_techs"

    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    label: Mapped[str] = mapped_column(String(100), nullable=False)
    img_url: Mapped[str] = mapped_column(String(500), nullable=False)
