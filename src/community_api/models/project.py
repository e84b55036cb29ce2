"""Project and ProjectTech models.

A project belongs to one owner and references any number of catalogue
techs through the ``project_techs`` link table.
"""

import uuid
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, UniqueConstraint, Uuid, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from community_api.models.base import Base, UUIDMixin

if TYPE_CHECKING:
    from community_api.models.master_tech import MasterTech


class Project(Base, UUIDMixin):
    """A member project.

    Attributes:
        name: Project name.
        description: Free-text description.
        owner_id: FK to users.
    """

    __tablename__ = "projects"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    owner_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    techs: Mapped[list["ProjectTech"]] = relationship(
        back_populates="project",
        lazy="selectin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_projects_owner_id", "owner_id"),)


class ProjectTech(Base, UUIDMixin):
    """Link between a project and a catalogue tech."""

    __tablename__ = "project_techs"

    project_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
    )
    master_tech_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("master_techs.id"),
        nullable=False,
    )

    project: Mapped[Project] = relationship(back_populates="techs")
    master_tech: Mapped["MasterTech"] = relationship(lazy="selectin")

    __table_args__ = (
        UniqueConstraint("project_id", "master_tech_id", name="uq_project_tech"),
        Index("ix_project_techs_master_tech_id", "master_tech_id"),
    )
