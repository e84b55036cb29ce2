"""Initial schema: users, master_techs, projects, project_techs, chapters, contributors.

Revision ID: 001
Revises: None
Create Date: 2026-10-18
"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "001"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "master_techs",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("slug", sa.String(100), nullable=False),
        sa.Column("label", sa.String(100), nullable=False),
        sa.Column("img_url", sa.String(500), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_master_techs_slug", "master_techs", ["slug"], unique=True)

    op.create_table(
        "projects",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("owner_id", sa.Uuid, sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index("ix_projects_owner_id", "projects", ["owner_id"])

    op.create_table(
        "project_techs",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("project_id", sa.Uuid, sa.ForeignKey("projects.id", ondelete="CASCADE"), nullable=False),
        sa.Column("master_tech_id", sa.Uuid, sa.ForeignKey("master_techs.id"), nullable=False),
        sa.UniqueConstraint("project_id", "master_tech_id", name="uq_project_tech"),
    )
    op.create_index("ix_project_techs_master_tech_id", "project_techs", ["master_tech_id"])

    op.create_table(
        "chapters",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("slug", sa.String(200), nullable=True, unique=True),
        sa.Column("location", sa.String(200), nullable=True),
        sa.Column("meetup_url", sa.String(500), nullable=True),
        sa.Column("discord_url", sa.String(500), nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("event_count", sa.Integer, nullable=False, server_default="0"),
        *_timestamps(),
    )

    op.create_table(
        "contributors",
        sa.Column("id", sa.Uuid, primary_key=True),
        sa.Column("github_login", sa.String(100), nullable=False, unique=True),
        sa.Column("name", sa.String(200), nullable=True),
        sa.Column("img_url", sa.String(500), nullable=False),
        sa.Column("github_url", sa.String(500), nullable=False),
        sa.Column("contributions", sa.Integer, nullable=False, server_default="0"),
        sa.Column("sort_rank", sa.Integer, nullable=False, server_default="0"),
        sa.Column("show_public", sa.Boolean, nullable=False, server_default="true"),
        sa.Column("last_fetched", sa.DateTime(timezone=True), nullable=False),
    )


def downgrade() -> None:
    op.drop_table("contributors")
    op.drop_table("chapters")
    op.drop_index("ix_project_techs_master_tech_id", table_name="project_techs")
    op.drop_table("project_techs")
    op.drop_index("ix_projects_owner_id", table_name="projects")
    op.drop_table("projects")
    op.drop_index("ix_master_techs_slug", table_name="master_techs")
    op.drop_table("master_techs")
    op.drop_index("ix_users_email", table_name="users")
    op.drop_index("ix_users_username", table_name="users")
    op.drop_table("users")
