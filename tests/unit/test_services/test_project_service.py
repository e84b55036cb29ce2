"""Tests for the past project lookup."""

import uuid
from datetime import UTC, datetime

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.models.master_tech import MasterTech
from community_api.models.project import Project, ProjectTech
from community_api.models.user import User
from community_api.services.project_service import list_past_projects


def _user(name: str) -> User:
    return User(username=name, email=f"{name}@example.com", hashed_password="x", role="user")


class TestListPastProjects:
    @pytest.mark.asyncio
    async def test_newest_first_with_techs(self, async_session: AsyncSession) -> None:
        owner = _user("owner")
        other = _user("other")
        react = MasterTech(slug="react", label="React", img_url="https://react.dev/logo.svg")
        async_session.add_all([owner, other, react])
        await async_session.flush()

        older = Project(name="Voyage 1", owner_id=owner.id, created_at=datetime(2024, 1, 1, tzinfo=UTC))
        newer = Project(name="Voyage 2", owner_id=owner.id, created_at=datetime(2024, 6, 1, tzinfo=UTC))
        foreign = Project(name="Not mine", owner_id=other.id, created_at=datetime(2024, 3, 1, tzinfo=UTC))
        newer.techs.append(ProjectTech(master_tech=react))
        async_session.add_all([older, newer, foreign])
        await async_session.commit()

        projects = await list_past_projects(async_session, owner.id)

        assert [p.name for p in projects] == ["Voyage 2", "Voyage 1"]
        assert [t.master_tech.slug for t in projects[0].techs] == ["react"]
        assert projects[1].techs == []

    @pytest.mark.asyncio
    async def test_unknown_owner(self, async_session: AsyncSession) -> None:
        assert await list_past_projects(async_session, uuid.uuid4()) == []
