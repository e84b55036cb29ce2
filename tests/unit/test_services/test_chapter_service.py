"""Tests for the chapter service against an in-memory database."""

import uuid

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.services import chapter_service


class TestChapterSlug:
    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Berlin", "berlin"),
            ("New  York City", "new-york-city"),
            ("  São Paulo ", "são-paulo"),
            ("Tab\tSeparated", "tab-separated"),
        ],
    )
    def test_whitespace_runs_become_hyphens(self, name: str, expected: str) -> None:
        assert chapter_service.chapter_slug(name) == expected


class TestCreateChapter:
    @pytest.mark.asyncio
    async def test_defaults(self, async_session: AsyncSession) -> None:
        chapter = await chapter_service.create_chapter(async_session, name="New York City", location="NYC")

        assert chapter.slug == "new-york-city"
        assert chapter.is_active is True
        assert chapter.event_count == 0

    @pytest.mark.asyncio
    async def test_explicit_slug_is_normalized(self, async_session: AsyncSession) -> None:
        chapter = await chapter_service.create_chapter(async_session, name="NYC", slug="Big Apple")
        assert chapter.slug == "big-apple"

    @pytest.mark.asyncio
    async def test_duplicate_slug(self, async_session: AsyncSession) -> None:
        await chapter_service.create_chapter(async_session, name="Berlin")
        with pytest.raises(ValueError, match="already exists"):
            await chapter_service.create_chapter(async_session, name="berlin")


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list_hides_inactive_by_default(self, async_session: AsyncSession) -> None:
        await chapter_service.create_chapter(async_session, name="Zurich")
        await chapter_service.create_chapter(async_session, name="Amsterdam")
        await chapter_service.create_chapter(async_session, name="Lagos", is_active=False)

        active = await chapter_service.list_chapters(async_session)
        everything = await chapter_service.list_chapters(async_session, include_inactive=True)

        assert [c.name for c in active] == ["Amsterdam", "Zurich"]
        assert [c.name for c in everything] == ["Amsterdam", "Lagos", "Zurich"]

    @pytest.mark.asyncio
    async def test_get_by_slug(self, async_session: AsyncSession) -> None:
        created = await chapter_service.create_chapter(async_session, name="Cape Town")
        assert (await chapter_service.get_chapter_by_slug(async_session, "cape-town")).id == created.id

    @pytest.mark.asyncio
    async def test_not_found(self, async_session: AsyncSession) -> None:
        with pytest.raises(ValueError, match="not found"):
            await chapter_service.get_chapter(async_session, uuid.uuid4())
        with pytest.raises(ValueError, match="not found"):
            await chapter_service.get_chapter_by_slug(async_session, "atlantis")


class TestUpdateAndDelete:
    @pytest.mark.asyncio
    async def test_partial_update(self, async_session: AsyncSession) -> None:
        chapter = await chapter_service.create_chapter(async_session, name="Paris", location="France")
        updated = await chapter_service.update_chapter(
            async_session,
            chapter.id,
            data={"slug": "Paris  Est", "discord_url": "https://discord.gg/paris", "id": uuid.uuid4()},
        )

        assert updated.slug == "paris-est"
        assert updated.discord_url == "https://discord.gg/paris"
        assert updated.location == "France"
        assert updated.id == chapter.id

    @pytest.mark.asyncio
    async def test_update_to_taken_slug(self, async_session: AsyncSession) -> None:
        await chapter_service.create_chapter(async_session, name="Oslo")
        other = await chapter_service.create_chapter(async_session, name="Bergen")
        with pytest.raises(ValueError, match="Chapter with slug 'oslo' already exists"):
            await chapter_service.update_chapter(async_session, other.id, data={"slug": "Oslo"})

    @pytest.mark.asyncio
    async def test_delete_is_soft(self, async_session: AsyncSession) -> None:
        chapter = await chapter_service.create_chapter(async_session, name="Lima")
        await chapter_service.delete_chapter(async_session, chapter.id)

        fetched = await chapter_service.get_chapter(async_session, chapter.id)
        assert fetched.is_active is False
        assert await chapter_service.list_chapters(async_session) == []
