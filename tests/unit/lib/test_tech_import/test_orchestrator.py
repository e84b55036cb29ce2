"""Unit tests for the sequential import orchestrator."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from community_api.lib.tech_import.orchestrator import ImportOrchestrator, build_payload
from community_api.lib.tech_import.session import ImportSession
from community_api.lib.tech_import.types import (
    CandidateRecord,
    ExistingTech,
    ImportInProgressError,
    RecordStatus,
    TechCreatePayload,
)


def _session(*records: CandidateRecord, existing=()) -> ImportSession:
    session = ImportSession(existing)
    session.load_records(records)
    return session


def _rec(temp_id: str, label: str, slug: str = "", img_url: str = "example.com/logo.png") -> CandidateRecord:
    return CandidateRecord(temp_id=temp_id, label=label, slug=slug, img_url=img_url)


class TestBuildPayload:
    def test_empty_slug_is_unset(self) -> None:
        assert build_payload(_rec("a", "React")) == TechCreatePayload(
            label="React", slug=None, img_url="example.com/logo.png"
        )

    def test_explicit_slug_is_kept(self) -> None:
        assert build_payload(_rec("a", "React", slug="reactjs")).slug == "reactjs"


class TestCommitAll:
    @pytest.mark.asyncio
    async def test_failure_does_not_stop_the_batch(self) -> None:
        session = _session(_rec("a", "Alpha"), _rec("b", "Beta"))
        calls: list[str] = []

        async def create(payload: TechCreatePayload) -> None:
            calls.append(payload.label)
            if payload.label == "Alpha":
                msg = "A tech stack with this slug already exists"
                raise ValueError(msg)

        load_existing = AsyncMock(return_value=[ExistingTech(label="Beta", slug="beta")])
        counts = await ImportOrchestrator(session, create, load_existing).commit_all()

        assert calls == ["Alpha", "Beta"]
        assert session.get("a").status == RecordStatus.ERROR
        assert session.get("a").errors == ("A tech stack with this slug already exists",)
        assert session.get("b").status == RecordStatus.SUCCESS
        assert counts.success == 1
        assert counts.error == 1
        load_existing.assert_awaited_once()
        assert session.existing == (ExistingTech(label="Beta", slug="beta"),)

    @pytest.mark.asyncio
    async def test_commits_are_sequential(self) -> None:
        session = _session(*(_rec(str(i), f"Tech {i}") for i in range(5)))
        in_flight = 0
        max_in_flight = 0
        order: list[str] = []

        async def create(payload: TechCreatePayload) -> None:
            nonlocal in_flight, max_in_flight
            in_flight += 1
            max_in_flight = max(max_in_flight, in_flight)
            await asyncio.sleep(0)
            order.append(payload.label)
            in_flight -= 1

        await ImportOrchestrator(session, create, AsyncMock(return_value=[])).commit_all()

        assert max_in_flight == 1
        assert order == [f"Tech {i}" for i in range(5)]

    @pytest.mark.asyncio
    async def test_only_valid_records_are_committed(self) -> None:
        session = _session(
            _rec("ok", "Go"),
            _rec("bad", "", img_url=""),
            _rec("dup", "React"),
            existing=[ExistingTech(label="React", slug="react")],
        )
        create = AsyncMock()
        await ImportOrchestrator(session, create, AsyncMock(return_value=[])).commit_all()

        create.assert_awaited_once_with(TechCreatePayload(label="Go", slug=None, img_url="example.com/logo.png"))
        assert session.get("bad").status == RecordStatus.INVALID
        assert session.get("dup").status == RecordStatus.DUPLICATE

    @pytest.mark.asyncio
    async def test_success_clears_warnings(self) -> None:
        session = _session(_rec("a", "React", slug="react-2"), existing=[ExistingTech(label="React", slug="react")])
        assert session.get("a").warnings

        await ImportOrchestrator(session, AsyncMock(), AsyncMock(return_value=[])).commit_all()

        record = session.get("a")
        assert record.status == RecordStatus.SUCCESS
        assert record.warnings == ()
        assert record.errors == ()

    @pytest.mark.asyncio
    async def test_records_show_importing_during_create(self) -> None:
        session = _session(_rec("a", "Alpha"))
        seen: list[RecordStatus] = []

        async def create(payload: TechCreatePayload) -> None:
            seen.append(session.get("a").status)

        await ImportOrchestrator(session, create, AsyncMock(return_value=[])).commit_all()
        assert seen == [RecordStatus.IMPORTING]
        assert not session.is_importing

    @pytest.mark.asyncio
    async def test_empty_exception_message(self) -> None:
        session = _session(_rec("a", "Alpha"))
        await ImportOrchestrator(session, AsyncMock(side_effect=RuntimeError()), AsyncMock(return_value=[])).commit_all()
        assert session.get("a").errors == ("Import failed",)

    @pytest.mark.asyncio
    async def test_nothing_valid_skips_refresh(self) -> None:
        session = _session(_rec("a", "", img_url=""))
        load_existing = AsyncMock(return_value=[])
        counts = await ImportOrchestrator(session, AsyncMock(), load_existing).commit_all()
        assert counts.invalid == 1
        load_existing.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reentry_is_refused(self) -> None:
        session = _session(_rec("a", "Alpha"))
        session.is_importing = True
        with pytest.raises(ImportInProgressError):
            await ImportOrchestrator(session, AsyncMock(), AsyncMock()).commit_all()

    @pytest.mark.asyncio
    async def test_close_refused_mid_commit(self) -> None:
        session = _session(_rec("a", "Alpha"))
        refused: list[bool] = []

        async def create(payload: TechCreatePayload) -> None:
            try:
                session.close()
            except ImportInProgressError:
                refused.append(True)

        await ImportOrchestrator(session, create, AsyncMock(return_value=[])).commit_all()
        assert refused == [True]
        assert session.get("a").status == RecordStatus.SUCCESS

    @pytest.mark.asyncio
    async def test_edit_mid_pass_invalidating_a_record_skips_it(self) -> None:
        session = _session(_rec("a", "Alpha"), _rec("b", "Beta"))

        async def create(payload: TechCreatePayload) -> None:
            if payload.label == "Alpha":
                session.edit("b", label="Beta", slug="", img_url="")

        create_mock = AsyncMock(side_effect=create)
        await ImportOrchestrator(session, create_mock, AsyncMock(return_value=[])).commit_all()

        assert create_mock.await_count == 1
        assert session.get("b").status == RecordStatus.INVALID


class TestCommitOne:
    @pytest.mark.asyncio
    async def test_success_refreshes_snapshot(self) -> None:
        session = _session(_rec("a", "Alpha"))
        load_existing = AsyncMock(return_value=[ExistingTech(label="Alpha", slug="alpha")])

        record = await ImportOrchestrator(session, AsyncMock(), load_existing).commit_one("a")

        assert record.status == RecordStatus.SUCCESS
        load_existing.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_does_not_refresh(self) -> None:
        session = _session(_rec("a", "Alpha"))
        load_existing = AsyncMock(return_value=[])
        create = AsyncMock(side_effect=ValueError("Must be a valid URL or domain name"))

        record = await ImportOrchestrator(session, create, load_existing).commit_one("a")

        assert record.status == RecordStatus.ERROR
        assert record.errors == ("Must be a valid URL or domain name",)
        load_existing.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_non_valid_record_is_a_noop(self) -> None:
        session = _session(_rec("a", "", img_url=""))
        create = AsyncMock()

        record = await ImportOrchestrator(session, create, AsyncMock()).commit_one("a")

        assert record.status == RecordStatus.INVALID
        create.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_failed_record_can_be_fixed_and_recommitted(self) -> None:
        session = _session(_rec("a", "Alpha"))
        create = AsyncMock(side_effect=[ValueError("conflict"), None])
        orchestrator = ImportOrchestrator(session, create, AsyncMock(return_value=[]))

        assert (await orchestrator.commit_one("a")).status == RecordStatus.ERROR
        session.edit("a", label="Alpha", slug="alpha-2", img_url="example.com/logo.png")
        assert session.get("a").status == RecordStatus.VALID
        assert (await orchestrator.commit_one("a")).status == RecordStatus.SUCCESS
