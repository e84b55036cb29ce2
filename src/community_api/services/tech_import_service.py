"""Tech stack bulk import service.

Binds the import pipeline to the database: the catalogue snapshot is read
from ``master_techs`` and valid records are committed through
``tech_service.create_tech``, one at a time.
"""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from community_api.core.logging import audit_logger
from community_api.lib.tech_import import (
    CandidateRecord,
    ExistingTech,
    ImportOrchestrator,
    ImportSession,
    TechCreatePayload,
)
from community_api.models.master_tech import MasterTech
from community_api.services import tech_service


async def load_existing(session: AsyncSession) -> list[ExistingTech]:
    """Snapshot the committed catalogue for duplicate detection."""
    result = await session.execute(select(MasterTech.label, MasterTech.slug).order_by(MasterTech.label))
    return [ExistingTech(label=label, slug=slug) for label, slug in result.all()]


async def preview_import(session: AsyncSession, *, filename: str, content: str) -> ImportSession:
    """Parse and validate an import file without writing anything.

    Raises:
        ImportParseError: If the file cannot be decoded.
    """
    import_session = ImportSession(await load_existing(session))
    import_session.load_file(filename, content)
    return import_session


async def commit_import(session: AsyncSession, records: Iterable[CandidateRecord]) -> ImportSession:
    """Re-validate reviewed records against a fresh snapshot and commit the valid ones.

    Per-record failures are captured on the records; nothing here raises
    for a failed create. A failure leaves the session and the objects
    already loaded through it usable.
    """
    import_session = ImportSession(await load_existing(session))
    import_session.load_records(records)

    async def create(payload: TechCreatePayload) -> MasterTech:
        return await tech_service.create_tech(
            session,
            label=payload.label,
            slug=payload.slug,
            img_url=payload.img_url,
        )

    async def reload() -> list[ExistingTech]:
        return await load_existing(session)

    counts = await ImportOrchestrator(import_session, create, reload).commit_all()
    audit_logger.info(
        f"Committed tech stack import: {counts.success} created, {counts.error} failed, "
        f"{counts.invalid + counts.duplicate} skipped"
    )
    return import_session
