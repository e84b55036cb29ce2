"""Sequential commit of validated import records.

Records are committed strictly one after another: a tech created earlier
in the batch is already in the store when the next create runs, so
server-side slug conflicts stay meaningful mid-batch.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import replace

from loguru import logger

from community_api.lib.tech_import.session import ImportSession
from community_api.lib.tech_import.types import (
    CandidateRecord,
    ExistingTech,
    ImportInProgressError,
    RecordStatus,
    StatusCounts,
    TechCreatePayload,
)

CreateTech = Callable[[TechCreatePayload], Awaitable[object]]
LoadExisting = Callable[[], Awaitable[Sequence[ExistingTech]]]


def build_payload(record: CandidateRecord) -> TechCreatePayload:
    """Build the create arguments for ``record``; an empty slug is sent as None."""
    return TechCreatePayload(label=record.label, slug=record.slug or None, img_url=record.img_url)


class ImportOrchestrator:
    """Commits the ``valid`` records of an ImportSession through ``create``.

    Args:
        session: The session whose records are committed.
        create: Awaitable create operation. Any exception it raises is
            recorded on the record being committed.
        load_existing: Awaitable returning a fresh catalogue snapshot.
    """

    def __init__(self, session: ImportSession, create: CreateTech, load_existing: LoadExisting) -> None:
        self.session = session
        self._create = create
        self._load_existing = load_existing

    async def commit_all(self) -> StatusCounts:
        """Commit every ``valid`` record in batch order, one at a time.

        The snapshot is reloaded once after the pass. Failures are recorded
        per record and never stop the remaining records.

        Returns:
            Status counts of the session after the pass.

        Raises:
            ImportInProgressError: If a bulk commit is already running.
        """
        if self.session.is_importing:
            msg = "An import is already in progress"
            raise ImportInProgressError(msg)

        targets = [r.temp_id for r in self.session.valid_records]
        if not targets:
            logger.info("No valid records to import")
            return self.session.counts()

        self.session.is_importing = True
        try:
            for temp_id in targets:
                record = self.session.get(temp_id)
                # an edit saved mid-pass may have invalidated the record
                if record.status == RecordStatus.VALID:
                    await self._commit(record)
        finally:
            self.session.is_importing = False

        self.session.set_existing(await self._load_existing())
        counts = self.session.counts()
        logger.info(f"Tech stack import finished: {counts.success} succeeded, {counts.error} failed")
        return counts

    async def commit_one(self, temp_id: str) -> CandidateRecord:
        """Commit a single record if it is ``valid``; otherwise do nothing.

        The snapshot is reloaded only when the commit succeeds.

        Raises:
            KeyError: If the record is not in the batch.
        """
        record = self.session.get(temp_id)
        if record.status != RecordStatus.VALID:
            logger.debug(f"Skipping commit of {temp_id}: status is {record.status}")
            return record

        if await self._commit(record):
            self.session.set_existing(await self._load_existing())
        return self.session.get(temp_id)

    async def _commit(self, record: CandidateRecord) -> bool:
        self.session.set_record(replace(record, status=RecordStatus.IMPORTING))
        try:
            await self._create(build_payload(record))
        except Exception as e:
            message = str(e) or "Import failed"
            logger.warning(f"Import of tech stack {record.label!r} failed: {message}")
            self.session.set_record(replace(record, status=RecordStatus.ERROR, errors=(message,)))
            return False
        self.session.set_record(replace(record, status=RecordStatus.SUCCESS, errors=(), warnings=()))
        return True
