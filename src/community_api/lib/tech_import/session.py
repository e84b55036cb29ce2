"""ImportSession: the batch under review plus the catalogue snapshot.

All mutations replace the record list wholesale. Edits and removals
re-validate the whole batch because duplicate detection is relative to
the other records.
"""

from collections.abc import Iterable
from dataclasses import replace

from loguru import logger

from community_api.lib.tech_import.parser import parse_import_file
from community_api.lib.tech_import.types import (
    CandidateRecord,
    ExistingTech,
    ImportInProgressError,
    RecordStatus,
    StatusCounts,
)
from community_api.lib.tech_import.validator import revalidate_batch

# Statuses that represent work the user would lose by discarding the session.
_UNSAVED_STATUSES = frozenset({RecordStatus.VALID, RecordStatus.INVALID, RecordStatus.DUPLICATE})


class ImportSession:
    """Holds one import batch from upload to commit.

    While a bulk commit runs, loading, removing, clearing and closing are
    refused with ImportInProgressError. Editing a record that is not being
    committed is the one mutation still allowed.

    Args:
        existing: Snapshot of committed techs taken when the session opens.
    """

    def __init__(self, existing: Iterable[ExistingTech] = ()) -> None:
        self._existing: tuple[ExistingTech, ...] = tuple(existing)
        self._records: tuple[CandidateRecord, ...] = ()
        self.is_importing = False

    @property
    def records(self) -> tuple[CandidateRecord, ...]:
        return self._records

    @property
    def existing(self) -> tuple[ExistingTech, ...]:
        return self._existing

    def get(self, temp_id: str) -> CandidateRecord:
        """Return the record with ``temp_id``.

        Raises:
            KeyError: If no such record is in the batch.
        """
        for record in self._records:
            if record.temp_id == temp_id:
                return record
        raise KeyError(temp_id)

    # ------------------------------------------------------------------
    # Batch transitions
    # ------------------------------------------------------------------

    def load_file(self, filename: str, content: str) -> tuple[CandidateRecord, ...]:
        """Replace the batch with the records decoded from an import file.

        Raises:
            ImportParseError: If the file cannot be decoded. The current
                batch is left untouched.
        """
        self._guard()
        self._records = tuple(parse_import_file(filename, content, self._existing))
        return self._records

    def load_records(self, records: Iterable[CandidateRecord]) -> tuple[CandidateRecord, ...]:
        """Replace the batch with already-decoded records and validate them."""
        self._guard()
        pending = [replace(r, status=RecordStatus.PENDING, errors=(), warnings=()) for r in records]
        self._records = tuple(revalidate_batch(pending, self._existing))
        return self._records

    def edit(self, temp_id: str, *, label: str, slug: str, img_url: str) -> CandidateRecord:
        """Save an edit to one record and re-validate the batch.

        A record in ``error`` re-enters the validation cycle. Committed
        records cannot be edited.

        Raises:
            KeyError: If the record is not in the batch.
            ValueError: If the record was already committed or is mid-commit.
        """
        current = self.get(temp_id)
        if current.status in (RecordStatus.SUCCESS, RecordStatus.IMPORTING):
            msg = f"Record {temp_id} is {current.status} and cannot be edited"
            raise ValueError(msg)
        edited = replace(current, label=label, slug=slug, img_url=img_url, status=RecordStatus.PENDING)
        self._replace_all(tuple(edited if r.temp_id == temp_id else r for r in self._records))
        return self.get(temp_id)

    def remove(self, temp_id: str) -> None:
        """Drop one record and re-validate the rest.

        Raises:
            KeyError: If the record is not in the batch.
        """
        self._guard()
        self.get(temp_id)
        self._replace_all(tuple(r for r in self._records if r.temp_id != temp_id))

    def refresh(self, existing: Iterable[ExistingTech] | None = None) -> tuple[CandidateRecord, ...]:
        """Re-validate on request, optionally against a new snapshot.

        Failed commits are restored to a validation-derived status here.
        """
        if existing is not None:
            self._existing = tuple(existing)
        self._replace_all(self._records)
        return self._records

    def set_existing(self, existing: Iterable[ExistingTech]) -> None:
        """Install a reloaded snapshot without re-validating."""
        self._existing = tuple(existing)

    def set_record(self, record: CandidateRecord) -> None:
        """Replace one record in place, used by the orchestrator for commit states."""
        self.get(record.temp_id)
        self._records = tuple(record if r.temp_id == record.temp_id else r for r in self._records)

    def clear(self) -> None:
        """Discard the batch.

        Raises:
            ImportInProgressError: While a bulk commit is running.
        """
        self._guard()
        self._records = ()

    def close(self) -> None:
        """Discard the session; refused while a bulk commit is running."""
        self.clear()
        logger.debug("Import session closed")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def valid_records(self) -> tuple[CandidateRecord, ...]:
        return tuple(r for r in self._records if r.status == RecordStatus.VALID)

    @property
    def has_unsaved_changes(self) -> bool:
        """True when closing would drop reviewed rows and nothing was committed yet."""
        has_success = any(r.status == RecordStatus.SUCCESS for r in self._records)
        has_unsaved = any(r.status in _UNSAVED_STATUSES for r in self._records)
        return has_unsaved and not has_success

    def counts(self) -> StatusCounts:
        """Tally records by status."""
        counts = StatusCounts(total=len(self._records))
        for record in self._records:
            setattr(counts, record.status.value, getattr(counts, record.status.value) + 1)
            if record.status == RecordStatus.VALID and record.has_warnings:
                counts.valid_with_warnings += 1
        return counts

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _replace_all(self, records: tuple[CandidateRecord, ...]) -> None:
        self._records = tuple(revalidate_batch(records, self._existing))

    def _guard(self) -> None:
        if self.is_importing:
            msg = "An import is in progress"
            raise ImportInProgressError(msg)
