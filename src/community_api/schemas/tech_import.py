"""Pydantic v2 schemas for the tech stack bulk import endpoints."""

from pydantic import BaseModel, Field

from community_api.lib.tech_import import CandidateRecord, RecordStatus, StatusCounts


class ImportRecordRequest(BaseModel):
    """One reviewed record submitted for commit."""

    temp_id: str = Field(min_length=1)
    label: str = ""
    slug: str = ""
    img_url: str = ""

    def to_candidate(self) -> CandidateRecord:
        return CandidateRecord(temp_id=self.temp_id, label=self.label, slug=self.slug, img_url=self.img_url)


class ImportCommitRequest(BaseModel):
    """Body of a bulk commit: the reviewed batch."""

    records: list[ImportRecordRequest] = Field(min_length=1)


class ImportRecordResponse(BaseModel):
    """A candidate record with its status and messages."""

    temp_id: str
    label: str
    slug: str
    img_url: str
    status: RecordStatus
    errors: list[str]
    warnings: list[str]

    @classmethod
    def from_record(cls, record: CandidateRecord) -> "ImportRecordResponse":
        return cls(
            temp_id=record.temp_id,
            label=record.label,
            slug=record.slug,
            img_url=record.img_url,
            status=record.status,
            errors=list(record.errors),
            warnings=list(record.warnings),
        )


class ImportCountsResponse(BaseModel):
    """Per-status tallies for a batch."""

    total: int
    valid: int
    invalid: int
    duplicate: int
    success: int
    error: int
    valid_with_warnings: int

    @classmethod
    def from_counts(cls, counts: StatusCounts) -> "ImportCountsResponse":
        return cls(
            total=counts.total,
            valid=counts.valid,
            invalid=counts.invalid,
            duplicate=counts.duplicate,
            success=counts.success,
            error=counts.error,
            valid_with_warnings=counts.valid_with_warnings,
        )


class ImportBatchResponse(BaseModel):
    """Records and counts returned by both preview and commit."""

    records: list[ImportRecordResponse]
    counts: ImportCountsResponse
