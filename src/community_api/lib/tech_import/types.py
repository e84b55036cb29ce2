"""Data types shared by the tech stack import pipeline."""

from dataclasses import dataclass, field
from enum import StrEnum


class RecordStatus(StrEnum):
    """Lifecycle status of a candidate record.

    ``pending``/``valid``/``invalid``/``duplicate`` are derived from
    validation. ``importing``/``success``/``error`` track one commit attempt.
    """

    PENDING = "pending"
    VALID = "valid"
    INVALID = "invalid"
    DUPLICATE = "duplicate"
    IMPORTING = "importing"
    SUCCESS = "success"
    ERROR = "error"


# Statuses that a validation pass may overwrite.
REVALIDATABLE_STATUSES: frozenset[RecordStatus] = frozenset(
    {
        RecordStatus.PENDING,
        RecordStatus.VALID,
        RecordStatus.INVALID,
        RecordStatus.DUPLICATE,
        RecordStatus.ERROR,
    }
)


@dataclass(frozen=True)
class CandidateRecord:
    """One row pending import.

    Instances are immutable; the session replaces them wholesale on every
    transition so the batch list is always internally consistent.
    """

    temp_id: str
    label: str
    slug: str
    img_url: str
    status: RecordStatus = RecordStatus.PENDING
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)


@dataclass(frozen=True)
class ExistingTech:
    """Snapshot entry for an already-committed tech."""

    label: str
    slug: str


@dataclass
class ValidationResult:
    """Outcome of validating one candidate record."""

    valid: bool
    is_duplicate: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TechCreatePayload:
    """Arguments handed to the external create operation.

    ``slug`` is None when the record had no explicit slug, leaving slug
    generation to the store.
    """

    label: str
    slug: str | None
    img_url: str


@dataclass
class StatusCounts:
    """Per-status tallies for a batch."""

    total: int = 0
    pending: int = 0
    valid: int = 0
    invalid: int = 0
    duplicate: int = 0
    importing: int = 0
    success: int = 0
    error: int = 0
    valid_with_warnings: int = 0


class ImportParseError(ValueError):
    """Raised when an import file cannot be decoded at all.

    No records are produced when this is raised.
    """


class ImportInProgressError(RuntimeError):
    """Raised when a session operation conflicts with a running bulk commit."""
