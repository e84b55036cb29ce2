"""Tech stack bulk import library public API.

Parses CSV/JSON import files into candidate records, validates them
against the batch and the existing catalogue, and commits valid records
sequentially through a caller-supplied create operation.
"""

from community_api.lib.tech_import.orchestrator import ImportOrchestrator, build_payload
from community_api.lib.tech_import.parser import parse_csv, parse_import_file, parse_json
from community_api.lib.tech_import.session import ImportSession
from community_api.lib.tech_import.slug import effective_slug, generate_slug
from community_api.lib.tech_import.types import (
    CandidateRecord,
    ExistingTech,
    ImportInProgressError,
    ImportParseError,
    RecordStatus,
    StatusCounts,
    TechCreatePayload,
    ValidationResult,
)
from community_api.lib.tech_import.urls import normalize_url, parse_url, require_url
from community_api.lib.tech_import.validator import derive_status, revalidate, revalidate_batch, validate_record

__all__ = [
    "CandidateRecord",
    "ExistingTech",
    "ImportInProgressError",
    "ImportOrchestrator",
    "ImportParseError",
    "ImportSession",
    "RecordStatus",
    "StatusCounts",
    "TechCreatePayload",
    "ValidationResult",
    "build_payload",
    "derive_status",
    "effective_slug",
    "generate_slug",
    "normalize_url",
    "parse_csv",
    "parse_import_file",
    "parse_json",
    "parse_url",
    "require_url",
    "revalidate",
    "revalidate_batch",
    "validate_record",
]
