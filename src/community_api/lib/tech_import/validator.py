"""Candidate record validation and status derivation.

``validate_record`` is the only place the import rules live; every
mutation site (parse, edit, removal, manual refresh) goes through
``revalidate``/``revalidate_batch`` so status can never drift from the
latest validation pass.
"""

from collections.abc import Sequence
from dataclasses import replace

from community_api.lib.tech_import.slug import effective_slug
from community_api.lib.tech_import.types import (
    REVALIDATABLE_STATUSES,
    CandidateRecord,
    ExistingTech,
    RecordStatus,
    ValidationResult,
)
from community_api.lib.tech_import.urls import has_http_scheme, looks_like_domain, parse_url

_ALLOWED_SCHEMES = frozenset({"http", "https"})


def _validate_img_url(img_url: str) -> list[str]:
    value = img_url.strip()
    if not value:
        return ["Image URL is required"]

    if has_http_scheme(value):
        parsed = parse_url(value)
        if parsed is None:
            return ["Invalid URL format"]
        if parsed.scheme not in _ALLOWED_SCHEMES:
            return ["URL must use http or https protocol"]
        return []

    if not looks_like_domain(value):
        return ["Invalid URL format - must be a valid URL or domain"]
    if parse_url(f"https://{value}") is None:
        return ["Invalid URL format"]
    return []


def validate_record(
    record: CandidateRecord,
    batch: Sequence[CandidateRecord],
    existing: Sequence[ExistingTech],
) -> ValidationResult:
    """Validate one candidate against its batch and the existing catalogue.

    Rules are applied in order and accumulate; a record may carry several
    errors and warnings at once.

    Args:
        record: The record to check.
        batch: Every record currently in the session, ``record`` included
            (it is excluded from the intra-batch check by ``temp_id``).
        existing: Snapshot of committed techs.

    Returns:
        ValidationResult with ``valid`` true iff no errors were found.
    """
    errors: list[str] = []
    warnings: list[str] = []
    is_duplicate = False

    label = record.label.strip()
    if not label:
        errors.append("Label is required")

    errors.extend(_validate_img_url(record.img_url))

    if label:
        slug = effective_slug(record.label, record.slug)
        slug_key = slug.lower()

        slug_match = next((t for t in existing if t.slug.lower() == slug_key), None)
        if slug_match is not None:
            is_duplicate = True
            errors.append(f'Tech stack with slug "{slug}" already exists')
        else:
            label_match = next((t for t in existing if t.label.lower() == label.lower()), None)
            if label_match is not None:
                warnings.append(f'Similar tech stack exists: "{label_match.label}"')

        for other in batch:
            if other.temp_id == record.temp_id:
                continue
            if effective_slug(other.label, other.slug).lower() == slug_key:
                is_duplicate = True
                errors.append("Duplicate in import batch")
                break

    return ValidationResult(
        valid=not errors,
        is_duplicate=is_duplicate,
        errors=errors,
        warnings=warnings,
    )


def derive_status(result: ValidationResult) -> RecordStatus:
    """Map a validation result to a display status.

    ``duplicate`` wins over ``invalid`` even when unrelated errors are
    also present.
    """
    if result.is_duplicate:
        return RecordStatus.DUPLICATE
    if result.valid:
        return RecordStatus.VALID
    return RecordStatus.INVALID


def revalidate(
    record: CandidateRecord,
    batch: Sequence[CandidateRecord],
    existing: Sequence[ExistingTech],
) -> CandidateRecord:
    """Return a copy of ``record`` with status, errors and warnings recomputed."""
    result = validate_record(record, batch, existing)
    return replace(
        record,
        status=derive_status(result),
        errors=tuple(result.errors),
        warnings=tuple(result.warnings),
    )


def revalidate_batch(
    batch: Sequence[CandidateRecord],
    existing: Sequence[ExistingTech],
) -> list[CandidateRecord]:
    """Re-validate every record whose status is validation-derived.

    Records that are mid-commit or already committed keep their status
    but still take part in the intra-batch duplicate check of the others.
    """
    return [
        revalidate(record, batch, existing) if record.status in REVALIDATABLE_STATUSES else record
        for record in batch
    ]
