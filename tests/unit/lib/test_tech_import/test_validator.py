"""Unit tests for candidate record validation."""

import pytest

from community_api.lib.tech_import.types import CandidateRecord, ExistingTech, RecordStatus, ValidationResult
from community_api.lib.tech_import.validator import derive_status, revalidate, revalidate_batch, validate_record


def _rec(temp_id: str = "t1", label: str = "React", slug: str = "", img_url: str = "https://react.dev/logo.svg", **kw):
    return CandidateRecord(temp_id=temp_id, label=label, slug=slug, img_url=img_url, **kw)


class TestRequiredFields:
    def test_blank_label(self) -> None:
        record = _rec(label="   ")
        result = validate_record(record, [record], [])
        assert not result.valid
        assert result.errors == ["Label is required"]

    def test_blank_image(self) -> None:
        record = _rec(img_url=" ")
        result = validate_record(record, [record], [])
        assert not result.valid
        assert "Image URL is required" in result.errors

    @pytest.mark.parametrize(("label", "img_url"), [("", ""), ("", "a.com"), ("X", ""), ("  ", "  ")])
    def test_empty_label_or_image_is_never_valid(self, label: str, img_url: str) -> None:
        record = _rec(label=label, img_url=img_url)
        assert validate_record(record, [record], []).valid is False

    def test_blank_label_skips_slug_checks(self) -> None:
        record = _rec(label="", slug="react")
        result = validate_record(record, [record], [ExistingTech(label="React", slug="react")])
        assert not result.is_duplicate
        assert result.errors == ["Label is required"]


class TestImageReference:
    def test_domain_without_scheme_passes(self) -> None:
        record = _rec(img_url="example.com/img.png")
        assert validate_record(record, [record], []).valid

    def test_not_a_url(self) -> None:
        record = _rec(img_url="not a url")
        result = validate_record(record, [record], [])
        assert result.errors == ["Invalid URL format - must be a valid URL or domain"]

    def test_malformed_url_with_scheme(self) -> None:
        record = _rec(img_url="https://exa mple.com/x.png")
        assert validate_record(record, [record], []).errors == ["Invalid URL format"]

    def test_http_scheme_accepted(self) -> None:
        record = _rec(img_url="http://example.com/x.png")
        assert validate_record(record, [record], []).valid


class TestSnapshotDuplicates:
    def test_slug_collision_with_existing(self) -> None:
        record = _rec(label="React", slug="")
        result = validate_record(record, [record], [ExistingTech(label="React", slug="react")])
        assert result.is_duplicate
        assert not result.valid
        assert any("react" in e for e in result.errors)
        assert result.errors == ['Tech stack with slug "react" already exists']
        assert result.warnings == []

    def test_slug_collision_is_case_insensitive(self) -> None:
        record = _rec(label="Whatever", slug="REACT")
        result = validate_record(record, [record], [ExistingTech(label="React", slug="react")])
        assert result.is_duplicate
        assert result.errors == ['Tech stack with slug "REACT" already exists']

    def test_label_similarity_warning(self) -> None:
        record = _rec(label="react", slug="react-lib")
        result = validate_record(record, [record], [ExistingTech(label="React", slug="react")])
        assert result.valid
        assert not result.is_duplicate
        assert result.warnings == ['Similar tech stack exists: "React"']

    def test_no_collision_with_reactish(self) -> None:
        record = _rec(label="React")
        result = validate_record(record, [record], [ExistingTech(label="Reactish", slug="reactish")])
        assert result.valid
        assert result.errors == []


class TestBatchDuplicates:
    def test_both_records_flagged(self) -> None:
        a = _rec("a", label="Vue")
        b = _rec("b", label="Vue.js", slug="vue")
        batch = [a, b]
        for record in batch:
            result = validate_record(record, batch, [])
            assert result.is_duplicate
            assert result.errors == ["Duplicate in import batch"]

    def test_record_is_not_its_own_duplicate(self) -> None:
        record = _rec()
        assert validate_record(record, [record], []).valid

    def test_batch_error_reported_once(self) -> None:
        a = _rec("a", label="Vue")
        batch = [a, _rec("b", label="vue"), _rec("c", label="VUE")]
        assert validate_record(a, batch, []).errors == ["Duplicate in import batch"]

    def test_snapshot_and_batch_errors_accumulate(self) -> None:
        a = _rec("a", label="Vue", img_url="")
        b = _rec("b", label="Vue")
        result = validate_record(a, [a, b], [ExistingTech(label="Vue", slug="vue")])
        assert result.errors == [
            "Image URL is required",
            'Tech stack with slug "vue" already exists',
            "Duplicate in import batch",
        ]


class TestDeriveStatus:
    def test_duplicate_wins_over_invalid(self) -> None:
        result = ValidationResult(valid=False, is_duplicate=True, errors=["Image URL is required"])
        assert derive_status(result) == RecordStatus.DUPLICATE

    def test_valid(self) -> None:
        assert derive_status(ValidationResult(valid=True, is_duplicate=False)) == RecordStatus.VALID

    def test_invalid(self) -> None:
        result = ValidationResult(valid=False, is_duplicate=False, errors=["x"])
        assert derive_status(result) == RecordStatus.INVALID


class TestRevalidate:
    def test_returns_updated_copy(self) -> None:
        record = _rec(img_url="")
        updated = revalidate(record, [record], [])
        assert updated is not record
        assert record.status == RecordStatus.PENDING
        assert updated.status == RecordStatus.INVALID
        assert updated.errors == ("Image URL is required",)

    def test_batch_skips_committed_records(self) -> None:
        done = _rec("a", label="Vue", status=RecordStatus.SUCCESS)
        fresh = _rec("b", label="Vue")
        result = revalidate_batch([done, fresh], [])
        assert result[0] is done
        assert result[1].status == RecordStatus.DUPLICATE

    def test_error_records_reenter_validation(self) -> None:
        failed = _rec(status=RecordStatus.ERROR, errors=("boom",))
        [result] = revalidate_batch([failed], [])
        assert result.status == RecordStatus.VALID
        assert result.errors == ()
