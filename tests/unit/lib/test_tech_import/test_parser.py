"""Unit tests for import file decoding."""

import json

import pytest

from community_api.lib.tech_import.parser import new_temp_id, parse_csv, parse_import_file, parse_json
from community_api.lib.tech_import.types import ExistingTech, ImportParseError, RecordStatus


class TestParseCsv:
    def test_basic(self) -> None:
        text = "label,slug,imgUrl\nReact,react,https://react.dev/logo.svg\nVue,,vuejs.org/logo.png\n"
        records = parse_csv(text)

        assert [(r.label, r.slug, r.img_url) for r in records] == [
            ("React", "react", "https://react.dev/logo.svg"),
            ("Vue", "", "vuejs.org/logo.png"),
        ]
        assert all(r.status == RecordStatus.PENDING for r in records)

    def test_header_is_case_insensitive_and_reorderable(self) -> None:
        records = parse_csv(" IMG_URL , Label \na.com/x.png,Svelte")
        assert (records[0].label, records[0].slug, records[0].img_url) == ("Svelte", "", "a.com/x.png")

    def test_strips_one_layer_of_quotes(self) -> None:
        [record] = parse_csv('label,imgurl\n "Next.js" ,"nextjs.org/logo.svg"')
        assert record.label == "Next.js"
        assert record.img_url == "nextjs.org/logo.svg"

    def test_skips_blank_lines_and_pads_missing_values(self) -> None:
        records = parse_csv("\n\nlabel,slug,imgurl\n\nAngular\n   \n")
        assert len(records) == 1
        assert (records[0].label, records[0].slug, records[0].img_url) == ("Angular", "", "")

    def test_crlf_line_endings(self) -> None:
        [record] = parse_csv("label,imgurl\r\nDeno,deno.land/logo.svg\r\n")
        assert record.img_url == "deno.land/logo.svg"

    def test_missing_image_column_is_fatal(self) -> None:
        with pytest.raises(ImportParseError, match='CSV must contain "label" and "imgUrl" columns'):
            parse_csv("label,slug\nReact,react")

    def test_missing_label_column_is_fatal(self) -> None:
        with pytest.raises(ImportParseError):
            parse_csv("name,imgUrl\nReact,a.com")

    def test_empty_file_is_fatal(self) -> None:
        with pytest.raises(ImportParseError):
            parse_csv("")

    def test_temp_ids_are_unique(self) -> None:
        records = parse_csv("label,imgurl\n" + "\n".join(f"T{i},a.com" for i in range(50)))
        assert len({r.temp_id for r in records}) == 50


class TestParseJson:
    def test_array(self) -> None:
        payload = [
            {"label": "React", "slug": "react", "imgUrl": "https://react.dev/logo.svg"},
            {"name": "Vue", "img_url": "vuejs.org/logo.png"},
            {"label": "Go", "imageUrl": "go.dev/logo.svg"},
        ]
        records = parse_json(json.dumps(payload))
        assert [(r.label, r.slug, r.img_url) for r in records] == [
            ("React", "react", "https://react.dev/logo.svg"),
            ("Vue", "", "vuejs.org/logo.png"),
            ("Go", "", "go.dev/logo.svg"),
        ]

    def test_single_object_becomes_one_record(self) -> None:
        records = parse_json('{"label": "Rust", "imgUrl": "rust-lang.org/logo.png"}')
        assert len(records) == 1
        assert records[0].label == "Rust"

    def test_empty_label_falls_back_to_name(self) -> None:
        [record] = parse_json('{"label": "", "name": "Elm", "imgUrl": "elm-lang.org/x.svg"}')
        assert record.label == "Elm"

    def test_missing_fields_default_to_empty(self) -> None:
        [record] = parse_json("{}")
        assert (record.label, record.slug, record.img_url) == ("", "", "")

    def test_empty_array(self) -> None:
        assert parse_json("[]") == []

    @pytest.mark.parametrize("text", ["{not json", "", "[1, 2]", '"label"', '[{"label": "A"}, 3]'])
    def test_malformed_is_fatal(self, text: str) -> None:
        with pytest.raises(ImportParseError, match="Invalid JSON format"):
            parse_json(text)


class TestParseImportFile:
    def test_selects_decoder_by_suffix(self) -> None:
        csv_records = parse_import_file("techs.csv", "label,imgurl\nReact,react.dev/x.svg", [])
        json_records = parse_import_file("techs.json", '[{"label": "React", "imgUrl": "react.dev/x.svg"}]', [])
        assert csv_records[0].label == json_records[0].label == "React"

    @pytest.mark.parametrize("filename", ["techs.txt", "techs.xlsx", "techs", "techs.CSV"])
    def test_unsupported_suffix(self, filename: str) -> None:
        with pytest.raises(ImportParseError, match="Please upload a CSV or JSON file"):
            parse_import_file(filename, "label,imgurl\nA,a.com", [])

    def test_records_are_validated_against_batch_and_snapshot(self) -> None:
        text = "label,slug,imgurl\nReact,,react.dev/x.svg\nVue,,vuejs.org/x.png\nVue 3,vue,vuejs.org/y.png\nBad,,not a url\n"
        records = parse_import_file("techs.csv", text, [ExistingTech(label="React", slug="react")])

        assert [r.status for r in records] == [
            RecordStatus.DUPLICATE,
            RecordStatus.DUPLICATE,
            RecordStatus.DUPLICATE,
            RecordStatus.INVALID,
        ]
        assert records[1].errors == ("Duplicate in import batch",)
        assert records[3].errors == ("Invalid URL format - must be a valid URL or domain",)

    def test_near_label_raises_no_warning(self) -> None:
        [record] = parse_import_file(
            "techs.json",
            '{"label": "React", "imgUrl": "react.dev/x.svg"}',
            [ExistingTech(label="Reactish", slug="reactish")],
        )
        assert record.status == RecordStatus.VALID
        assert record.warnings == ()

    def test_same_label_other_slug_is_valid_with_warning(self) -> None:
        [record] = parse_import_file(
            "techs.json",
            '{"label": "react", "imgUrl": "react.dev/x.svg"}',
            [ExistingTech(label="React", slug="reactjs")],
        )
        assert record.status == RecordStatus.VALID
        assert record.errors == ()
        assert record.warnings == ('Similar tech stack exists: "React"',)


def test_new_temp_id_shape() -> None:
    assert new_temp_id().startswith("temp-")
    assert new_temp_id() != new_temp_id()
