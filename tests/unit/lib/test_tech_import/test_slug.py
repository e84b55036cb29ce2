"""Unit tests for slug generation."""

import re

import pytest

from community_api.lib.tech_import.slug import effective_slug, generate_slug

_SLUG_SHAPE = re.compile(r"^[a-z0-9]*(-[a-z0-9]+)*$")


class TestGenerateSlug:
    @pytest.mark.parametrize(
        ("label", "expected"),
        [
            ("React", "react"),
            ("Next.js", "next-js"),
            ("Vue 3", "vue-3"),
            ("  Node   JS  ", "node-js"),
            ("C++", "c"),
            ("C#/.NET", "c-net"),
            ("", ""),
            ("---", ""),
            ("Ruby on Rails!", "ruby-on-rails"),
        ],
    )
    def test_known_labels(self, label: str, expected: str) -> None:
        assert generate_slug(label) == expected

    @pytest.mark.parametrize(
        "label",
        ["", " ", "-a-", "Hello, World", "Æther ☃ 42", "__init__", "a--b", "..js..", "TypeScript 5.4"],
    )
    def test_output_shape(self, label: str) -> None:
        slug = generate_slug(label)
        assert _SLUG_SHAPE.match(slug)
        assert not slug.startswith("-")
        assert not slug.endswith("-")

    def test_non_ascii_letters_are_separators(self) -> None:
        assert generate_slug("Café") == "caf"


class TestEffectiveSlug:
    def test_explicit_slug_wins(self) -> None:
        assert effective_slug("React", "  reactjs ") == "reactjs"

    def test_blank_slug_falls_back_to_label(self) -> None:
        assert effective_slug(" Next.js ", "   ") == "next-js"

    def test_explicit_slug_keeps_case(self) -> None:
        assert effective_slug("React", "React") == "React"
