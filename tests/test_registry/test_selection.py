"""Tests for selection token parsing."""

import pytest

from sdtt.errors import UnknownPresetError, UnknownSchemaError
from sdtt.registry.selection import (
    PresetToken,
    SchemaToken,
    SelectionKind,
    parse_selection,
    parse_selections,
    split_tokens,
)


def _parse(registries, token, kind=None):
    return parse_selection(token, registries.schemas, registries.presets, kind)


class TestParseSelection:
    def test_bare_schema_name(self, registries):
        assert _parse(registries, "Article") == SchemaToken(name="Article")

    def test_format_qualified_schema(self, registries):
        assert _parse(registries, "jsonld:Article") == SchemaToken(name="Article", format="jsonld")

    def test_format_is_case_insensitive(self, registries):
        assert _parse(registries, " JSONLD : Article ") == SchemaToken(
            name="Article", format="jsonld"
        )

    def test_bare_preset_name(self, registries):
        assert _parse(registries, "SocialMedia") == PresetToken(name="SocialMedia")

    def test_unknown_bare_name(self, registries):
        with pytest.raises(UnknownSchemaError):
            _parse(registries, "NotASchema")

    def test_unknown_format(self, registries):
        with pytest.raises(UnknownSchemaError):
            _parse(registries, "yaml:Article")

    def test_schema_missing_from_format(self, registries):
        with pytest.raises(UnknownSchemaError):
            _parse(registries, "twitter:Article")

    def test_empty_name_after_format(self, registries):
        with pytest.raises(UnknownSchemaError):
            _parse(registries, "jsonld:")

    def test_preset_kind_rejects_schema_name(self, registries):
        with pytest.raises(UnknownPresetError):
            _parse(registries, "Article", SelectionKind.PRESET)

    def test_preset_kind_rejects_qualified_token(self, registries):
        with pytest.raises(UnknownPresetError):
            _parse(registries, "og:Article", SelectionKind.PRESET)

    def test_schema_kind_rejects_preset_name(self, registries):
        with pytest.raises(UnknownSchemaError):
            _parse(registries, "SocialMedia", SelectionKind.SCHEMA)

    def test_labels(self):
        assert SchemaToken(name="Article", format="jsonld").label == "jsonld:Article"
        assert SchemaToken(name="Article").label == "Article"
        assert PresetToken(name="Google").label == "Google"


class TestParseSelections:
    def test_order_preserved(self, registries):
        parsed = parse_selections(
            ["Twitter", "jsonld:Article", "Person"], registries.schemas, registries.presets
        )
        assert [s.label for s in parsed] == ["Twitter", "jsonld:Article", "Person"]

    def test_first_invalid_token_fails(self, registries):
        with pytest.raises(UnknownSchemaError):
            parse_selections(["Article", "Bogus"], registries.schemas, registries.presets)


class TestSplitTokens:
    def test_split_and_strip(self):
        assert split_tokens(" Twitter, Facebook ,,") == ["Twitter", "Facebook"]

    def test_empty(self):
        assert split_tokens("") == []
