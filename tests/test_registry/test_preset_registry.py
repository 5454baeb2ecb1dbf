"""Tests for presets and the preset registry."""

import json

import pytest

from sdtt.errors import RegistryError, UnknownPresetError
from sdtt.registry.presets import Preset, PresetRegistry
from sdtt.registry.schemas import FieldSpec, SchemaDefinition, SchemaId, SchemaRegistry


@pytest.fixture
def schemas():
    return SchemaRegistry(
        [
            SchemaDefinition(format="og", name="Article", fields=(FieldSpec(key="title"),)),
            SchemaDefinition(format="twitter", name="Card", fields=(FieldSpec(key="card"),)),
        ]
    )


class TestPreset:
    def test_string_references_are_parsed(self):
        preset = Preset(name="Social", schemas=["og:Article", "twitter:Card"])
        assert preset.schemas == (
            SchemaId(format="og", name="Article"),
            SchemaId(format="twitter", name="Card"),
        )

    def test_object_references_are_accepted(self):
        preset = Preset(name="Social", schemas=[{"format": "og", "name": "Article"}])
        assert preset.schemas[0].label == "og:Article"

    def test_bare_reference_rejected(self):
        with pytest.raises(ValueError):
            Preset(name="Social", schemas=["Article"])


class TestPresetRegistry:
    def test_resolve(self, schemas):
        registry = PresetRegistry([Preset(name="Social", schemas=["og:Article"])], schemas)
        assert registry.resolve("Social").name == "Social"

    def test_resolve_unknown(self, schemas):
        registry = PresetRegistry([], schemas)
        with pytest.raises(UnknownPresetError):
            registry.resolve("Nope")

    def test_expand_keeps_declared_order(self, schemas):
        registry = PresetRegistry(
            [Preset(name="Social", schemas=["twitter:Card", "og:Article"])], schemas
        )
        assert [d.id.label for d in registry.expand("Social")] == ["twitter:Card", "og:Article"]

    def test_dangling_reference_rejected(self, schemas):
        with pytest.raises(RegistryError):
            PresetRegistry([Preset(name="Broken", schemas=["jsonld:Article"])], schemas)

    def test_duplicate_preset_rejected(self, schemas):
        with pytest.raises(RegistryError):
            PresetRegistry(
                [
                    Preset(name="Social", schemas=["og:Article"]),
                    Preset(name="Social", schemas=["twitter:Card"]),
                ],
                schemas,
            )

    def test_preset_cannot_shadow_schema_name(self, schemas):
        with pytest.raises(RegistryError):
            PresetRegistry([Preset(name="Card", schemas=["twitter:Card"])], schemas)

    def test_list_all_preserves_order(self, schemas):
        registry = PresetRegistry(
            [
                Preset(name="B", schemas=["og:Article"]),
                Preset(name="A", schemas=["twitter:Card"]),
            ],
            schemas,
        )
        assert [p.name for p in registry.list_all()] == ["B", "A"]

    def test_from_file(self, tmp_path, schemas):
        path = tmp_path / "presets.json"
        path.write_text(json.dumps([{"name": "Social", "schemas": ["og:Article", "twitter:Card"]}]))
        registry = PresetRegistry.from_file(path, schemas)
        assert len(registry.resolve("Social").schemas) == 2


class TestBuiltinPresets:
    def test_social_media_expands_to_og_and_twitter(self, registries):
        labels = [d.id.label for d in registries.presets.expand("SocialMedia")]
        assert labels == ["og:Article", "twitter:Card"]

    def test_every_builtin_preset_resolves(self, registries):
        for preset in registries.presets.list_all():
            assert registries.presets.expand(preset.name)
