"""Preset registry: named bundles of schemas for a common use case."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from sdtt.errors import RegistryError, UnknownPresetError, UnknownSchemaError
from sdtt.registry.schemas import SchemaDefinition, SchemaId, SchemaRegistry


class Preset(BaseModel):
    """A named, ordered list of schema references.

    References may be given as ``"format:name"`` strings or as
    ``{"format": ..., "name": ...}`` objects.
    """

    name: str = Field(min_length=1)
    schemas: tuple[SchemaId, ...] = ()
    description: str = ""

    model_config = {"frozen": True}

    @field_validator("schemas", mode="before")
    @classmethod
    def _parse_references(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple)):
            return tuple(SchemaId.parse(item) if isinstance(item, str) else item for item in value)
        return value


_PRESETS_ADAPTER = TypeAdapter(list[Preset])


class PresetRegistry:
    """Read-only lookup of presets, validated against a schema registry.

    A preset name may not also be a schema name, so a bare selection token
    always means exactly one thing.
    """

    def __init__(self, presets: Iterable[Preset], schemas: SchemaRegistry) -> None:
        self._schemas = schemas
        self._presets: dict[str, Preset] = {}

        for preset in presets:
            if preset.name in self._presets:
                raise RegistryError(f"Duplicate preset: {preset.name}")
            if preset.name in schemas:
                raise RegistryError(f"Preset name {preset.name!r} shadows a schema name")
            for ref in preset.schemas:
                try:
                    schemas.get(ref)
                except UnknownSchemaError:
                    raise RegistryError(
                        f"Preset {preset.name!r} references unknown schema {ref.label}"
                    ) from None
            self._presets[preset.name] = preset

    def __contains__(self, name: object) -> bool:
        return name in self._presets

    def __len__(self) -> int:
        return len(self._presets)

    def resolve(self, name: str) -> Preset:
        try:
            return self._presets[name]
        except KeyError:
            raise UnknownPresetError(name) from None

    def list_all(self) -> list[Preset]:
        return list(self._presets.values())

    def expand(self, name: str) -> list[SchemaDefinition]:
        """Resolve a preset to its schema definitions, in declared order."""
        return [self._schemas.get(ref) for ref in self.resolve(name).schemas]

    @classmethod
    def from_file(cls, path: Path, schemas: SchemaRegistry) -> PresetRegistry:
        """Load presets from a JSON array of preset objects."""
        try:
            presets = _PRESETS_ADAPTER.validate_json(path.read_bytes())
        except OSError as exc:
            raise RegistryError(f"Cannot read preset file {path}: {exc}") from exc
        except ValidationError as exc:
            raise RegistryError(f"Invalid preset file {path}: {exc}") from exc
        return cls(presets, schemas)
