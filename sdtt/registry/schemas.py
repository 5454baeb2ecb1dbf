"""Schema registry: expected structured-data fields per serialization format."""

from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, field_validator

from sdtt.errors import RegistryError, UnknownSchemaError

# Serializations that group fields under a schema.org type name.
TYPED_FORMATS = frozenset({"jsonld", "microdata", "rdfa"})


class ExpectedType(str, Enum):
    """Shape a present value must have to count as valid."""

    STRING = "string"
    URL = "url"
    IMAGE = "image"
    DATE = "date"
    NUMBER = "number"


class SchemaId(BaseModel):
    """Identity of a schema: the serialization format plus the schema name."""

    format: str
    name: str

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.format}:{self.name}"

    @classmethod
    def parse(cls, value: str) -> SchemaId:
        fmt, sep, name = value.partition(":")
        if not sep or not fmt.strip() or not name.strip():
            raise ValueError(f"Schema reference must be 'format:name', got {value!r}")
        return cls(format=fmt.strip().lower(), name=name.strip())

    def __str__(self) -> str:
        return self.label


class FieldSpec(BaseModel):
    """One expected field. ``key`` may be a dotted path into nested values."""

    key: str = Field(min_length=1)
    required: bool = False
    expected_type: ExpectedType | None = None
    description: str = ""

    model_config = {"frozen": True}


class SchemaDefinition(BaseModel):
    """Named, ordered set of expected fields for one serialization format."""

    format: str = Field(min_length=1)
    name: str = Field(min_length=1)
    fields: tuple[FieldSpec, ...] = ()
    description: str = ""

    model_config = {"frozen": True}

    @field_validator("format")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        value = value.strip().lower()
        if ":" in value:
            raise ValueError(f"Format name cannot contain ':': {value!r}")
        return value

    @field_validator("fields")
    @classmethod
    def _unique_keys(cls, value: tuple[FieldSpec, ...]) -> tuple[FieldSpec, ...]:
        seen: set[str] = set()
        for spec in value:
            if spec.key in seen:
                raise ValueError(f"Duplicate field key: {spec.key}")
            seen.add(spec.key)
        return value

    @property
    def id(self) -> SchemaId:
        return SchemaId(format=self.format, name=self.name)

    @property
    def required_fields(self) -> tuple[FieldSpec, ...]:
        return tuple(spec for spec in self.fields if spec.required)


_DEFINITIONS_ADAPTER = TypeAdapter(list[SchemaDefinition])


class SchemaRegistry:
    """Read-only lookup of schema definitions.

    Formats are ordered by first appearance in the definitions passed in, and
    ambiguous bare-name lookups return matches in that order.
    """

    def __init__(self, definitions: Iterable[SchemaDefinition]) -> None:
        self._by_id: dict[SchemaId, SchemaDefinition] = {}
        self._by_name: dict[str, list[SchemaDefinition]] = {}
        formats: list[str] = []

        for definition in definitions:
            if definition.id in self._by_id:
                raise RegistryError(f"Duplicate schema definition: {definition.id.label}")
            self._by_id[definition.id] = definition
            self._by_name.setdefault(definition.name, []).append(definition)
            if definition.format not in formats:
                formats.append(definition.format)

        self._formats = tuple(formats)
        # Keep every per-name list in format order.
        for matches in self._by_name.values():
            matches.sort(key=lambda d: self._formats.index(d.format))

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def __len__(self) -> int:
        return len(self._by_id)

    def formats(self) -> tuple[str, ...]:
        return self._formats

    def names(self) -> list[str]:
        return list(self._by_name)

    def list_all(self) -> list[SchemaDefinition]:
        return list(self._by_id.values())

    def get(self, schema_id: SchemaId) -> SchemaDefinition:
        try:
            return self._by_id[schema_id]
        except KeyError:
            raise UnknownSchemaError(schema_id.name, schema_id.format) from None

    def resolve(self, format: str | None, name: str) -> list[SchemaDefinition]:
        """Resolve a schema by name, optionally restricted to one format.

        Without a format every format defining ``name`` matches. Raises
        UnknownSchemaError when nothing matches.
        """
        if format is None:
            matches = self._by_name.get(name, [])
            if not matches:
                raise UnknownSchemaError(name)
            return list(matches)
        return [self.get(SchemaId(format=format.strip().lower(), name=name))]

    @classmethod
    def from_file(cls, path: Path) -> SchemaRegistry:
        """Load definitions from a JSON array of schema objects."""
        try:
            definitions = _DEFINITIONS_ADAPTER.validate_json(path.read_bytes())
        except OSError as exc:
            raise RegistryError(f"Cannot read schema file {path}: {exc}") from exc
        except ValidationError as exc:
            raise RegistryError(f"Invalid schema file {path}: {exc}") from exc
        return cls(definitions)
