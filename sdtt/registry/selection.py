"""Selection tokens: what the caller asked to test.

A token is either a bare name (``Article``, ``SocialMedia``) or a
``format:name`` pair (``jsonld:Article``). Parsing validates every token
against the registries, so an unknown name fails before any document work.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Union

from sdtt.errors import UnknownPresetError, UnknownSchemaError
from sdtt.registry.presets import PresetRegistry
from sdtt.registry.schemas import SchemaRegistry


class SelectionKind(str, Enum):
    SCHEMA = "schema"
    PRESET = "preset"


@dataclass(frozen=True)
class SchemaToken:
    name: str
    format: str | None = None

    @property
    def label(self) -> str:
        return f"{self.format}:{self.name}" if self.format else self.name


@dataclass(frozen=True)
class PresetToken:
    name: str

    @property
    def label(self) -> str:
        return self.name


Selection = Union[SchemaToken, PresetToken]


def split_tokens(raw: str) -> list[str]:
    """Split a comma separated selection argument, dropping blanks."""
    return [token.strip() for token in raw.split(",") if token.strip()]


def parse_selection(
    token: str,
    schemas: SchemaRegistry,
    presets: PresetRegistry,
    kind: SelectionKind | None = None,
) -> Selection:
    """Parse and validate one token.

    With no ``kind`` a bare name is a preset if one is registered under that
    name, otherwise a schema. A ``format:name`` token is always a schema.
    """
    text = token.strip()
    fmt, sep, name = text.partition(":")

    if sep:
        if kind is SelectionKind.PRESET:
            raise UnknownPresetError(text)
        fmt, name = fmt.strip().lower(), name.strip()
        if not fmt or not name or fmt not in schemas.formats():
            raise UnknownSchemaError(name or text, fmt or None)
        schemas.resolve(fmt, name)
        return SchemaToken(name=name, format=fmt)

    if kind is not SelectionKind.SCHEMA and text in presets:
        return PresetToken(name=text)
    if kind is SelectionKind.PRESET:
        raise UnknownPresetError(text)
    schemas.resolve(None, text)
    return SchemaToken(name=text)


def parse_selections(
    tokens: Iterable[str],
    schemas: SchemaRegistry,
    presets: PresetRegistry,
    kind: SelectionKind | None = None,
) -> list[Selection]:
    return [parse_selection(token, schemas, presets, kind) for token in tokens]
