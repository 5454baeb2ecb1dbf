"""Extracted record: normalized structured data pulled from one document."""

from __future__ import annotations

import copy
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field, field_validator

_MISSING = object()


def _first_mapping(value: Any) -> Any:
    if isinstance(value, list):
        for item in value:
            if isinstance(item, Mapping):
                return item
    return value


def _walk(scope: Mapping[str, Any], key: str) -> tuple[bool, Any]:
    """Find ``key`` in ``scope``, trying the literal key before a dotted path."""
    if key in scope:
        return True, scope[key]
    if "." not in key:
        return False, None

    current: Any = scope
    for part in key.split("."):
        current = _first_mapping(current)
        if not isinstance(current, Mapping):
            return False, None
        current = current.get(part, _MISSING)
        if current is _MISSING:
            return False, None
    return True, current


class ExtractedRecord(BaseModel):
    """Mapping of format -> field key -> raw value.

    Typed serializations (JSON-LD, microdata, RDFa) may group fields by schema
    type name: ``{"jsonld": {"Article": {"headline": ...}}}``. A schema is
    matched against the group named after it when there is one, and against
    the format namespace itself otherwise, so a flat
    ``{"jsonld": {"headline": ...}}`` record works too. When a type appears
    several times the first instance is used.
    """

    data: dict[str, dict[str, Any]] = Field(default_factory=dict)
    source: str | None = None

    model_config = {"frozen": True}

    @field_validator("data")
    @classmethod
    def _own_copy(cls, value: dict[str, dict[str, Any]]) -> dict[str, dict[str, Any]]:
        return copy.deepcopy(value)

    def has_format(self, fmt: str) -> bool:
        return fmt in self.data

    def formats(self) -> list[str]:
        return list(self.data)

    def scope(self, fmt: str, schema_name: str) -> Mapping[str, Any] | None:
        namespace = self.data.get(fmt)
        if namespace is None:
            return None
        group = _first_mapping(namespace.get(schema_name))
        if isinstance(group, Mapping):
            return group
        return namespace

    def lookup(self, fmt: str, schema_name: str, key: str) -> tuple[bool, Any]:
        """Return ``(found, value)`` for a field of the given schema."""
        scope = self.scope(fmt, schema_name)
        if scope is None:
            return False, None
        return _walk(scope, key)

    def typed_groups(self, fmt: str) -> list[str]:
        """Names of type groups present under a format, in document order."""
        namespace = self.data.get(fmt, {})
        return [
            name
            for name, value in namespace.items()
            if isinstance(_first_mapping(value), Mapping)
        ]
