"""Matcher: evaluates one schema definition against an extracted record."""

from __future__ import annotations

from sdtt.engine.report import FieldResult, SchemaResult
from sdtt.engine.type_checks import TypeChecker, is_empty
from sdtt.extraction.record import ExtractedRecord
from sdtt.registry.schemas import SchemaDefinition


class Matcher:
    """Compares a record with a schema's field list.

    A schema passes when every required field is present and none of them
    fails its type check. Optional fields are reported but never block.
    """

    def __init__(self, type_checker: TypeChecker | None = None) -> None:
        self._type_checker = type_checker or TypeChecker()

    def evaluate(
        self,
        record: ExtractedRecord,
        schema_def: SchemaDefinition,
        selected_via: str | None = None,
    ) -> SchemaResult:
        results: list[FieldResult] = []

        for spec in schema_def.fields:
            found, value = record.lookup(schema_def.format, schema_def.name, spec.key)
            present = found and not is_empty(value)
            type_valid = self._type_checker.check(spec.expected_type, value) if present else None
            results.append(
                FieldResult(
                    key=spec.key,
                    required=spec.required,
                    present=present,
                    value=value if present else None,
                    expected_type=spec.expected_type,
                    type_valid=type_valid,
                )
            )

        passed = all(r.satisfied for r in results if r.required)
        return SchemaResult(
            schema_id=schema_def.id,
            fields=tuple(results),
            passed=passed,
            selected_via=selected_via,
        )
