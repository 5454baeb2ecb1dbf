"""Report models: per-field, per-schema and per-run results."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, ClassVar

from pydantic import BaseModel

from sdtt.registry.schemas import ExpectedType, SchemaId


class FieldResult(BaseModel):
    """Outcome for one expected field.

    ``type_valid`` is None when the value was absent, the field has no
    expected type, or type checks are disabled.
    """

    key: str
    required: bool
    present: bool
    value: Any = None
    expected_type: ExpectedType | None = None
    type_valid: bool | None = None

    model_config = {"frozen": True}

    @property
    def satisfied(self) -> bool:
        return self.present and self.type_valid is not False


class SchemaResult(BaseModel):
    """Outcome for one schema, with field results in declared order."""

    schema_id: SchemaId
    fields: tuple[FieldResult, ...]
    passed: bool
    selected_via: str | None = None

    model_config = {"frozen": True}

    @property
    def missing_required(self) -> list[str]:
        return [f.key for f in self.fields if f.required and not f.present]

    @property
    def invalid(self) -> list[str]:
        return [f.key for f in self.fields if f.present and f.type_valid is False]


class ReportSummary(BaseModel):
    schemas_tested: int
    schemas_passed: int
    schemas_failed: int
    required_missing: int
    invalid_values: int


class TestReport(BaseModel):
    """Outcome of one test run over one input."""

    __test__: ClassVar[bool] = False

    input: str | None = None
    results: tuple[SchemaResult, ...] = ()
    overall_passed: bool = True

    model_config = {"frozen": True}

    @classmethod
    def build(cls, input: str | None, results: Iterable[SchemaResult]) -> TestReport:
        results = tuple(results)
        return cls(
            input=input,
            results=results,
            overall_passed=all(r.passed for r in results),
        )

    @property
    def summary(self) -> ReportSummary:
        passed = sum(1 for r in self.results if r.passed)
        return ReportSummary(
            schemas_tested=len(self.results),
            schemas_passed=passed,
            schemas_failed=len(self.results) - passed,
            required_missing=sum(len(r.missing_required) for r in self.results),
            invalid_values=sum(len(r.invalid) for r in self.results),
        )

    def result_for(self, label: str) -> SchemaResult | None:
        for result in self.results:
            if result.schema_id.label == label:
                return result
        return None
