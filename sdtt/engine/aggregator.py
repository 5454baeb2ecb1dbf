"""Aggregator: expands selections, runs the matcher, composes the report.

Resolution and evaluation are separate steps so a caller can reject bad
selections before it spends anything on loading a document:

    plan = aggregator.resolve(["SocialMedia", "jsonld:Article"])
    record = extractor.extract(document)
    outcome = aggregator.evaluate(record, plan, input=url)

The outcome is either TestPassed or TestFailed; both carry the full report.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Literal, Union

from sdtt.engine.matcher import Matcher
from sdtt.engine.report import TestReport
from sdtt.errors import ValidationFailedError
from sdtt.extraction.record import ExtractedRecord
from sdtt.registry.builtin import Registries
from sdtt.registry.schemas import TYPED_FORMATS, SchemaDefinition, SchemaId
from sdtt.registry.selection import (
    PresetToken,
    Selection,
    SelectionKind,
    parse_selection,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedSchema:
    """A schema to evaluate and the selection token that first asked for it."""

    definition: SchemaDefinition
    selected_via: str


@dataclass(frozen=True)
class TestPassed:
    __test__: ClassVar[bool] = False

    report: TestReport
    status: Literal["passed"] = "passed"

    @property
    def passed(self) -> bool:
        return True

    def raise_for_failure(self) -> TestReport:
        return self.report


@dataclass(frozen=True)
class TestFailed:
    __test__: ClassVar[bool] = False

    report: TestReport
    status: Literal["failed"] = "failed"

    @property
    def passed(self) -> bool:
        return False

    def raise_for_failure(self) -> TestReport:
        raise ValidationFailedError(self.report)


TestOutcome = Union[TestPassed, TestFailed]


class Aggregator:
    """Runs a selection of schemas and presets against a record."""

    def __init__(self, registries: Registries, matcher: Matcher | None = None) -> None:
        self._registries = registries
        self._matcher = matcher or Matcher()

    @property
    def registries(self) -> Registries:
        return self._registries

    def parse(
        self, tokens: Sequence[str], kind: SelectionKind | None = None
    ) -> list[Selection]:
        return [
            parse_selection(token, self._registries.schemas, self._registries.presets, kind)
            for token in tokens
        ]

    def resolve(self, selections: Sequence[Selection | str]) -> list[PlannedSchema]:
        """Expand selections to unique schema definitions in first-seen order.

        Raises UnknownSchemaError / UnknownPresetError for bad selections.
        """
        plan: list[PlannedSchema] = []
        seen: set[SchemaId] = set()

        for selection in selections:
            if isinstance(selection, str):
                selection = parse_selection(
                    selection, self._registries.schemas, self._registries.presets
                )
            if isinstance(selection, PresetToken):
                definitions = self._registries.presets.expand(selection.name)
            else:
                definitions = self._registries.schemas.resolve(selection.format, selection.name)

            for definition in definitions:
                if definition.id in seen:
                    continue
                seen.add(definition.id)
                plan.append(PlannedSchema(definition=definition, selected_via=selection.label))

        return plan

    def detect(self, record: ExtractedRecord) -> list[PlannedSchema]:
        """Plan every registered typed schema whose type appears in the record."""
        plan: list[PlannedSchema] = []
        for fmt in record.formats():
            if fmt not in TYPED_FORMATS:
                continue
            for name in record.typed_groups(fmt):
                try:
                    [definition] = self._registries.schemas.resolve(fmt, name)
                except LookupError:
                    continue
                plan.append(PlannedSchema(definition=definition, selected_via="auto"))
        return plan

    def evaluate(
        self,
        record: ExtractedRecord,
        plan: Sequence[PlannedSchema],
        input: str | None = None,
    ) -> TestOutcome:
        results = [
            self._matcher.evaluate(record, item.definition, selected_via=item.selected_via)
            for item in plan
        ]
        report = TestReport.build(input if input is not None else record.source, results)

        logger.info(
            "structured_data_test_complete",
            extra={
                "input": report.input,
                "schemas_tested": len(report.results),
                "overall_passed": report.overall_passed,
            },
        )
        if report.overall_passed:
            return TestPassed(report=report)
        return TestFailed(report=report)

    def run(
        self,
        record: ExtractedRecord,
        selections: Sequence[Selection | str],
        input: str | None = None,
    ) -> TestOutcome:
        """Resolve and evaluate in one call. No selections means auto-detect."""
        plan = self.resolve(selections) if selections else self.detect(record)
        return self.evaluate(record, plan, input=input)

    def run_or_raise(
        self,
        record: ExtractedRecord,
        selections: Sequence[Selection | str],
        input: str | None = None,
    ) -> TestReport:
        """Like run(), but raises ValidationFailedError on a failed test."""
        return self.run(record, selections, input=input).raise_for_failure()
