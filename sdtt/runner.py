"""Test runner: selection, document acquisition, extraction, aggregation.

Selections are resolved before the document is loaded, so an unknown schema
or preset name never costs a page render.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from pathlib import Path

from sdtt.browser.layer import render_url
from sdtt.config.settings import TesterConfig
from sdtt.config.url_policy import looks_like_url, validate_target_url
from sdtt.engine.aggregator import Aggregator, TestOutcome
from sdtt.engine.matcher import Matcher
from sdtt.engine.report import TestReport
from sdtt.engine.type_checks import TypeChecker
from sdtt.errors import DocumentLoadError, ExtractionError, SelectionError, TargetURLRejected
from sdtt.extraction.base import Document, Extractor
from sdtt.extraction.html import HtmlExtractor
from sdtt.registry.builtin import Registries, load_registries
from sdtt.registry.selection import Selection, SelectionKind
from sdtt.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Awaitable[Document]]


class StructuredDataTester:
    """Runs structured data tests against files, URLs or raw documents."""

    def __init__(
        self,
        config: TesterConfig | None = None,
        registries: Registries | None = None,
        extractor: Extractor | None = None,
        fetcher: Fetcher | None = None,
    ) -> None:
        self._config = config or TesterConfig()
        self._registries = registries or load_registries(self._config.registry)
        self._extractor = extractor or HtmlExtractor()
        self._fetcher = fetcher or self._render
        self._aggregator = Aggregator(
            self._registries, Matcher(TypeChecker(self._config.type_checks))
        )

    @property
    def registries(self) -> Registries:
        return self._registries

    @property
    def aggregator(self) -> Aggregator:
        return self._aggregator

    def parse(
        self,
        presets: Sequence[str] = (),
        schemas: Sequence[str] = (),
    ) -> list[Selection]:
        """Parse preset tokens followed by schema tokens."""
        try:
            return [
                *self._aggregator.parse(presets, SelectionKind.PRESET),
                *self._aggregator.parse(schemas, SelectionKind.SCHEMA),
            ]
        except SelectionError as exc:
            emit_structured_error(
                logger,
                code=ErrorCode.SELECTION_REJECTED,
                message=str(exc),
                suppressed=False,
            )
            raise

    async def _render(self, url: str) -> Document:
        return await render_url(url, self._config.browser)

    async def load(self, source: str | Path | Document) -> Document:
        """Turn a URL, a file path or an already-loaded Document into a Document."""
        if isinstance(source, Document):
            return source
        text = str(source)
        if isinstance(source, str) and looks_like_url(text):
            check = validate_target_url(text, self._config.url_policy)
            if not check.allowed:
                raise TargetURLRejected(f"Target URL rejected: {check.reason}")
            return await self._fetcher(text)

        path = Path(text)
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise DocumentLoadError(f"Unable to open file '{text}'") from exc
        return Document(content=content, source=text)

    async def test(
        self,
        source: str | Path | Document,
        selections: Sequence[Selection | str] = (),
    ) -> TestOutcome:
        """Test one input. No selections means auto-detect the schemas present."""
        plan = self._aggregator.resolve(selections)

        label = source.source if isinstance(source, Document) else str(source)
        try:
            document = await self.load(source)
            record = self._extractor.extract(document)
        except ExtractionError as exc:
            code = (
                ErrorCode.DOCUMENT_LOAD_FAILED
                if isinstance(exc, DocumentLoadError)
                else ErrorCode.EXTRACTION_FAILED
            )
            emit_structured_error(
                logger, code=code, message=str(exc), suppressed=False, source=label
            )
            raise

        if not selections:
            plan = self._aggregator.detect(record)
        outcome = self._aggregator.evaluate(record, plan, input=label)
        if not outcome.passed:
            logger.warning(
                "structured_data_test_failed",
                extra={
                    "error_code": ErrorCode.VALIDATION_FAILED,
                    "source": label,
                    "failed": [
                        r.schema_id.label for r in outcome.report.results if not r.passed
                    ],
                },
            )
        return outcome

    async def test_many(
        self,
        sources: Sequence[str | Path | Document],
        selections: Sequence[Selection | str] = (),
    ) -> list[TestOutcome]:
        """Test several inputs concurrently; outcomes are in input order.

        The first failure cancels the remaining inputs and is re-raised.
        """
        self._aggregator.resolve(selections)
        tasks = [asyncio.ensure_future(self.test(s, selections)) for s in sources]
        try:
            return list(await asyncio.gather(*tasks))
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise


async def structured_data_test(
    source: str | Path | Document,
    presets: Sequence[str] = (),
    schemas: Sequence[str] = (),
    config: TesterConfig | None = None,
) -> TestReport:
    """Test one input and return its report.

    Raises ValidationFailedError (carrying the report) when the test fails.
    """
    tester = StructuredDataTester(config)
    selections = tester.parse(presets, schemas)
    outcome = await tester.test(source, selections)
    return outcome.raise_for_failure()
