"""Exception taxonomy for structured data tests.

Selection errors are raised while resolving what to test, before any document
is loaded. Extraction errors come from the document side and are surfaced
unchanged. A validation failure is the expected "test failed" outcome and
always carries the complete report.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sdtt.engine.report import TestReport


class StructuredDataTestError(Exception):
    """Base class for every error raised by sdtt."""


class RegistryError(StructuredDataTestError):
    """Raised when static schema/preset configuration is inconsistent."""


class SelectionError(StructuredDataTestError, LookupError):
    """Raised when a selection token cannot be resolved."""

    def __init__(self, name: str, message: str | None = None) -> None:
        self.name = name
        super().__init__(message or name)


class UnknownSchemaError(SelectionError):
    def __init__(self, name: str, format: str | None = None) -> None:
        self.format = format
        label = f"{format}:{name}" if format else name
        super().__init__(name, f'"{label}" is not a valid schema.')


class UnknownPresetError(SelectionError):
    def __init__(self, name: str) -> None:
        super().__init__(name, f'"{name}" is not a valid preset.')


class ExtractionError(StructuredDataTestError):
    """Raised when a document cannot be turned into an extracted record."""


class DocumentLoadError(ExtractionError):
    """Raised when a file or URL cannot be read."""


class TargetURLRejected(DocumentLoadError):
    """Raised when a URL input is refused by the target URL policy."""


class ValidationFailedError(StructuredDataTestError):
    """The run completed but at least one schema is missing required fields."""

    def __init__(self, report: TestReport) -> None:
        self.report = report
        failed = [r.schema_id.label for r in report.results if not r.passed]
        super().__init__(f"Structured data validation failed: {', '.join(failed)}")
