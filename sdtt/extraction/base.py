"""Extractor interface consumed by the test runner."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from sdtt.extraction.record import ExtractedRecord


@dataclass(frozen=True)
class Document:
    """A loaded document, ready for extraction."""

    content: str
    source: str | None = None
    url: str | None = None


class Extractor(Protocol):
    """Turns a document into an ExtractedRecord.

    Implementations raise ExtractionError on malformed input.
    """

    def extract(self, document: Document) -> ExtractedRecord: ...
