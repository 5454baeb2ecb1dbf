"""Structured error telemetry helpers."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Canonical error codes for operational telemetry."""

    SELECTION_REJECTED = "SELECTION_REJECTED"
    DOCUMENT_LOAD_FAILED = "DOCUMENT_LOAD_FAILED"
    EXTRACTION_FAILED = "EXTRACTION_FAILED"
    MALFORMED_MARKUP_SKIPPED = "MALFORMED_MARKUP_SKIPPED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    BROWSER_CLEANUP_FAILED = "BROWSER_CLEANUP_FAILED"


def emit_structured_error(
    logger: logging.Logger,
    *,
    code: ErrorCode,
    message: str,
    suppressed: bool,
    source: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """Emit a structured telemetry event via logging."""
    logger.error(
        "sdtt_error",
        extra={
            "error_code": code,
            "error_message": message,
            "suppressed": suppressed,
            "source": source,
            "details": details or {},
        },
    )


def configure_logging(level: str = "INFO") -> None:
    """Install a root handler at the requested level (CLI and API entry points only)."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
