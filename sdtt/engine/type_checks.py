"""Value shape checks for present fields.

Rules:

- ``string``: a string or a number. Objects count when their ``name`` or
  ``@value`` is a string (``{"@type": "Person", "name": "Ada"}``).
- ``url``: an absolute URI with scheme and host. ``strict_urls`` limits the
  scheme to http/https. Objects count through ``url`` or ``@id``.
- ``image``: anything ``url`` accepts, an ImageObject with ``url`` or
  ``contentUrl``, a ``data:image/`` URI, or, with ``allow_relative_images``,
  a relative asset path.
- ``date``: ISO-8601 date or date-time.
- ``number``: int/float or a numeric string.

Lists are checked through their first present item.
"""

from __future__ import annotations

import math
import re
from collections.abc import Callable, Mapping
from datetime import date
from typing import Any
from urllib.parse import ParseResult, urlparse

from sdtt.config.settings import TypeCheckConfig
from sdtt.registry.schemas import ExpectedType

_ISO_DATE = re.compile(
    r"^(?P<date>\d{4}-\d{2}-\d{2})"
    r"(?:[T ]\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?$"
)
_WEB_SCHEMES = {"http", "https"}


def is_empty(value: Any) -> bool:
    """Absent-equivalent values: None, blank strings, empty containers."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set)):
        return all(is_empty(item) for item in value)
    if isinstance(value, Mapping):
        return len(value) == 0
    return False


def _parse_url(text: str) -> ParseResult | None:
    try:
        return urlparse(text)
    except ValueError:
        return None  # e.g. an unbalanced IPv6 bracket


def _first_present(value: Any) -> Any:
    if isinstance(value, (list, tuple)):
        for item in value:
            if not is_empty(item):
                return item
        return None
    return value


def _from_object(value: Any, *keys: str) -> Any:
    if isinstance(value, Mapping):
        for key in keys:
            if not is_empty(value.get(key)):
                return _first_present(value[key])
        return None
    return value


class TypeChecker:
    """Validates values against an ExpectedType under a TypeCheckConfig."""

    def __init__(self, config: TypeCheckConfig | None = None) -> None:
        self._config = config or TypeCheckConfig()
        self._checks: dict[ExpectedType, Callable[[Any], bool]] = {
            ExpectedType.STRING: self.is_string,
            ExpectedType.URL: self.is_url,
            ExpectedType.IMAGE: self.is_image,
            ExpectedType.DATE: self.is_date,
            ExpectedType.NUMBER: self.is_number,
        }

    @property
    def config(self) -> TypeCheckConfig:
        return self._config

    def check(self, expected_type: ExpectedType | None, value: Any) -> bool | None:
        """Return True/False, or None when no check applies."""
        if expected_type is None or not self._config.enabled:
            return None
        return self._checks[expected_type](_first_present(value))

    def is_string(self, value: Any) -> bool:
        value = _from_object(value, "name", "@value")
        if isinstance(value, bool):
            return False
        return isinstance(value, (str, int, float))

    def is_url(self, value: Any) -> bool:
        value = _from_object(value, "url", "@id")
        if not isinstance(value, str):
            return False
        parsed = _parse_url(value.strip())
        if parsed is None or not parsed.scheme or not parsed.netloc:
            return False
        if self._config.strict_urls:
            return parsed.scheme.lower() in _WEB_SCHEMES
        return True

    def is_image(self, value: Any) -> bool:
        value = _from_object(value, "url", "contentUrl", "@id")
        if not isinstance(value, str):
            return False
        text = value.strip()
        if text.lower().startswith("data:image/"):
            return True
        if self.is_url(text):
            return True
        if not self._config.allow_relative_images:
            return False
        parsed = _parse_url(text)
        if parsed is None:
            return False
        # Relative or protocol-relative asset reference.
        return not parsed.scheme and bool(parsed.path or parsed.netloc) and " " not in text

    def is_date(self, value: Any) -> bool:
        value = _from_object(value, "@value")
        if not isinstance(value, str):
            return False
        match = _ISO_DATE.match(value.strip())
        if match is None:
            return False
        try:
            date.fromisoformat(match.group("date"))
        except ValueError:
            return False
        return True

    def is_number(self, value: Any) -> bool:
        value = _from_object(value, "@value")
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return not (isinstance(value, float) and math.isnan(value))
        if isinstance(value, str):
            try:
                number = float(value.strip())
            except ValueError:
                return False
            return not math.isnan(number)
        return False
