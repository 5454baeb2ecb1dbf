"""HTML extractor: pulls structured data out of a document with BeautifulSoup.

Supported serializations:

- ``jsonld``: ``<script type="application/ld+json">`` blocks, including
  top-level arrays and ``@graph`` containers. Items are grouped by ``@type``.
- ``microdata``: ``itemscope``/``itemtype``/``itemprop`` trees.
- ``rdfa``: ``typeof``/``property`` trees (prefixes such as ``schema:`` are
  dropped).
- ``og`` / ``twitter``: ``<meta property="og:*">`` and ``<meta name="twitter:*">``
  tags, keyed without their prefix.
- ``metatags``: the remaining named ``<meta>`` tags, the document title and
  the canonical link.

Only the first occurrence of a type or a meta key is kept.
"""

from __future__ import annotations

import copy
import json
import logging
from dataclasses import dataclass
from typing import Any

from bs4 import BeautifulSoup, Tag

from sdtt.errors import ExtractionError
from sdtt.extraction.base import Document
from sdtt.extraction.record import ExtractedRecord
from sdtt.telemetry.errors import ErrorCode, emit_structured_error

logger = logging.getLogger(__name__)

_URL_ATTRIBUTES = {
    "a": "href",
    "link": "href",
    "area": "href",
    "img": "src",
    "audio": "src",
    "video": "src",
    "source": "src",
    "embed": "src",
    "iframe": "src",
    "track": "src",
    "object": "data",
}
_META_NAMESPACES = ("og", "twitter")


@dataclass(frozen=True)
class _TreeSyntax:
    """Attribute names of an inline item-tree serialization."""

    scope: str
    prop: str
    type: str


_MICRODATA = _TreeSyntax(scope="itemscope", prop="itemprop", type="itemtype")
_RDFA = _TreeSyntax(scope="typeof", prop="property", type="typeof")


def _short_name(value: str) -> str:
    """Strip vocabulary URLs and prefixes: ``https://schema.org/Article`` -> ``Article``."""
    value = value.strip().rstrip("/")
    for sep in ("/", "#"):
        if sep in value:
            value = value.rsplit(sep, 1)[-1]
    if ":" in value:
        value = value.rsplit(":", 1)[-1]
    return value


def _add_value(target: dict[str, Any], key: str, value: Any) -> None:
    if key not in target:
        target[key] = value
    elif isinstance(target[key], list):
        target[key].append(value)
    else:
        target[key] = [target[key], value]


def _add_group(namespace: dict[str, Any], types: list[str], item: dict[str, Any]) -> None:
    for type_name in types:
        if type_name and type_name not in namespace:
            namespace[type_name] = copy.deepcopy(item)


class HtmlExtractor:
    """Default Extractor implementation for HTML documents."""

    def __init__(self, parser: str = "lxml") -> None:
        self._parser = parser

    def extract(self, document: Document) -> ExtractedRecord:
        if not isinstance(document.content, str):
            raise ExtractionError(
                f"Document content must be text, got {type(document.content).__name__}"
            )
        try:
            soup = BeautifulSoup(document.content, self._parser)
        except (TypeError, ValueError) as exc:
            raise ExtractionError(f"Cannot parse document {document.source}: {exc}") from exc

        data: dict[str, dict[str, Any]] = {}
        sections = {
            "jsonld": self._extract_jsonld(soup, document.source),
            "microdata": self._extract_tree(soup, _MICRODATA),
            "rdfa": self._extract_tree(soup, _RDFA),
            **self._extract_meta(soup),
        }
        for fmt, values in sections.items():
            if values:
                data[fmt] = values

        logger.debug(
            "document_extracted",
            extra={"source": document.source, "formats": list(data)},
        )
        return ExtractedRecord(data=data, source=document.source)

    # --- JSON-LD ---

    def _extract_jsonld(self, soup: BeautifulSoup, source: str | None) -> dict[str, Any]:
        namespace: dict[str, Any] = {}
        for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
            raw = script.string if script.string is not None else script.get_text()
            try:
                payload = json.loads(raw)
            except (json.JSONDecodeError, TypeError) as exc:
                emit_structured_error(
                    logger,
                    code=ErrorCode.MALFORMED_MARKUP_SKIPPED,
                    message=f"Invalid JSON-LD block: {exc}",
                    suppressed=True,
                    source=source,
                )
                continue
            for item in self._jsonld_items(payload):
                _add_group(namespace, self._jsonld_types(item), item)
        return namespace

    def _jsonld_items(self, payload: Any) -> list[dict[str, Any]]:
        if isinstance(payload, list):
            return [item for entry in payload for item in self._jsonld_items(entry)]
        if not isinstance(payload, dict):
            return []
        if "@graph" in payload:
            return self._jsonld_items(payload["@graph"])
        return [{k: v for k, v in payload.items() if k != "@context"}]

    @staticmethod
    def _jsonld_types(item: dict[str, Any]) -> list[str]:
        types = item.get("@type", [])
        if isinstance(types, str):
            types = [types]
        return [_short_name(t) for t in types if isinstance(t, str)]

    # --- Microdata / RDFa ---

    def _extract_tree(self, soup: BeautifulSoup, syntax: _TreeSyntax) -> dict[str, Any]:
        namespace: dict[str, Any] = {}
        for element in soup.find_all(attrs={syntax.scope: True}):
            if element.has_attr(syntax.prop):
                continue  # nested item, reached through its parent
            item = self._read_item(element, syntax)
            _add_group(namespace, item.get("@type", []), item)
        return namespace

    def _read_item(self, element: Tag, syntax: _TreeSyntax) -> dict[str, Any]:
        raw_types = element.get(syntax.type) or ""
        if isinstance(raw_types, list):
            raw_types = " ".join(raw_types)
        item: dict[str, Any] = {"@type": [_short_name(t) for t in raw_types.split()]}
        self._collect_properties(element, syntax, item)
        return item

    def _collect_properties(self, element: Tag, syntax: _TreeSyntax, item: dict[str, Any]) -> None:
        for child in element.find_all(True, recursive=False):
            names = child.get(syntax.prop)
            if names:
                if isinstance(names, list):
                    names = " ".join(names)
                if child.has_attr(syntax.scope):
                    value: Any = self._read_item(child, syntax)
                else:
                    value = self._property_value(child)
                for name in names.split():
                    _add_value(item, _short_name(name), value)
                if child.has_attr(syntax.scope):
                    continue
            elif child.has_attr(syntax.scope):
                continue  # separate top-level item
            self._collect_properties(child, syntax, item)

    @staticmethod
    def _property_value(element: Tag) -> str:
        if element.has_attr("content"):
            return element["content"]
        attribute = _URL_ATTRIBUTES.get(element.name)
        if attribute and element.has_attr(attribute):
            return element[attribute]
        if element.has_attr("resource"):
            return element["resource"]
        if element.name == "time" and element.has_attr("datetime"):
            return element["datetime"]
        if element.name in {"data", "meter"} and element.has_attr("value"):
            return element["value"]
        return element.get_text(" ", strip=True)

    # --- Meta tags ---

    def _extract_meta(self, soup: BeautifulSoup) -> dict[str, dict[str, Any]]:
        sections: dict[str, dict[str, Any]] = {fmt: {} for fmt in _META_NAMESPACES}
        metatags: dict[str, Any] = {}

        for meta in soup.find_all("meta"):
            key = meta.get("property") or meta.get("name")
            content = meta.get("content")
            if not key or content is None:
                continue
            key = key.strip()
            prefix, sep, rest = key.partition(":")
            if sep and prefix.lower() in sections:
                sections[prefix.lower()].setdefault(rest, content)
            elif meta.has_attr("name"):
                metatags.setdefault(key.lower(), content)

        if soup.title is not None and soup.title.string:
            metatags.setdefault("title", soup.title.string.strip())
        canonical = soup.find("link", rel="canonical")
        if canonical is not None and canonical.get("href"):
            metatags.setdefault("canonical", canonical["href"])

        sections["metatags"] = metatags
        return sections
