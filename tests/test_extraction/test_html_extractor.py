"""Tests for the BeautifulSoup HTML extractor."""

import json
import logging

import pytest

from sdtt.errors import ExtractionError
from sdtt.extraction.base import Document
from sdtt.extraction.html import HtmlExtractor

ARTICLE_JSONLD = {
    "@context": "https://schema.org",
    "@type": "Article",
    "headline": "Structured data in practice",
    "image": ["https://example.com/cover.jpg"],
    "datePublished": "2024-05-01T08:00:00Z",
    "author": {"@type": "Person", "name": "Ada Lovelace"},
}

PAGE = f"""
<html>
<head>
  <title> Example page </title>
  <meta name="description" content="A page about structured data">
  <meta name="viewport" content="width=device-width">
  <meta property="og:title" content="OG title">
  <meta property="og:type" content="article">
  <meta property="og:image" content="https://example.com/og.jpg">
  <meta property="og:image" content="https://example.com/og-second.jpg">
  <meta name="twitter:card" content="summary">
  <meta name="twitter:title" content="Twitter title">
  <link rel="canonical" href="https://example.com/page">
  <script type="application/ld+json">{json.dumps(ARTICLE_JSONLD)}</script>
  <script type="application/ld+json">
    {{"@context": "https://schema.org", "@graph": [
      {{"@type": "Organization", "name": "ACME", "url": "https://acme.example"}},
      {{"@type": ["WebSite", "CreativeWork"], "name": "ACME site"}}
    ]}}
  </script>
  <script type="application/ld+json">{{ not json </script>
</head>
<body>
  <div itemscope itemtype="https://schema.org/Product">
    <h1 itemprop="name">Widget</h1>
    <img itemprop="image" src="/img/widget.png">
    <div>
      <span itemprop="description">A very fine widget</span>
    </div>
    <div itemprop="offers" itemscope itemtype="https://schema.org/Offer">
      <meta itemprop="price" content="19.99">
      <span itemprop="priceCurrency">USD</span>
    </div>
    <a itemprop="sameAs" href="https://a.example">a</a>
    <a itemprop="sameAs" href="https://b.example">b</a>
  </div>
  <div vocab="https://schema.org/" typeof="Event">
    <span property="name">Launch party</span>
    <time property="startDate" datetime="2024-06-01T19:00">June 1st</time>
    <div property="location" typeof="Place">
      <span property="name">Town hall</span>
    </div>
  </div>
  <article typeof="schema:BlogPosting">
    <h2 property="schema:headline">Blog title</h2>
  </article>
</body>
</html>
"""


@pytest.fixture
def record():
    return HtmlExtractor().extract(Document(content=PAGE, source="page.html"))


class TestJsonLd:
    def test_items_grouped_by_type(self, record):
        article = record.data["jsonld"]["Article"]
        assert article["headline"] == "Structured data in practice"
        assert "@context" not in article

    def test_graph_items_and_multiple_types(self, record):
        jsonld = record.data["jsonld"]
        assert jsonld["Organization"]["name"] == "ACME"
        assert jsonld["WebSite"] == jsonld["CreativeWork"]

    def test_malformed_block_is_skipped_and_logged(self, caplog):
        with caplog.at_level(logging.ERROR):
            record = HtmlExtractor().extract(Document(content=PAGE, source="page.html"))
        assert "Article" in record.data["jsonld"]
        assert any(
            getattr(r, "error_code", None) == "MALFORMED_MARKUP_SKIPPED" for r in caplog.records
        )

    def test_multi_type_groups_are_independent(self, record):
        jsonld = record.data["jsonld"]
        assert jsonld["WebSite"] is not jsonld["CreativeWork"]

    def test_top_level_array(self):
        html = (
            '<script type="application/ld+json">'
            '[{"@type": "Person", "name": "Ada"}, {"@type": "Person", "name": "Grace"}]'
            "</script>"
        )
        record = HtmlExtractor().extract(Document(content=html))
        assert record.data["jsonld"]["Person"]["name"] == "Ada"


class TestMicrodata:
    def test_top_level_item(self, record):
        product = record.data["microdata"]["Product"]
        assert product["name"] == "Widget"
        assert product["image"] == "/img/widget.png"
        assert product["description"] == "A very fine widget"

    def test_nested_item(self, record):
        offers = record.data["microdata"]["Product"]["offers"]
        assert offers["@type"] == ["Offer"]
        assert offers["price"] == "19.99"
        assert offers["priceCurrency"] == "USD"

    def test_nested_item_not_hoisted(self, record):
        assert "Offer" not in record.data["microdata"]

    def test_repeated_property_becomes_list(self, record):
        assert record.data["microdata"]["Product"]["sameAs"] == [
            "https://a.example",
            "https://b.example",
        ]


class TestRdfa:
    def test_event_properties(self, record):
        event = record.data["rdfa"]["Event"]
        assert event["name"] == "Launch party"
        assert event["startDate"] == "2024-06-01T19:00"
        assert event["location"]["name"] == "Town hall"

    def test_prefixed_names(self, record):
        assert record.data["rdfa"]["BlogPosting"]["headline"] == "Blog title"


class TestMetaTags:
    def test_open_graph(self, record):
        og = record.data["og"]
        assert og["title"] == "OG title"
        assert og["type"] == "article"
        assert og["image"] == "https://example.com/og.jpg"

    def test_twitter(self, record):
        assert record.data["twitter"] == {"card": "summary", "title": "Twitter title"}

    def test_plain_metatags(self, record):
        metatags = record.data["metatags"]
        assert metatags["title"] == "Example page"
        assert metatags["description"] == "A page about structured data"
        assert metatags["canonical"] == "https://example.com/page"


class TestExtractor:
    def test_source_is_carried(self, record):
        assert record.source == "page.html"

    def test_empty_document_has_no_formats(self):
        record = HtmlExtractor().extract(Document(content=""))
        assert record.data == {}

    def test_non_text_content_rejected(self):
        with pytest.raises(ExtractionError):
            HtmlExtractor().extract(Document(content=b"<html></html>"))
