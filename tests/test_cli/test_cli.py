"""Tests for the command line interface."""

from __future__ import annotations

import json

import pytest

from sdtt.cli import main
from sdtt.config.settings import RegistryConfig, TesterConfig
from sdtt.runner import StructuredDataTester

SOCIAL_PAGE = """
<html><head>
  <meta property="og:title" content="Launch">
  <meta property="og:type" content="article">
  <meta property="og:image" content="https://example.com/launch.png">
  <meta property="og:url" content="https://example.com/launch">
  <meta name="twitter:card" content="summary">
  <meta name="twitter:title" content="Launch">
</head></html>
"""


@pytest.fixture
def tester():
    config = TesterConfig(registry=RegistryConfig(schemas_path=None, presets_path=None))
    return StructuredDataTester(config)


@pytest.fixture
def page_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(SOCIAL_PAGE, encoding="utf-8")
    return path


class TestListing:
    def test_list_presets(self, tester, capsys):
        assert main(["--presets"], tester=tester) == 0
        out = capsys.readouterr().out
        assert out.startswith("Presets:")
        assert "SocialMedia" in out
        assert "og:Article, twitter:Card" in out

    def test_list_schemas(self, tester, capsys):
        assert main(["-s"], tester=tester) == 0
        out = capsys.readouterr().out
        assert "jsonld" in out
        assert "twitter" in out
        assert "Card" in out


class TestRun:
    def test_passing_preset(self, tester, page_file, capsys):
        assert main(["-f", str(page_file), "-p", "SocialMedia"], tester=tester) == 0
        out = capsys.readouterr().out
        assert "[PASS] og:Article (via SocialMedia)" in out
        assert "[PASS] twitter:Card (via SocialMedia)" in out
        assert "PASSED: 2/2 schemas passed" in out

    def test_failing_schema(self, tester, page_file, capsys):
        assert main(["-f", str(page_file), "-s", "jsonld:Article"], tester=tester) == 1
        out = capsys.readouterr().out
        assert "[FAIL] jsonld:Article" in out
        assert "  - headline: missing" in out
        assert "(optional)" in out
        assert "FAILED: 0/1 schemas passed" in out

    def test_json_output(self, tester, page_file, capsys):
        assert main(["-f", str(page_file), "-p", "Twitter", "--json"], tester=tester) == 0
        report = json.loads(capsys.readouterr().out)
        assert report["overall_passed"] is True
        assert report["results"][0]["schema_id"] == {"format": "twitter", "name": "Card"}

    def test_comma_separated_tokens(self, tester, page_file, capsys):
        argv = ["-f", str(page_file), "-s", "og:Article, twitter:Card"]
        assert main(argv, tester=tester) == 0
        assert "2/2 schemas passed" in capsys.readouterr().out


class TestErrors:
    def test_no_source(self, tester, capsys):
        assert main([], tester=tester) == 1
        assert "Must provide either URL" in capsys.readouterr().err

    def test_relative_url(self, tester, capsys):
        assert main(["-u", "example.com/page"], tester=tester) == 1
        assert "not an absolute URL" in capsys.readouterr().err

    def test_malformed_url(self, tester, capsys):
        assert main(["-u", "http://[broken/page"], tester=tester) == 1
        assert "not an absolute URL" in capsys.readouterr().err

    def test_unknown_preset(self, tester, page_file, capsys):
        assert main(["-f", str(page_file), "-p", "MySpace"], tester=tester) == 1
        assert '"MySpace" is not a valid preset.' in capsys.readouterr().err

    def test_unknown_schema(self, tester, page_file, capsys):
        assert main(["-f", str(page_file), "-s", "jsonld:Nope"], tester=tester) == 1
        assert '"jsonld:Nope" is not a valid schema.' in capsys.readouterr().err

    def test_missing_file(self, tester, tmp_path, capsys):
        assert main(["-f", str(tmp_path / "absent.html")], tester=tester) == 1
        assert "Unable to open file" in capsys.readouterr().err

    def test_url_and_file_are_exclusive(self, tester, page_file):
        with pytest.raises(SystemExit):
            main(["-u", "https://example.com", "-f", str(page_file)], tester=tester)
