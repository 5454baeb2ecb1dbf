"""Tests for settings validation and environment overrides."""

import pytest

from sdtt.config.settings import (
    APIConfig,
    BrowserConfig,
    RegistryConfig,
    TesterConfig,
    TypeCheckConfig,
)


def test_api_config_default_origins(monkeypatch):
    monkeypatch.delenv("SDTT_ALLOWED_ORIGINS", raising=False)
    cfg = APIConfig()
    assert cfg.allowed_origins == ["http://localhost", "http://127.0.0.1"]


def test_api_config_origins_from_env(monkeypatch):
    monkeypatch.setenv("SDTT_ALLOWED_ORIGINS", "https://a.example, https://b.example")
    assert APIConfig().allowed_origins == ["https://a.example", "https://b.example"]


def test_api_config_rejects_wildcard_origin():
    with pytest.raises(ValueError):
        APIConfig(allowed_origins=["*"])


def test_api_config_rejects_invalid_origin_url():
    with pytest.raises(ValueError):
        APIConfig(allowed_origins=["localhost:3000"])


def test_api_config_rejects_non_positive_html_limit():
    with pytest.raises(ValueError):
        APIConfig(max_html_bytes=0)


def test_browser_config_rejects_non_positive_timeout():
    with pytest.raises(ValueError):
        BrowserConfig(page_load_timeout_s=0)


def test_type_checks_from_env(monkeypatch):
    monkeypatch.setenv("SDTT_TYPE_CHECKS", "false")
    monkeypatch.setenv("SDTT_STRICT_URLS", "0")
    cfg = TypeCheckConfig()
    assert cfg.enabled is False
    assert cfg.strict_urls is False
    assert cfg.allow_relative_images is True


def test_registry_paths_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SDTT_SCHEMAS_PATH", str(tmp_path / "schemas.json"))
    monkeypatch.delenv("SDTT_PRESETS_PATH", raising=False)
    cfg = RegistryConfig()
    assert cfg.schemas_path == tmp_path / "schemas.json"
    assert cfg.presets_path is None


def test_tester_config_log_level(monkeypatch):
    monkeypatch.setenv("SDTT_LOG_LEVEL", "DEBUG")
    assert TesterConfig().log_level == "DEBUG"


def test_tester_config_is_not_collected_by_pytest():
    assert TesterConfig.__test__ is False
