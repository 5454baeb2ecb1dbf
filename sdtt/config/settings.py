"""sdtt configuration settings."""

from __future__ import annotations

import os
from pathlib import Path
from typing import ClassVar
from urllib.parse import urlparse

from pydantic import BaseModel, Field, field_validator


def _bool_env(var_name: str, default: bool) -> bool:
    raw = os.getenv(var_name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


def _path_env(var_name: str) -> Path | None:
    raw = os.getenv(var_name, "").strip()
    return Path(raw) if raw else None


class TypeCheckConfig(BaseModel):
    """Value shape validation applied to present fields."""

    enabled: bool = Field(default_factory=lambda: _bool_env("SDTT_TYPE_CHECKS", True))
    strict_urls: bool = Field(default_factory=lambda: _bool_env("SDTT_STRICT_URLS", True))
    allow_relative_images: bool = Field(
        default_factory=lambda: _bool_env("SDTT_ALLOW_RELATIVE_IMAGES", True)
    )


class BrowserConfig(BaseModel):
    """Headless browser used to render URL inputs."""

    headless: bool = True
    viewport_width: int = 1280
    viewport_height: int = 720
    user_agent: str | None = None
    locale: str = "en-US"
    page_load_timeout_s: int = Field(
        default_factory=lambda: int(os.getenv("SDTT_PAGE_LOAD_TIMEOUT_S", "30"))
    )

    @field_validator("page_load_timeout_s")
    @classmethod
    def _validate_timeout(cls, value: int) -> int:
        if value < 1:
            raise ValueError("SDTT_PAGE_LOAD_TIMEOUT_S must be >= 1")
        return value


class URLPolicyConfig(BaseModel):
    """Which URL inputs may be fetched."""

    allowed_schemes: list[str] = Field(default_factory=lambda: ["http", "https"])
    block_local_hostnames: bool = Field(
        default_factory=lambda: _bool_env("SDTT_BLOCK_LOCAL_HOSTNAMES", True)
    )
    block_private_ips: bool = Field(
        default_factory=lambda: _bool_env("SDTT_BLOCK_PRIVATE_IPS", True)
    )


class RegistryConfig(BaseModel):
    """Optional JSON files replacing the built-in schema and preset tables."""

    schemas_path: Path | None = Field(default_factory=lambda: _path_env("SDTT_SCHEMAS_PATH"))
    presets_path: Path | None = Field(default_factory=lambda: _path_env("SDTT_PRESETS_PATH"))


class APIConfig(BaseModel):
    """API security and CORS controls from environment."""

    api_token: str = Field(default_factory=lambda: os.getenv("SDTT_API_TOKEN", ""))
    allowed_origins: list[str] = Field(
        default_factory=lambda: APIConfig.parse_allowed_origins(
            os.getenv("SDTT_ALLOWED_ORIGINS", "")
        )
    )
    max_html_bytes: int = Field(
        default_factory=lambda: int(os.getenv("SDTT_MAX_HTML_BYTES", str(5 * 1024 * 1024)))
    )

    @staticmethod
    def parse_allowed_origins(value: str) -> list[str]:
        if not value.strip():
            return ["http://localhost", "http://127.0.0.1"]
        origins = [origin.strip() for origin in value.split(",") if origin.strip()]
        if "*" in origins:
            raise ValueError("SDTT_ALLOWED_ORIGINS cannot include '*'")
        return origins

    @field_validator("allowed_origins")
    @classmethod
    def _validate_allowed_origins(cls, value: list[str]) -> list[str]:
        if not value:
            raise ValueError("allowed_origins cannot be empty")
        for origin in value:
            parsed = urlparse(origin)
            if parsed.scheme not in {"http", "https"} or not parsed.netloc:
                raise ValueError(f"Invalid CORS origin: {origin}")
        return value

    @field_validator("max_html_bytes")
    @classmethod
    def _validate_max_html_bytes(cls, value: int) -> int:
        if value < 1:
            raise ValueError("SDTT_MAX_HTML_BYTES must be >= 1")
        return value


class TesterConfig(BaseModel):
    """Root configuration for a structured data test run."""

    __test__: ClassVar[bool] = False

    type_checks: TypeCheckConfig = Field(default_factory=TypeCheckConfig)
    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    url_policy: URLPolicyConfig = Field(default_factory=URLPolicyConfig)
    registry: RegistryConfig = Field(default_factory=RegistryConfig)
    log_level: str = Field(default_factory=lambda: os.getenv("SDTT_LOG_LEVEL", "INFO"))
