"""REST API routes for sdtt.

Provides endpoints for:
- Listing the registered presets and schemas
- Running a structured data test against a URL or inline HTML
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator

from sdtt.api.auth import require_api_auth
from sdtt.config.settings import APIConfig
from sdtt.config.url_policy import looks_like_url
from sdtt.engine.report import TestReport
from sdtt.errors import ExtractionError, SelectionError, TargetURLRejected
from sdtt.extraction.base import Document
from sdtt.registry.presets import Preset
from sdtt.registry.schemas import SchemaDefinition
from sdtt.runner import StructuredDataTester

router = APIRouter()


@lru_cache(maxsize=1)
def get_tester() -> StructuredDataTester:
    """Process-wide tester; registries are built once on first use."""
    return StructuredDataTester()


# --- Request/Response Models ---


class RunTestRequest(BaseModel):
    """Request to test a URL or an inline HTML document."""

    url: str | None = None
    html: str | None = None
    presets: list[str] = Field(default_factory=list)
    schemas: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _exactly_one_source(self) -> RunTestRequest:
        if (self.url is None) == (self.html is None):
            raise ValueError("Provide either url or html, not both")
        return self


class RunTestResponse(BaseModel):
    status: Literal["passed", "failed"]
    report: TestReport


# --- Endpoints ---


@router.get("/presets", response_model=list[Preset])
async def list_presets(
    tester: StructuredDataTester = Depends(get_tester),
    _: str = Depends(require_api_auth),
) -> list[Preset]:
    return tester.registries.presets.list_all()


@router.get("/schemas", response_model=list[SchemaDefinition])
async def list_schemas(
    tester: StructuredDataTester = Depends(get_tester),
    _: str = Depends(require_api_auth),
) -> list[SchemaDefinition]:
    return tester.registries.schemas.list_all()


@router.post("/tests", response_model=RunTestResponse)
async def run_test(
    request: RunTestRequest,
    tester: StructuredDataTester = Depends(get_tester),
    _: str = Depends(require_api_auth),
) -> RunTestResponse:
    """Run a structured data test.

    A failed test is still a successful request: the response carries
    ``status="failed"`` and the full report.
    """
    try:
        selections = tester.parse(request.presets, request.schemas)
    except SelectionError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    if request.html is not None:
        if len(request.html.encode("utf-8")) > APIConfig().max_html_bytes:
            raise HTTPException(status_code=413, detail="html exceeds the size limit")
        source: str | Document = Document(content=request.html, source="inline")
    else:
        if not looks_like_url(request.url):
            raise HTTPException(status_code=400, detail="url must be an absolute URL")
        source = request.url

    try:
        outcome = await tester.test(source, selections)
    except TargetURLRejected as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ExtractionError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc

    return RunTestResponse(status=outcome.status, report=outcome.report)
