"""FastAPI application entry point for sdtt."""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sdtt.api.routes import router
from sdtt.config.settings import APIConfig, TesterConfig
from sdtt.telemetry.errors import configure_logging

SERVICE_VERSION = "1.0.0"


def create_app(api_config: APIConfig | None = None) -> FastAPI:
    """Factory function for creating the FastAPI application."""
    api_config = api_config or APIConfig()
    configure_logging(TesterConfig().log_level)

    app = FastAPI(
        title="sdtt",
        description="Structured data and metatag testing service",
        version=SERVICE_VERSION,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=api_config.allowed_origins,
        allow_credentials=False,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    app.include_router(router, prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict[str, str]:
        return {"status": "healthy", "service": "sdtt", "version": SERVICE_VERSION}

    return app


app = create_app()
