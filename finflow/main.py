"""
FastAPI application entrypoint for the financial planning calculators.
"""

from __future__ import annotations

from fastapi import FastAPI

from finflow.api.routes import router as api_router
from finflow.core.config import get_settings
from finflow.core.logging import configure_logging


def create_app() -> FastAPI:
    """Factory for the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="finflow",
        version="0.1.0",
        description="REST API for financial calculators and intent-guided planning flows.",
    )
    app.include_router(api_router, prefix="/api")
    return app


app = create_app()

__all__ = ["app", "create_app"]
