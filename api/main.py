"""
FastAPI Application
===================

Demo service showing how correlog wires into a FastAPI app.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI

import correlog
from api import __version__
from api.routes.health import router as health_router
from correlog.config import Settings
from correlog.observability import get_logger, metrics_endpoint, setup_logging


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: correlog settings (default: read from the environment)
    """
    settings = settings or Settings.from_env()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan handler."""
        setup_logging(
            level=settings.log_level,
            json_format=settings.log_format.lower() == "json" or not settings.development,
        )
        correlog.set_router(correlog.EmissionRouter.from_settings(settings))
        logger = get_logger(__name__)
        logger.info(
            "Starting correlog demo API",
            version=__version__,
            environment=settings.environment,
        )
        correlog.log_application("info", f"correlog demo API {__version__} started")

        yield

        logger.info("Shutting down correlog demo API")
        correlog.reset_default_router()

    app = FastAPI(
        title="correlog demo API",
        description="Request correlation and structured log emission demo.",
        version=__version__,
        lifespan=lifespan,
        middleware=[correlog.request_correlator(header=settings.correlation_header)],
    )

    app.include_router(health_router)
    app.add_route("/metrics", metrics_endpoint)

    return app


# Create app instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
