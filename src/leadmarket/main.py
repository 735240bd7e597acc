# LeadMarket - Lead Marketplace Core
# Copyright (C) 2025 Luiz Frias <luizf35@gmail.com>
# Form F[x] Labs
#
# This software is dual-licensed under AGPL-3.0 and Commercial License.
# For commercial licensing, contact: luizf35@gmail.com
# See LICENSE file for full terms.

"""LeadMarket - Main Application Module."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from beartype import beartype
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .api.v1 import router as v1_router
from .core.config import get_settings
from .core.logging_utils import configure_logging, get_logger
from .schemas.api import APIInfo
from .services.rating import get_carrier_catalog

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application lifecycle - startup and shutdown."""
    settings = get_settings()
    logger.info("Starting %s in %s mode", settings.app_name, settings.api_env)

    catalog = get_carrier_catalog()
    logger.info("Carrier catalog loaded with %d carriers", len(catalog))

    yield

    logger.info("Shutting down %s", settings.app_name)


@beartype
def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    settings = get_settings()
    configure_logging(level=settings.log_level)

    app = FastAPI(
        title=settings.app_name,
        description="Multi-carrier quote comparison and lead marketplace",
        version=__version__,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(v1_router)

    @app.get("/")
    async def root() -> APIInfo:
        """Root endpoint returning API information."""
        return APIInfo(
            name=settings.app_name,
            version=__version__,
            status="operational",
            environment=settings.api_env,
        )

    return app


@beartype
def main() -> None:
    """Run the main application entry point."""
    settings = get_settings()

    uvicorn.run(
        "leadmarket.main:create_app",
        factory=True,
        host=settings.api_host,
        port=settings.api_port,
        log_level="info" if not settings.is_production else "error",
    )


if __name__ == "__main__":
    main()
