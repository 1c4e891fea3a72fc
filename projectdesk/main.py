"""FastAPI application factory for the sandbox API.

The sandbox serves the backend contract the workspace consumes
(``/api/v1/projects``, ``/customers``, ``/files``) from in-memory demo data,
so the workspace can be exercised without the real backend.
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from projectdesk.config import get_settings
from projectdesk.infrastructure.dependencies import get_sandbox_backend
from projectdesk.infrastructure.logging.log_config import setup_logging
from projectdesk.presentation.api.router import router as api_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan — configure logging and seed the sandbox data."""
    setup_logging()
    get_sandbox_backend()
    logger.info("Sandbox API ready")
    yield


def create_app() -> FastAPI:
    """Factory function that builds and configures the FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title=settings.app_title,
        version=settings.app_version,
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount API routes
    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "projectdesk.main:app",
        host="127.0.0.1",
        port=8020,
        reload=True,
    )
