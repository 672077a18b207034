"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from studynotes import __version__
from studynotes.api.routes import router as documents_router
from studynotes.config import get_app_config
from studynotes.db.session import get_engine, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Create database tables on startup and release the engine on shutdown.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    logger.info("Starting Study Notes API...")
    engine = get_engine()
    await init_db(engine)
    yield
    logger.info("Shutting down Study Notes API...")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    config = get_app_config()

    application = FastAPI(
        title="Study Notes API",
        description=(
            "Turns uploaded PDF documents into structured markdown study notes. "
            "Extracts text, splits it into chunks, generates notes for each chunk "
            "with an LLM, and stores the assembled notes with a table of contents."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    application.include_router(documents_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "studynotes"}

    return application


app = create_app()
