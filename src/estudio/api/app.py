"""
Main FastAPI application for the Estudio generation backend
"""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .. import __version__
from ..config import settings
from ..generation.orchestrator import GenerationOrchestrator, create_orchestrator
from ..logging import configure_logging, get_logger
from ..middleware import LoggingContextMiddleware

# Configure logging before creating logger
configure_logging(debug=settings.debug, log_level=settings.log_level)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    logger.info("Starting Estudio API...")

    if getattr(app.state, "orchestrator", None) is not None:
        # Injected by create_app (tests, embedding); nothing to own
        yield
        logger.info("Shutting down Estudio API...")
        return

    async with httpx.AsyncClient(timeout=settings.http_timeout_seconds) as http_client:
        app.state.orchestrator = create_orchestrator(settings, http_client=http_client)
        logger.info(
            "Generation orchestrator ready",
            models=len(app.state.orchestrator.registry),
            adapters=[a.name for a in app.state.orchestrator.adapters.list_all()],
        )
        yield
        app.state.orchestrator = None

    logger.info("Shutting down Estudio API...")


def create_app(orchestrator: GenerationOrchestrator | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        orchestrator: Prebuilt orchestrator; when None one is built from settings at startup
    """
    app = FastAPI(
        title="Estudio API",
        description="Image, video and voice generation across AI providers",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )
    app.state.orchestrator = orchestrator

    app.add_middleware(LoggingContextMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():  # pyright: ignore [reportUnusedFunction]
        """Health check endpoint."""
        return {"status": "healthy", "version": __version__}

    from .endpoints import generations, voices

    app.include_router(generations.router, prefix="/api", tags=["Generations"])
    app.include_router(voices.router, prefix="/api", tags=["Voices"])

    return app


# Create the main application instance
app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "estudio.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
        log_level=settings.log_level.lower(),
    )
