"""
ImageWatch API Main Application.

FastAPI application with CORS, error handling, and lifecycle management.
Requires Python 3.11+.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from api.dependencies import get_refresher, set_refresher
from api.routes.websocket import ImageUpdatedEvent, get_manager
from utils.config import get_settings
from utils.logger import configure_logging, get_logger
from watcher.models import MemoryImageReference
from watcher.refresher import close_refresher, open_refresher


# Initialize logging
configure_logging()
logger = get_logger("api")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """
    Application lifespan manager.

    Opens the image refresher when an image path is configured and
    forwards every swap to WebSocket clients.
    """
    settings = get_settings()
    logger.info(
        "starting_application",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
    )

    if settings.refresher.enabled and settings.refresher.image_path:
        loop = asyncio.get_running_loop()
        manager = get_manager()
        image = MemoryImageReference(settings.refresher.image_path)

        def publish(path: str) -> None:
            # Called from the refresh timer thread
            event = ImageUpdatedEvent(path=path)
            asyncio.run_coroutine_threadsafe(manager.broadcast(event.model_dump()), loop)

        image.subscribe(publish)
        refresher = open_refresher(image, settings.refresher, settings.project_dir)
        # An inert session is still published so /refresher reports 503
        set_refresher(refresher)

    yield

    logger.info("shutting_down_application")
    refresher = get_refresher()
    if refresher is not None:
        await asyncio.to_thread(close_refresher, refresher)
        set_refresher(None)


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI instance
    """
    settings = get_settings()

    application = FastAPI(
        title=settings.app_name,
        description="Image hot-swapping and QR/barcode generation",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @application.exception_handler(Exception)
    async def global_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        logger.exception(
            "unhandled_exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal server error",
                "message": str(exc) if settings.is_development else "An unexpected error occurred",
            },
        )

    @application.get("/health")
    async def health_check() -> dict[str, Any]:
        """Health check endpoint."""
        refresher = get_refresher()
        return {
            "status": "healthy",
            "version": settings.app_version,
            "refresher": "active" if refresher is not None and refresher.is_active else "inactive",
        }

    # Import and include routers here to avoid circular imports
    from api.routes import codes, refresher, websocket

    application.include_router(codes.router, prefix="/codes", tags=["Codes"])
    application.include_router(refresher.router, prefix="/refresher", tags=["Refresher"])
    application.include_router(websocket.router, prefix="/ws", tags=["WebSocket"])

    return application


# Create the application instance
app = create_app()
