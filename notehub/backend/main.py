"""
FastAPI Application Entry Point.

This is the main entry point for the notehub HTTP service.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from notehub.backend.api import health
from notehub.backend.api.rest import router as api_router
from notehub.backend.api.rest.endpoints.uploads import files_router
from notehub.backend.core.concurrency import shutdown_pools
from notehub.backend.core.config import get_app_config, get_frontend_dir
from notehub.backend.core.exception_handlers import register_exception_handlers
from notehub.backend.core.logging import get_logger, setup_logging
from notehub.backend.core.middleware import RequestContextMiddleware
from notehub.backend.core.utils import Clock, utc_now_seconds
from notehub.backend.services.attachments import AttachmentStorage
from notehub.backend.services.note_store import NoteStore

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the note store unless one was injected, and closes only the
    store it opened itself.
    """
    app_config = get_app_config()
    setup_logging(level=app_config.logging.level)

    owned_store: NoteStore | None = None
    if app.state.note_store is None:
        owned_store = NoteStore.from_config(clock=app.state.clock).open()
        app.state.note_store = owned_store

    app.state.attachments.ensure_directory()

    logger.info(
        "Application starting",
        extra={
            "app_name": app_config.application.name,
            "env": app_config.application.environment,
        },
    )
    try:
        yield
    finally:
        logger.info("Application shutting down")
        if owned_store is not None:
            owned_store.close()
            app.state.note_store = None
        await shutdown_pools()


def create_app(
    note_store: NoteStore | None = None,
    attachments: AttachmentStorage | None = None,
    clock: Clock | None = None,
) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        note_store: Already-open store to serve; when omitted the lifespan
            opens one from configuration
        attachments: Attachment storage; defaults to storage.yaml
        clock: Time provider for the review queue default cut-off
    """
    app_config = get_app_config()
    app_settings = app_config.application
    storage = attachments if attachments is not None else AttachmentStorage.from_config()

    app = FastAPI(
        title=app_settings.name,
        description=app_settings.description,
        version=app_settings.version,
        docs_url="/docs" if app_settings.docs_enabled else None,
        redoc_url="/redoc" if app_settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.state.note_store = note_store
    app.state.attachments = storage
    app.state.clock = clock if clock is not None else utc_now_seconds

    app.add_middleware(RequestContextMiddleware)

    cors_origins = app_settings.cors.origins
    if cors_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix=app_settings.api_prefix)
    app.include_router(files_router, prefix=storage.url_prefix, tags=["attachments"])

    # Catch-all mount, so it must come after every router
    frontend_dir = get_frontend_dir()
    if frontend_dir is not None and frontend_dir.is_dir():
        app.mount("/", StaticFiles(directory=frontend_dir, html=True), name="frontend")
    elif frontend_dir is not None:
        logger.warning("Frontend directory not found", extra={"path": str(frontend_dir)})

    return app


def get_app() -> FastAPI:
    """
    Get the application instance (lazy initialization).

    This function creates the app on first call and caches it.
    Use this instead of importing `app` directly to avoid
    import-time configuration errors.
    """
    global _app
    if _app is None:
        _app = create_app()
    return _app


# For uvicorn: `uvicorn notehub.backend.main:app`
def __getattr__(name: str) -> FastAPI:
    """Support lazy access to `app` for uvicorn compatibility."""
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
