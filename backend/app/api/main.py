"""Entry point for the FastAPI application.

This module constructs the FastAPI app, owns the single receipt store
for the process and wires routers, middleware and exception handlers.
When run with uvicorn it loads configuration from ``app.core.config``.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.endpoints.health import router as health_router
from app.api.middleware import BodySizeLimitMiddleware
from app.api.error_handlers import (
    generic_exception_handler,
    http_exception_handler,
    validation_exception_handler,
)
from app.api.routes.receipts import router as receipts_router
from app.core.config import settings
from app.core.observability import init_sentry, sentry_set_tags
from app.services.receipt_store import ReceiptStore

# Configure logging
logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    # Startup
    logger.info("Starting up %s (%s)...", settings.PROJECT_NAME, settings.ENVIRONMENT)
    if init_sentry("api"):
        logger.info("Sentry SDK initialized (api)")
    yield
    # Shutdown
    logger.info("Shutting down, dropping %d stored receipts...", len(app.state.receipt_store))
    app.state.receipt_store.close()


def create_app(store: Optional[ReceiptStore] = None) -> FastAPI:
    """Build the application around ``store`` (a fresh one by default)."""
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )
    app.state.receipt_store = store if store is not None else ReceiptStore()

    # Enrich Sentry scope with lightweight request info
    @app.middleware("http")
    async def sentry_context_middleware(request: Request, call_next):
        sentry_set_tags({"path": request.url.path, "method": request.method})
        return await call_next(request)

    app.add_middleware(BodySizeLimitMiddleware)

    # Register custom exception handlers
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)

    # Include routers
    app.include_router(receipts_router)
    app.include_router(health_router)

    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": f"Welcome to the {settings.PROJECT_NAME} API"}

    return app


app = create_app()


def run() -> None:
    """Serve the application with uvicorn using HOST/PORT from settings."""
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
