"""
FastAPI Main Application - Unified API entry point.

Run with: uvicorn bitext.interfaces.api.main:app --reload
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from bitext import __version__
from bitext.config import ErrorCode, get_settings

from .deps import get_orchestrator
from .middleware import (
    ErrorHandlerMiddleware,
    LatencyMiddleware,
    RequestIDMiddleware,
    error_body,
)
from .routes import health, translate

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting Bitext API...")
    logger.info("  Default model: %s", settings.default_model)

    yield

    logger.info("Shutting down Bitext API...")
    get_orchestrator.cache_clear()


def create_app() -> FastAPI:
    """Create FastAPI application."""
    settings = get_settings()

    app = FastAPI(
        title="Bitext API",
        description="Sentence-aligned Chinese/English translation with vocabulary",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    # Add middleware (order matters - first added = innermost)
    app.add_middleware(ErrorHandlerMiddleware, debug=settings.api_debug)
    app.add_middleware(LatencyMiddleware)
    app.add_middleware(RequestIDMiddleware)

    allowed_origins = [
        "http://localhost:3000",
        "http://localhost:8000",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:8000",
    ]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        """Malformed bodies get the same 400 envelope as empty input."""
        first = exc.errors()[0] if exc.errors() else {}
        return JSONResponse(
            status_code=400,
            content=error_body(
                request,
                ErrorCode.VALIDATION_ERROR,
                first.get("msg", "Invalid request body"),
                settings.api_debug,
            ),
        )

    app.include_router(health.router, tags=["Health"])
    app.include_router(translate.router, prefix="/api", tags=["Translation"])

    return app


# Create app instance
app = create_app()
