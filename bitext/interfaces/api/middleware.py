"""
API Middleware - Request/response processing.

Provides:
- Request ID tracking
- Response latency measurement
- Error handling with taxonomy codes
"""

from __future__ import annotations

import logging
import time
import uuid
from collections.abc import Awaitable, Callable
from datetime import datetime, timezone
from typing import Any

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

from bitext.config.errors import BitextError, ErrorCode

logger = logging.getLogger(__name__)


def error_body(
    request: Request,
    code: ErrorCode,
    message: str,
    debug: bool = False,
) -> dict[str, Any]:
    """Failure envelope shared by every error response."""
    content: dict[str, Any] = {
        "success": False,
        "message": message,
        "code": code.value,
        "request_id": getattr(request.state, "request_id", "unknown"),
    }
    if debug:
        content["debug"] = {
            "model": getattr(request.state, "model_id", None),
            "has_credential": getattr(request.state, "has_credential", None),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
    return content


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach request ID for tracing across logs and responses."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id

        return response


class LatencyMiddleware(BaseHTTPMiddleware):
    """Track and log request latency."""

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        start_time = time.perf_counter()

        response = await call_next(request)

        duration_ms = (time.perf_counter() - start_time) * 1000
        response.headers["X-Response-Time-Ms"] = f"{duration_ms:.2f}"

        logger.info(
            "%s %s status=%d latency_ms=%.2f request_id=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            getattr(request.state, "request_id", "unknown"),
        )

        return response


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Convert BitextError exceptions to the failure envelope."""

    def __init__(self, app: ASGIApp, debug: bool = False) -> None:
        super().__init__(app)
        self.debug = debug

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        try:
            return await call_next(request)
        except BitextError as e:
            logger.error(
                "%s: %s request_id=%s details=%s",
                e.code.value,
                e.message,
                getattr(request.state, "request_id", "unknown"),
                e.details,
            )
            return JSONResponse(
                status_code=error_code_to_status(e.code),
                content=error_body(request, e.code, e.message, self.debug),
            )
        except Exception as e:
            logger.exception(
                "Unhandled error: %s request_id=%s",
                str(e),
                getattr(request.state, "request_id", "unknown"),
            )
            return JSONResponse(
                status_code=500,
                content=error_body(request, ErrorCode.INTERNAL_ERROR, "Internal server error", self.debug),
            )


def error_code_to_status(code: ErrorCode) -> int:
    """Map error codes to HTTP status codes."""
    mapping = {
        # 400 Bad Request
        ErrorCode.VALIDATION_ERROR: 400,
        ErrorCode.UNSUPPORTED_MODEL: 400,
        # 500 operator misconfiguration
        ErrorCode.MISSING_ENDPOINT: 500,
        ErrorCode.MISSING_CREDENTIAL: 500,
        # 502 upstream model failures
        ErrorCode.STREAM_FAILED: 502,
        ErrorCode.POLL_TRANSPORT_FAILED: 502,
        ErrorCode.NO_ANSWER_FOUND: 502,
        ErrorCode.EXTRACTION_FAILED: 502,
        # 504 Gateway Timeout
        ErrorCode.POLLING_TIMEOUT: 504,
    }
    return mapping.get(code, 500)
