"""API middleware: CORS, request logging, and error handling.

# ─── MIDDLEWARE EXECUTION ORDER ────────────────────────────────────────
#
# Starlette middleware is a stack (LIFO - last added, first executed):
#
#   In main.py:
#     app.add_middleware(ErrorHandlingMiddleware)   # added 1st → inner
#     app.add_middleware(RequestLoggingMiddleware)  # added 2nd → outer
#
#   Request flow:
#     Client → RequestLogging → ErrorHandling → route handler
#
# RequestLoggingMiddleware therefore logs the final status code, including
# error envelopes produced by ErrorHandlingMiddleware.
#
# Request validation failures and HTTPException are answered by FastAPI's
# own exception middleware below the route stack, before ErrorHandling sees
# them, so register_exception_handlers() renders those in the envelope too.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from fedcomments.api.schemas import ErrorResponse
from fedcomments.utils.errors import ExportTooLargeError, FedCommentsError
from fedcomments.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(
    app: FastAPI,
    *,
    allowed_origins: list[str] | None = None,
    allow_methods: list[str] | None = None,
    allow_headers: list[str] | None = None,
) -> None:
    """Add CORS middleware for the local browser UIs.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]``.
    allow_methods, allow_headers:
        Defaults to ``["*"]`` when not configured.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins or ["*"],
        allow_credentials=True,
        allow_methods=allow_methods or ["*"],
        allow_headers=allow_headers or ["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every HTTP request with method, path, status code, and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=status_code,
                duration_ms=duration_ms,
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert raised errors into the JSON error envelope.

    ``FedCommentsError`` subclasses use their own ``status_code`` (404 for a
    missing comment, 400 for a refused export).  Anything else is a 500 whose
    message is passed through in ``error``; the traceback stays in the logs.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except FedCommentsError as exc:
            log = _logger.warning if exc.status_code < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                source=exc.source_name,
                status=exc.status_code,
                path=str(request.url.path),
            )
            body = ErrorResponse(
                error=exc.message,
                total_comments=exc.total_comments if isinstance(exc, ExportTooLargeError) else None,
            )
            return JSONResponse(
                status_code=exc.status_code,
                content=body.model_dump(by_alias=True, exclude_none=True),
            )
        except Exception as exc:
            _logger.exception(
                "unhandled_error",
                error_type=type(exc).__name__,
                path=str(request.url.path),
            )
            body = ErrorResponse(error=str(exc) or type(exc).__name__)
            return JSONResponse(
                status_code=500,
                content=body.model_dump(by_alias=True, exclude_none=True),
            )


# ---------------------------------------------------------------------------
# Framework exception handlers
# ---------------------------------------------------------------------------


def _error_response(status_code: int, message: str, headers: dict[str, str] | None = None) -> JSONResponse:
    body = ErrorResponse(error=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(by_alias=True, exclude_none=True),
        headers=headers,
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    problems = []
    for err in exc.errors():
        location = ".".join(str(part) for part in err.get("loc", ()))
        message = err.get("msg", "invalid value")
        problems.append(f"{location}: {message}" if location else message)
    if not problems:
        return "Invalid request"
    return "Invalid request: " + "; ".join(problems)


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _describe_validation_error(exc)
    _logger.info("request_validation_failed", path=str(request.url.path), error=message)
    return _error_response(422, message)


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    _logger.info("http_exception", path=str(request.url.path), status=exc.status_code, detail=exc.detail)
    return _error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))


def register_exception_handlers(app: FastAPI) -> None:
    """Render framework-level errors (422 validation, HTTPException) in the error envelope."""
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
