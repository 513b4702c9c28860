"""API layer: routes, response schemas, and middleware."""

from fedcomments.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from fedcomments.api.routes import router, service_router
from fedcomments.api.schemas import ApiResponse, ErrorResponse, HealthResponse

__all__ = [
    "ApiResponse",
    "ErrorHandlingMiddleware",
    "ErrorResponse",
    "HealthResponse",
    "RequestLoggingMiddleware",
    "configure_cors",
    "register_exception_handlers",
    "router",
    "service_router",
]
