"""Leafee API layer: routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from src.api.routes import router
from src.api.schemas import (
    ErrorResponse,
    HealthResponse,
    PlantDetailsRequest,
    ProvidersResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "register_exception_handlers",
    "router",
    "ErrorResponse",
    "HealthResponse",
    "PlantDetailsRequest",
    "ProvidersResponse",
]
