"""Mapping of domain and configuration errors to HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from oidclink.adapter.error import AdapterError
from oidclink.domain.error import AuthenticationError, NotFoundError, ValidationError
from oidclink.util.error import ConfigurationError

logger = logging.getLogger(__name__)

_STATUS_CODES: dict[type[Exception], int] = {
    ConfigurationError: status.HTTP_404_NOT_FOUND,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    AuthenticationError: status.HTTP_401_UNAUTHORIZED,
    ValidationError: status.HTTP_400_BAD_REQUEST,
    AdapterError: status.HTTP_502_BAD_GATEWAY,
}


async def handle_error(request: Request, exc: Exception) -> JSONResponse:
    """Render an error as a JSON ``detail`` body."""
    status_code = next(
        (code for cls, code in _STATUS_CODES.items() if isinstance(exc, cls)),
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )
    logger.warning(f"{request.method} {request.url.path} failed: {exc}")
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    """Register handlers for every mapped error type.

    Args:
        app: FastAPI application
    """
    for exc_class in _STATUS_CODES:
        app.add_exception_handler(exc_class, handle_error)
