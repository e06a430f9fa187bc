"""
Error responses - Uniform `{"error": ...}` bodies.

Installs handlers so that request-shape failures and unexpected exceptions
use the same body format as the domain errors mapped in the routes.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)

INVALID_BODY_MESSAGE = "invalid request body"
INTERNAL_ERROR_MESSAGE = "internal error"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build a JSON error response with the standard body shape."""
    return JSONResponse(status_code=status_code, content={"error": message})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject bodies that are not an object of two string fields with 400."""
    logger.info("Rejected malformed request body on %s: %d error(s)", request.url.path, len(exc.errors()))
    return error_response(status.HTTP_400_BAD_REQUEST, INVALID_BODY_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Hide unexpected failures behind a generic 500."""
    logger.exception("Unhandled error on %s", request.url.path)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, INTERNAL_ERROR_MESSAGE)


def install_error_handlers(app: FastAPI) -> None:
    """Register the uniform error handlers on `app`."""
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
