"""Error hierarchy and the single error-to-response translation.

Services raise the domain errors below; FastAPI exception handlers turn
each of them into a JSON response whose body is the plain message string.
Status codes come from the exception class, never from the route.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger("blog_api.errors")

INTERNAL_ERROR_MESSAGE = "Erro interno do servidor."
REQUEST_ID_HEADER = "X-Request-ID"


class BlogError(Exception):
    """Base class for every error the API reports to clients."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BlogError):
    """A required field is missing or malformed."""
    http_status = status.HTTP_400_BAD_REQUEST


class NotFoundError(BlogError):
    """The requested or referenced id does not exist."""
    http_status = status.HTTP_404_NOT_FOUND


class ConflictError(BlogError):
    """A unique value is already taken, or a row is still referenced."""
    http_status = status.HTTP_409_CONFLICT


class StoreError(BlogError):
    """The database rejected or failed an operation."""
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(exc: BlogError) -> JSONResponse:
    return JSONResponse(status_code=exc.http_status, content=exc.message)


def register_error_handlers(app: FastAPI) -> None:
    """Register the domain, request-validation and catch-all handlers."""

    @app.exception_handler(BlogError)
    async def blog_error_handler(request: Request, exc: BlogError):
        if exc.http_status >= 500:
            logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        else:
            logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        # malformed JSON, wrong field types, non-integer or out-of-range ids
        logger.warning("Invalid request on %s: %s", request.url.path, exc.errors())
        return error_response(ValidationError(_describe_validation_error(exc)))

    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)
        headers = {}
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            headers[REQUEST_ID_HEADER] = request_id
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=INTERNAL_ERROR_MESSAGE,
            headers=headers,
        )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Requisição inválida."
    first = errors[0]
    if first.get("type") == "json_invalid":
        return "JSON malformado."
    loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query")]
    field = ".".join(loc)
    if field:
        return f"Campo inválido: {field} ({first.get('msg', 'valor inválido')})."
    return f"Requisição inválida: {first.get('msg', 'corpo malformado')}."
