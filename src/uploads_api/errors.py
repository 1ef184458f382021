"""Error taxonomy of the Uploads API and the FastAPI handlers that render it."""

import logging

from fastapi import Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class UploadsAPIError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(UploadsAPIError):
    """Bad or missing input."""
    status_code = status.HTTP_400_BAD_REQUEST


class PayloadTooLargeError(UploadsAPIError):
    """A file exceeded the per-file size ceiling."""
    status_code = 413


class NotFoundError(UploadsAPIError):
    status_code = status.HTTP_404_NOT_FOUND


class StorageWriteError(UploadsAPIError):
    pass


class StorageListError(UploadsAPIError):
    pass


class StorageDeleteError(UploadsAPIError):
    pass


async def handle_uploads_api_errors(request: Request, exc: UploadsAPIError) -> JSONResponse:
    """Render a known error as `{"error": ...}` with its status code."""
    logger.warning("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_request_validation_errors(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Collapse FastAPI's validation detail into a single readable message."""
    messages = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get("msg")))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "; ".join(messages) or "Invalid request"},
    )


async def handle_broad_exceptions(request: Request, call_next) -> Response:
    """Handle any exception that goes unhandled by a more specific exception handler."""
    try:
        return await call_next(request)
    except Exception:  # pylint: disable=broad-except
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"},
        )
