"""HTTP error handlers for FastAPI application.

This module provides the bridge between application exceptions and HTTP responses.
Store failures never reach it: the services absorb them and return safe defaults.
What remains are lookups that came back empty and rejected request parameters.
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from app.exceptions import AppException, NotFoundError, ValidationError


async def not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    """
    Map a NotFoundError to an HTTP 404 JSON response.

    Returns:
        JSONResponse: Response with status 404 and a JSON body `{"detail": "<exception message>"}`.
    """
    return JSONResponse(
        status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)}
    )


async def validation_error_handler(
    request: Request, exc: ValidationError
) -> JSONResponse:
    """
    Convert a ValidationError into an HTTP 422 Unprocessable Entity JSON response.

    Returns:
        JSONResponse: Response with status 422 and a JSON body containing a `detail` message and, when available, a `field` key.
    """
    content = {"detail": str(exc)}
    if exc.field:
        content["field"] = exc.field
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT, content=content
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    Handle unhandled application-level exceptions with a generic 500 response.

    Returns:
        JSONResponse: HTTP 500 response with content {"detail": "An internal error occurred"}.
    """
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "An internal error occurred"},
    )


def register_exception_handlers(app) -> None:
    """
    Register the domain-to-HTTP exception handlers on a FastAPI app.

    Specific handlers are registered before the AppException catch-all:
    NotFoundError -> 404, ValidationError -> 422 (with optional `field`),
    AppException -> 500.
    """
    app.add_exception_handler(NotFoundError, not_found_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)

    # Catch-all for unhandled application exceptions
    app.add_exception_handler(AppException, app_exception_handler)
