"""Exception handlers for the FastAPI application.

Every handler answers with RFC 7807 problem details. Authorization denials
arrive here as ``AuthenticationRequiredError`` (401) and
``PermissionDeniedError`` (403), both ``AppException`` subclasses.
"""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from chardb.core.exceptions import AppException, UnauthorizedException
from chardb.core.schemas import ProblemDetails, ValidationProblemDetails

logger = logging.getLogger(__name__)

PROBLEM_JSON = "application/problem+json"


def _get_request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


def _problem_response(
    request: Request,
    problem: ProblemDetails,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    content = problem.model_dump(exclude_none=True)
    request_id = _get_request_id(request)
    if request_id:
        content["request_id"] = request_id
    return JSONResponse(
        status_code=problem.status,
        content=content,
        headers=headers,
        media_type=PROBLEM_JSON,
    )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Convert ``AppException`` instances into problem details."""
    logger.warning(
        "Application exception occurred",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "exception_type": exc.type,
            "status_code": exc.status_code,
            "detail": exc.detail,
        },
    )

    headers = None
    if isinstance(exc, UnauthorizedException):
        headers = {"WWW-Authenticate": "Bearer"}

    problem = ProblemDetails.from_exception(exc, instance=request.url.path)
    return _problem_response(request, problem, headers)


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Convert request validation errors into problem details with field errors."""
    problem = ValidationProblemDetails.from_errors(list(exc.errors()), instance=request.url.path)
    logger.warning(
        "Request validation failed",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "error_count": len(problem.errors),
        },
    )
    return _problem_response(request, problem)


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unexpected exceptions; internal details are not exposed."""
    logger.error(
        "Unexpected exception occurred",
        extra={
            "request_id": _get_request_id(request),
            "path": request.url.path,
            "method": request.method,
            "exception_type": type(exc).__name__,
        },
        exc_info=exc,
    )
    problem = ProblemDetails(
        type="internal-error",
        title="Internal Server Error",
        status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred while processing your request",
        instance=request.url.path,
    )
    return _problem_response(request, problem)


def register_exception_handlers(app: FastAPI) -> None:
    """Register the problem-details exception handlers on ``app``.

    Example:
        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, generic_exception_handler)
    logger.debug("Exception handlers registered")


__all__ = [
    "app_exception_handler",
    "generic_exception_handler",
    "register_exception_handlers",
    "validation_exception_handler",
]
