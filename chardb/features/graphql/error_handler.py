"""GraphQL error classification, logging and production error masking.

Every error leaving the executor gets a structured ``extensions.code`` so
clients can tell an authorization failure from a bad input or a crash
without parsing messages. Internal errors are logged with full details and
can be masked before the response is written.

Usage:
    # Codes and logging are applied by the schema:
    schema = Schema(query=Query, mutation=Mutation)

    # Masking is applied by the router:
    router = create_graphql_router(schema, mask_internal_errors=True)
"""

from __future__ import annotations

from datetime import UTC, datetime
import logging
import traceback
from typing import TYPE_CHECKING

from graphql import GraphQLError, GraphQLFormattedError

from chardb.core.acl.exceptions import CommunityResolutionError, PolicyConfigurationError
from chardb.core.exceptions import (
    AppException,
    AuthenticationRequiredError,
    PermissionDeniedError,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from strawberry.types import ExecutionContext

logger = logging.getLogger(__name__)

__all__ = [
    "ErrorCategory",
    "annotate_error",
    "format_graphql_errors",
    "is_user_facing_error",
    "log_error",
    "mask_internal_error",
    "process_graphql_errors",
]


# ============================================================================
# Error Categories
# ============================================================================


class ErrorCategory:
    """Error categories for classification."""

    VALIDATION = "VALIDATION_ERROR"
    AUTHENTICATION = "AUTHENTICATION_ERROR"
    AUTHORIZATION = "AUTHORIZATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    INTERNAL = "INTERNAL_ERROR"


USER_FACING_CODES = frozenset(
    {
        ErrorCategory.VALIDATION,
        ErrorCategory.AUTHENTICATION,
        ErrorCategory.AUTHORIZATION,
        ErrorCategory.NOT_FOUND,
    }
)


# ============================================================================
# Main Error Processing
# ============================================================================


def process_graphql_errors(
    errors: list[GraphQLError],
    execution_context: ExecutionContext | None = None,
) -> list[GraphQLFormattedError]:
    """Classify and log errors produced by an execution.

    Each error gets an ``extensions.code`` derived from the exception that
    caused it (an explicit code set by the raiser wins), and is logged once.

    Args:
        errors: List of GraphQL errors from execution
        execution_context: Execution context with operation info

    Returns:
        The formatted errors, unmasked
    """
    for error in errors:
        annotate_error(error)
        log_error(error, execution_context)
    return [error.formatted for error in errors]


def format_graphql_errors(
    errors: Iterable[GraphQLError],
    *,
    mask_internal: bool = False,
) -> list[GraphQLFormattedError]:
    """Format errors for the response body, masking internal ones if asked."""
    formatted: list[GraphQLFormattedError] = []
    for error in errors:
        if mask_internal and not is_user_facing_error(error):
            formatted.append(mask_internal_error(error))
        else:
            formatted.append(error.formatted)
    return formatted


# ============================================================================
# Error Classification
# ============================================================================


def _root_cause(error: GraphQLError) -> BaseException | None:
    cause: BaseException | None = error.original_error
    while isinstance(cause, GraphQLError) and cause.original_error is not None:
        cause = cause.original_error
    return cause


def _code_for(cause: BaseException | None) -> str | None:
    if cause is None:
        # Parse and validation errors carry no original exception.
        return ErrorCategory.VALIDATION
    if isinstance(cause, AuthenticationRequiredError):
        return ErrorCategory.AUTHENTICATION
    if isinstance(cause, PermissionDeniedError):
        return ErrorCategory.AUTHORIZATION
    if isinstance(cause, PolicyConfigurationError):
        return ErrorCategory.INTERNAL
    if isinstance(cause, CommunityResolutionError):
        return ErrorCategory.NOT_FOUND
    if isinstance(cause, AppException):
        if cause.status_code == 401:
            return ErrorCategory.AUTHENTICATION
        if cause.status_code == 403:
            return ErrorCategory.AUTHORIZATION
        if cause.status_code == 404:
            return ErrorCategory.NOT_FOUND
        if cause.status_code in (400, 422):
            return ErrorCategory.VALIDATION
    if isinstance(cause, GraphQLError):
        return None
    return ErrorCategory.INTERNAL


def annotate_error(error: GraphQLError) -> str | None:
    """Set ``extensions.code`` on ``error`` unless it already has one.

    Returns:
        The error's code after annotation, or None if it could not be classified
    """
    extensions = error.extensions if error.extensions is not None else {}
    code = extensions.get("code")
    if code is None:
        code = _code_for(_root_cause(error))
        if code is not None:
            extensions["code"] = code
            error.extensions = extensions
    return code


def is_user_facing_error(error: GraphQLError) -> bool:
    """Determine if error should be shown to user as-is.

    User-facing errors are intentional and carry one of the validation,
    authentication, authorization or not-found codes. Everything else is
    internal and may be masked.
    """
    extensions = error.extensions or {}
    return extensions.get("code") in USER_FACING_CODES


# ============================================================================
# Error Masking
# ============================================================================


def mask_internal_error(error: GraphQLError) -> GraphQLFormattedError:
    """Replace internal error details with a generic message.

    The error location and path are kept.
    """
    masked: GraphQLFormattedError = {
        "message": "An internal error occurred. Please try again later.",
        "extensions": {
            "code": ErrorCategory.INTERNAL,
            "timestamp": datetime.now(UTC).isoformat(),
        },
    }
    if error.locations is not None:
        masked["locations"] = [location.formatted for location in error.locations]
    if error.path is not None:
        masked["path"] = error.path
    return masked


# ============================================================================
# Error Logging
# ============================================================================


def log_error(error: GraphQLError, execution_context: ExecutionContext | None) -> None:
    """Log error with full details for server-side debugging.

    User-facing errors are expected and logged at INFO. Internal errors are
    logged at ERROR with the stack trace of the original exception.
    """
    extensions = error.extensions or {}
    log_context: dict[str, object] = {
        "error_message": error.message,
        "error_path": error.path,
        "error_code": extensions.get("code"),
    }

    if execution_context is not None:
        if execution_context.operation_name:
            log_context["operation_name"] = execution_context.operation_name

        context = getattr(execution_context, "context", None)
        principal = getattr(context, "principal", None)
        if principal is not None and principal.id:
            log_context["user_id"] = principal.id
        correlation_id = getattr(context, "correlation_id", None)
        if correlation_id:
            log_context["correlation_id"] = correlation_id

    user_facing = is_user_facing_error(error)
    cause = _root_cause(error)
    if cause is not None:
        log_context["exception_type"] = type(cause).__name__
        if not user_facing:
            log_context["stack_trace"] = "".join(
                traceback.format_exception(type(cause), cause, cause.__traceback__)
            )

    if user_facing:
        logger.info("GraphQL user-facing error", extra=log_context)
    else:
        logger.error("GraphQL internal error", extra=log_context)
