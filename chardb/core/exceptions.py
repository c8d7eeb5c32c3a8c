"""Custom exception classes for the application."""

from __future__ import annotations

from typing import Any


class AppException(Exception):
    """Base application exception.

    All custom exceptions should inherit from this class.
    Follows RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        status_code: HTTP status code for the error.
        detail: Human-readable error message.
        type: Error type identifier (used in RFC 7807 problem details).
        title: Short, human-readable summary of the problem type.
        instance: URI reference that identifies the specific occurrence of the problem.
        extra: Additional context-specific information about the error.

    Example:
        raise AppException(
            status_code=404,
            detail="Character not found",
            type="character-not-found",
            instance="/api/v1/characters/abc123",
            extra={"character_id": "abc123"},
        )
    """

    def __init__(
        self,
        status_code: int,
        detail: str,
        type: str = "about:blank",
        title: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize application exception.

        Args:
            status_code: HTTP status code.
            detail: Human-readable error message.
            type: Error type identifier.
            title: Short summary of the problem type.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        self.status_code = status_code
        self.detail = detail
        self.type = type
        self.title = title or self._default_title(status_code)
        self.instance = instance
        self.extra = extra or {}
        super().__init__(detail)

    @staticmethod
    def _default_title(status_code: int) -> str:
        """Get default title for HTTP status code."""
        titles = {
            400: "Bad Request",
            401: "Unauthorized",
            403: "Forbidden",
            404: "Not Found",
            422: "Unprocessable Entity",
            500: "Internal Server Error",
        }
        return titles.get(status_code, "Error")


class UnauthorizedException(AppException):
    """Exception raised for authentication failures.

    Example:
        raise UnauthorizedException(
            detail="Invalid credentials",
            type="unauthorized",
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "unauthorized",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=401,
            detail=detail,
            type=type,
            title="Unauthorized",
            instance=instance,
            extra=extra,
        )


class ForbiddenException(AppException):
    """Exception raised for authorization failures.

    Example:
        raise ForbiddenException(
            detail="Insufficient permissions",
            type="forbidden",
            extra={"required_permission": "canEditSpecies"},
        )
    """

    def __init__(
        self,
        detail: str,
        type: str = "forbidden",
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            status_code=403,
            detail=detail,
            type=type,
            title="Forbidden",
            instance=instance,
            extra=extra,
        )


# ============================================================================
# Access Decision Exceptions
# ============================================================================
# Raised only at the guard combinator boundary, after every branch failed.
# Callers rely on the two classes to tell "log in" apart from "not allowed".


class AuthenticationRequiredError(UnauthorizedException):
    """Raised when an operation is denied and no usable principal exists.

    Example:
        raise AuthenticationRequiredError(operation="updateCharacter")
    """

    def __init__(
        self,
        detail: str = "Authentication required",
        operation: str | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize authentication required exception."""
        final_extra: dict[str, Any] = {"operation": operation} if operation else {}
        if extra:
            final_extra.update(extra)
        self.operation = operation
        super().__init__(
            detail=detail,
            type="authentication-required",
            instance=instance,
            extra=final_extra or None,
        )


class PermissionDeniedError(ForbiddenException):
    """Raised when a principal is present but no guard branch granted access.

    Example:
        raise PermissionDeniedError(
            operation="deleteSpecies",
            user_id="user-1",
            evaluated=["global_permission", "community_permission"],
        )
    """

    def __init__(
        self,
        detail: str | None = None,
        operation: str | None = None,
        user_id: str | None = None,
        evaluated: list[str] | None = None,
        instance: str | None = None,
        extra: dict[str, Any] | None = None,
    ) -> None:
        """Initialize permission denied exception.

        Args:
            detail: Human-readable error message.
            operation: Name of the protected operation.
            user_id: Id of the principal that was denied.
            evaluated: Guard names evaluated, in evaluation order.
            instance: URI reference identifying this specific occurrence.
            extra: Additional context about the error.
        """
        if detail is None:
            detail = "You do not have permission to perform this action"
            if operation:
                detail = f"You do not have permission to perform {operation}"
        final_extra: dict[str, Any] = {}
        if operation:
            final_extra["operation"] = operation
        if user_id:
            final_extra["user_id"] = user_id
        if evaluated:
            final_extra["evaluated_guards"] = evaluated
        if extra:
            final_extra.update(extra)
        self.operation = operation
        self.user_id = user_id
        self.evaluated = list(evaluated or [])
        super().__init__(
            detail=detail,
            type="permission-denied",
            instance=instance,
            extra=final_extra or None,
        )
