"""RFC 7807 Problem Details schema for error responses."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    from chardb.core.exceptions import AppException


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Extension members (``operation``, ``evaluated_guards``, ``request_id``)
    are allowed and serialized next to the standard ones.

    See: https://datatracker.ietf.org/doc/html/rfc7807
    """

    type: str = Field(
        default="about:blank",
        min_length=1,
        max_length=200,
        description="URI reference identifying the problem type",
    )
    title: str = Field(
        min_length=1, max_length=200, description="Short, human-readable summary of the problem"
    )
    status: int = Field(ge=100, le=599, description="HTTP status code")
    detail: str | None = Field(
        default=None,
        max_length=2000,
        description="Human-readable explanation specific to this occurrence",
    )
    instance: str | None = Field(
        default=None,
        max_length=500,
        description="URI reference identifying the specific occurrence",
    )

    model_config = ConfigDict(
        extra="allow",
        json_schema_extra={
            "example": {
                "type": "permission-denied",
                "title": "Forbidden",
                "status": 403,
                "detail": "You do not have permission to perform updateSpecies",
                "instance": "/species/abc123",
                "operation": "updateSpecies",
            }
        },
    )

    @classmethod
    def from_exception(cls, exc: AppException, *, instance: str | None = None) -> ProblemDetails:
        """Build problem details from an application exception."""
        return cls(
            type=exc.type,
            title=exc.title,
            status=exc.status_code,
            detail=exc.detail,
            instance=exc.instance or instance,
            **exc.extra,
        )


class FieldError(BaseModel):
    """One invalid request field."""

    field: str
    message: str
    type: str


class ValidationProblemDetails(ProblemDetails):
    """Problem details for request validation failures."""

    errors: list[FieldError] = Field(default_factory=list)

    @classmethod
    def from_errors(
        cls, errors: list[dict[str, Any]], *, instance: str | None = None
    ) -> ValidationProblemDetails:
        field_errors = [
            FieldError(
                field=".".join(str(loc) for loc in error["loc"]),
                message=error["msg"],
                type=error["type"],
            )
            for error in errors
        ]
        return cls(
            type="validation-error",
            title="Validation Error",
            status=422,
            detail=f"Request validation failed for {len(field_errors)} field(s)",
            instance=instance,
            errors=field_errors,
        )
