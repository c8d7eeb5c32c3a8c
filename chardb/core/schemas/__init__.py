"""Shared response schemas."""

from chardb.core.schemas.problem_details import FieldError, ProblemDetails, ValidationProblemDetails

__all__ = ["FieldError", "ProblemDetails", "ValidationProblemDetails"]
