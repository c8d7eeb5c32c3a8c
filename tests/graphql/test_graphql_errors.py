"""Error classification, logging and masking."""

import logging

from graphql import GraphQLError
import pytest

from chardb.core.acl import CommunityResolutionError, PolicyConfigurationError
from chardb.core.exceptions import (
    AppException,
    AuthenticationRequiredError,
    PermissionDeniedError,
)
from chardb.features.graphql import ErrorCategory, format_graphql_errors, process_graphql_errors
from chardb.features.graphql.error_handler import annotate_error, is_user_facing_error


def wrap(exc: Exception) -> GraphQLError:
    return GraphQLError(str(exc), original_error=exc, path=["field"])


class TestAnnotateError:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (AuthenticationRequiredError(), ErrorCategory.AUTHENTICATION),
            (PermissionDeniedError(operation="x"), ErrorCategory.AUTHORIZATION),
            (CommunityResolutionError("Trait t not found"), ErrorCategory.NOT_FOUND),
            (PolicyConfigurationError("bad policy"), ErrorCategory.INTERNAL),
            (AppException(status_code=422, detail="bad input"), ErrorCategory.VALIDATION),
            (RuntimeError("boom"), ErrorCategory.INTERNAL),
        ],
    )
    def test_code_from_original_error(self, exc: Exception, code: str) -> None:
        error = wrap(exc)

        assert annotate_error(error) == code
        assert error.extensions["code"] == code

    def test_explicit_code_wins(self) -> None:
        error = GraphQLError("slow down", extensions={"code": "RATE_LIMIT_EXCEEDED"})

        assert annotate_error(error) == "RATE_LIMIT_EXCEEDED"

    def test_unwraps_nested_graphql_errors(self) -> None:
        inner = GraphQLError("denied", original_error=PermissionDeniedError())
        outer = GraphQLError("denied", original_error=inner)

        assert annotate_error(outer) == ErrorCategory.AUTHORIZATION

    def test_parse_errors_are_validation(self) -> None:
        assert annotate_error(GraphQLError("Syntax Error")) == ErrorCategory.VALIDATION


class TestFormatting:
    def test_masks_internal_errors(self) -> None:
        internal = wrap(RuntimeError("password=hunter2"))
        denied = wrap(PermissionDeniedError(operation="updateSpecies"))
        process_graphql_errors([internal, denied])

        masked, kept = format_graphql_errors([internal, denied], mask_internal=True)

        assert masked["message"] == "An internal error occurred. Please try again later."
        assert masked["extensions"]["code"] == ErrorCategory.INTERNAL
        assert masked["path"] == ["field"]
        assert kept["message"] == "You do not have permission to perform updateSpecies"

    def test_unmasked_by_default(self) -> None:
        internal = wrap(RuntimeError("boom"))
        annotate_error(internal)

        (formatted,) = format_graphql_errors([internal])

        assert formatted["message"] == "boom"

    def test_user_facing_depends_on_code(self) -> None:
        assert is_user_facing_error(GraphQLError("x", extensions={"code": "NOT_FOUND"}))
        assert not is_user_facing_error(GraphQLError("x", extensions={"code": "INTERNAL_ERROR"}))
        assert not is_user_facing_error(GraphQLError("x"))


class TestSchemaIntegration:
    async def test_internal_error_is_coded_and_logged(
        self, execute, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger="chardb.features.graphql.error_handler")

        result = await execute("{ explode }")

        (error,) = result.errors
        assert error.extensions["code"] == ErrorCategory.INTERNAL
        (record,) = [r for r in caplog.records if r.getMessage() == "GraphQL internal error"]
        assert record.levelno == logging.ERROR
        assert record.exception_type == "RuntimeError"
        assert record.correlation_id == "test-correlation"

    async def test_denials_are_logged_below_error(
        self, execute, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.INFO, logger="chardb.features.graphql.error_handler")

        await execute('mutation { updateSpecies(id: "s", name: "n") }')

        (record,) = [r for r in caplog.records if r.name == "chardb.features.graphql.error_handler"]
        assert record.levelno == logging.INFO
        assert record.error_code == ErrorCategory.AUTHENTICATION
