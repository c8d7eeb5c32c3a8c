"""Strawberry schema base for chardb.

Root types live with the features that define them; this module only
provides the ``Schema`` class they are assembled into, which classifies and
logs execution errors:

    schema = Schema(query=Query, mutation=Mutation)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import strawberry

from chardb.features.graphql.error_handler import process_graphql_errors

if TYPE_CHECKING:
    from graphql import GraphQLError
    from strawberry.types import ExecutionContext

__all__ = ["Schema"]


class Schema(strawberry.Schema):
    """``strawberry.Schema`` that adds ``extensions.code`` to every error."""

    def process_errors(
        self,
        errors: list[GraphQLError],
        execution_context: ExecutionContext | None = None,
    ) -> None:
        process_graphql_errors(errors, execution_context)
