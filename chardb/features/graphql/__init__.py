"""GraphQL seam of the authorization engine.

Fields are protected with ``policy_extension(policy)``; the context builds
one ``Authorizer`` per request; the schema and router attach error codes and
mask internal errors.
"""

from chardb.features.graphql.context import GraphQLContext
from chardb.features.graphql.error_handler import (
    ErrorCategory,
    format_graphql_errors,
    process_graphql_errors,
)
from chardb.features.graphql.permissions import PolicyPermission, policy_extension
from chardb.features.graphql.router import create_graphql_router, get_graphql_context
from chardb.features.graphql.schema import Schema

__all__ = [
    "ErrorCategory",
    "GraphQLContext",
    "PolicyPermission",
    "Schema",
    "create_graphql_router",
    "format_graphql_errors",
    "get_graphql_context",
    "policy_extension",
    "process_graphql_errors",
]
