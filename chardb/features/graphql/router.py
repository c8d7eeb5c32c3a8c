"""GraphQL router for FastAPI integration.

Provides:
- GraphQL endpoint for a given schema
- Request context with the database session and the authenticated principal
- Masking of internal errors in responses

Example:
    app.include_router(create_graphql_router(schema), prefix="/graphql")
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Annotated, Any

from fastapi import BackgroundTasks, Depends, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession
from strawberry.fastapi import GraphQLRouter

from chardb.core.acl import Principal
from chardb.core.dependencies.auth import get_principal
from chardb.core.dependencies.database import get_db_session
from chardb.core.settings import get_authz_settings
from chardb.features.graphql.context import GraphQLContext
from chardb.features.graphql.error_handler import format_graphql_errors

if TYPE_CHECKING:
    from strawberry.http import GraphQLHTTPResponse
    from strawberry.types import ExecutionResult

    from chardb.features.graphql.schema import Schema

logger = logging.getLogger(__name__)

__all__ = ["ChardbGraphQLRouter", "create_graphql_router", "get_graphql_context"]


async def get_graphql_context(
    request: Request,
    response: Response,
    background_tasks: BackgroundTasks,
    session: Annotated[AsyncSession, Depends(get_db_session)],
    principal: Annotated[Principal, Depends(get_principal)],
) -> GraphQLContext:
    """Create GraphQL context from FastAPI dependencies.

    Following Strawberry's FastAPI integration pattern, this provides the
    standard context fields (request, response, background_tasks) plus the
    session and principal the authorization engine works with.
    """
    correlation_id = getattr(request.state, "request_id", None)
    return GraphQLContext(
        request=request,
        response=response,
        background_tasks=background_tasks,
        session=session,
        principal=principal,
        authz_settings=get_authz_settings(),
        correlation_id=correlation_id,
    )


class ChardbGraphQLRouter(GraphQLRouter):
    """``GraphQLRouter`` that masks internal errors in responses."""

    def __init__(self, schema: Schema, *, mask_internal_errors: bool = True, **kwargs: Any) -> None:
        super().__init__(schema, **kwargs)
        self.mask_internal_errors = mask_internal_errors

    async def process_result(
        self, request: Request, result: ExecutionResult
    ) -> GraphQLHTTPResponse:
        data: GraphQLHTTPResponse = {"data": result.data}
        if result.errors:
            data["errors"] = format_graphql_errors(
                result.errors, mask_internal=self.mask_internal_errors
            )
        if result.extensions:
            data["extensions"] = result.extensions
        return data


def create_graphql_router(
    schema: Schema, *, mask_internal_errors: bool = True, **kwargs: Any
) -> ChardbGraphQLRouter:
    """Create the GraphQL router for ``schema``."""
    logger.debug("Creating GraphQL router", extra={"mask_internal_errors": mask_internal_errors})
    return ChardbGraphQLRouter(
        schema,
        context_getter=get_graphql_context,
        mask_internal_errors=mask_internal_errors,
        **kwargs,
    )
