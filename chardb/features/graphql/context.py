"""GraphQL context for request-scoped dependencies.

The context is created fresh for each GraphQL request and provides:
- Database session (for queries, mutations and permission lookups)
- The principal attached by the authentication layer
- A lazily built ``Authorizer`` shared by every field of the request
- Correlation ID (for log correlation)

Following Strawberry's FastAPI integration pattern:
https://strawberry.rocks/docs/integrations/fastapi#context_getter
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from strawberry.fastapi import BaseContext

from chardb.core.acl import Authorizer, Principal

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from starlette.background import BackgroundTasks
    from starlette.requests import Request
    from starlette.responses import Response
    from starlette.websockets import WebSocket

    from chardb.core.settings import AuthorizationSettings


@dataclass
class GraphQLContext(BaseContext):
    """Request context for GraphQL operations.

    Example usage in resolver:
        @strawberry.field
        async def viewer_id(self, info: Info[GraphQLContext, None]) -> str | None:
            return info.context.principal.id
    """

    request: Request | WebSocket | None = None
    response: Response | None = None
    background_tasks: BackgroundTasks | None = None

    session: AsyncSession = field(default=None)  # type: ignore[assignment]
    principal: Principal = field(default_factory=Principal.anonymous)
    authz_settings: AuthorizationSettings | None = None
    correlation_id: str | None = None

    _authorizer: Authorizer | None = field(default=None, init=False, repr=False)

    @property
    def is_authenticated(self) -> bool:
        return self.principal.is_authenticated

    @property
    def authorizer(self) -> Authorizer:
        """Authorizer bound to this request's session and principal."""
        if self._authorizer is None:
            self._authorizer = Authorizer(
                self.session, self.principal, settings=self.authz_settings
            )
        return self._authorizer


__all__ = ["GraphQLContext"]
