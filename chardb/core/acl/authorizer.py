"""Per-request entry point to the authorization engine."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from chardb.core.acl.combinator import enforce, evaluate
from chardb.core.acl.community_resolver import CommunityResolverService
from chardb.core.acl.context import GuardContext, Principal
from chardb.core.acl.guards import DEFAULT_GUARDS
from chardb.core.acl.ownership import OwnershipService
from chardb.core.acl.permission_service import PermissionService
from chardb.core.settings import get_authz_settings

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from chardb.core.acl.context import Decision
    from chardb.core.acl.guards import Guard
    from chardb.core.acl.policy import Policy
    from chardb.core.settings import AuthorizationSettings

__all__ = ["Authorizer"]


class Authorizer:
    """Bind the engine's services to one session and one principal.

    Build one per request. The authorizer holds no state besides its
    collaborators, so it can evaluate any number of policies.

    Example:
        >>> authorizer = Authorizer(session, principal)
        >>> await authorizer.authorize(UPDATE_SPECIES, {"id": species_id})
    """

    def __init__(
        self,
        session: AsyncSession,
        principal: Principal | None = None,
        *,
        settings: AuthorizationSettings | None = None,
        guards: Sequence[Guard] = DEFAULT_GUARDS,
    ) -> None:
        self.principal = principal or Principal.anonymous()
        self.settings = settings or get_authz_settings()
        self.guards = tuple(guards)
        self.permissions = PermissionService(session)
        self.communities = CommunityResolverService(
            session, max_hops=self.settings.max_resolution_hops
        )
        self.ownership = OwnershipService(session)

    def context(
        self,
        policy: Policy,
        args: Mapping[str, Any] | None = None,
        *,
        source: Any = None,
        operation: str | None = None,
    ) -> GuardContext:
        return GuardContext(
            principal=self.principal,
            policy=policy,
            args=args or {},
            permissions=self.permissions,
            communities=self.communities,
            ownership=self.ownership,
            settings=self.settings,
            source=source,
            operation=operation,
        )

    async def evaluate(
        self,
        policy: Policy,
        args: Mapping[str, Any] | None = None,
        *,
        source: Any = None,
        operation: str | None = None,
    ) -> Decision:
        """Evaluate ``policy`` without raising on denial."""
        ctx = self.context(policy, args, source=source, operation=operation)
        return await evaluate(self.guards, ctx)

    async def is_allowed(
        self,
        policy: Policy,
        args: Mapping[str, Any] | None = None,
        *,
        source: Any = None,
        operation: str | None = None,
    ) -> bool:
        decision = await self.evaluate(policy, args, source=source, operation=operation)
        return decision.granted

    async def authorize(
        self,
        policy: Policy,
        args: Mapping[str, Any] | None = None,
        *,
        source: Any = None,
        operation: str | None = None,
    ) -> Decision:
        """Evaluate ``policy`` and raise if access is denied.

        Raises:
            AuthenticationRequiredError: No authenticated principal and no
                guard granted.
            PermissionDeniedError: Authenticated, but no guard granted.
        """
        ctx = self.context(policy, args, source=source, operation=operation)
        return await enforce(self.guards, ctx, log_denials=self.settings.log_denials)
