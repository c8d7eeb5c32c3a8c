"""Authorization dependencies for FastAPI routes.

The principal is attached to ``request.state.principal`` by the upstream
authentication layer (token verification is not done here). Routes declare
a ``Policy`` and depend on ``require_policy(policy)``; path and query
parameters are the arguments the policy's paths point into.

Examples:

    from chardb.core.dependencies.auth import PrincipalDep, require_policy

    # 1. Read the current principal (anonymous if nobody signed in)
    @router.get("/me")
    async def whoami(principal: PrincipalDep):
        return {"id": principal.id}

    # 2. Protect a route with a policy
    EDIT_SPECIES = Policy(
        name="updateSpecies",
        global_permission=GlobalPermission.IS_ADMIN,
        community=CommunityRule(
            CommunityPermission.CAN_EDIT_SPECIES, PathSpec.of(species_id="species_id")
        ),
    )

    @router.patch("/species/{species_id}")
    async def update_species(
        species_id: str,
        principal: Annotated[Principal, Depends(require_policy(EDIT_SPECIES))],
    ):
        ...

Denials raise ``AuthenticationRequiredError`` (401) or
``PermissionDeniedError`` (403), rendered as RFC 7807 problem details by
``chardb.app.exception_handlers``.
"""

from __future__ import annotations

from collections.abc import Callable, Coroutine
import logging
from typing import Annotated, Any

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from chardb.core.acl import Authorizer, Policy, Principal
from chardb.core.dependencies.database import get_db_session
from chardb.core.settings import get_authz_settings
from chardb.infra.logging import set_log_context

logger = logging.getLogger(__name__)


def get_principal(request: Request) -> Principal:
    """Return the principal attached upstream, or an anonymous one."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        return Principal.anonymous()
    if not isinstance(principal, Principal):
        logger.error(
            "request.state.principal has unexpected type",
            extra={"type": type(principal).__name__},
        )
        return Principal.anonymous()
    if principal.id:
        set_log_context(user_id=principal.id)
    return principal


PrincipalDep = Annotated[Principal, Depends(get_principal)]


async def get_authorizer(
    principal: PrincipalDep,
    session: Annotated[AsyncSession, Depends(get_db_session)],
) -> Authorizer:
    """Authorizer bound to the request's session and principal."""
    return Authorizer(session, principal, settings=get_authz_settings())


AuthorizerDep = Annotated[Authorizer, Depends(get_authorizer)]


def _policy_args(request: Request) -> dict[str, Any]:
    args: dict[str, Any] = {}
    for key in request.query_params:
        values = request.query_params.getlist(key)
        args[key] = values if len(values) > 1 else values[0]
    args.update(request.path_params)
    return args


def require_policy(
    policy: Policy,
) -> Callable[[Request, Authorizer], Coroutine[Any, Any, Principal]]:
    """Dependency factory that enforces ``policy`` before the route runs.

    Args:
        policy: Policy to evaluate. Its paths are resolved against the
            route's path parameters merged with its query parameters. A
            query key given more than once maps to the list of its values,
            so every id the route receives is checked.

    Returns:
        Dependency returning the authorized principal.
    """

    async def policy_checker(request: Request, authorizer: AuthorizerDep) -> Principal:
        args = _policy_args(request)
        operation = policy.name or f"{request.method} {request.url.path}"
        await authorizer.authorize(policy, args, operation=operation)
        return authorizer.principal

    return policy_checker


__all__ = [
    "AuthorizerDep",
    "PrincipalDep",
    "get_authorizer",
    "get_principal",
    "require_policy",
]
