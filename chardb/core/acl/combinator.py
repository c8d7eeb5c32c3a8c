"""OR-composition of guard strategies.

Guards are evaluated one at a time in the order given, and evaluation stops
at the first grant. Order never changes the outcome, only which guards are
reported as evaluated when every branch fails.

Error handling per branch:
    - ``AuthorizationError`` (resolution or configuration failure): the
      branch counts as ``False`` and evaluation continues.
    - Any other exception (e.g. the database is unreachable): evaluation
      continues, and if no later branch grants, the first such exception is
      re-raised so the caller sees a request-level error instead of a denial.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chardb.core.acl.context import Decision, GuardFailure
from chardb.core.acl.exceptions import AuthorizationError, PolicyConfigurationError
from chardb.core.acl.guards import guard_name
from chardb.core.exceptions import AuthenticationRequiredError, PermissionDeniedError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from chardb.core.acl.context import GuardContext
    from chardb.core.acl.guards import Guard

logger = logging.getLogger(__name__)

__all__ = ["any_of", "enforce", "evaluate"]


async def evaluate(guards: Sequence[Guard], ctx: GuardContext) -> Decision:
    """Run ``guards`` against ``ctx`` and return the combined decision.

    An empty guard list never grants.
    """
    evaluated: list[str] = []
    failures: list[GuardFailure] = []
    unexpected: Exception | None = None

    for guard in guards:
        name = guard_name(guard)
        evaluated.append(name)
        try:
            result = await guard(ctx)
        except PolicyConfigurationError as exc:
            logger.error(
                "Guard misconfigured",
                extra={"guard": name, "operation": ctx.operation_name, **exc.context},
            )
            failures.append(GuardFailure(name, exc))
            continue
        except AuthorizationError as exc:
            logger.info(
                "Guard could not be evaluated: %s",
                exc.message,
                extra={"guard": name, "operation": ctx.operation_name, **exc.context},
            )
            failures.append(GuardFailure(name, exc))
            continue
        except Exception as exc:
            logger.warning(
                "Guard raised unexpectedly",
                extra={"guard": name, "operation": ctx.operation_name},
                exc_info=True,
            )
            failures.append(GuardFailure(name, exc))
            if unexpected is None:
                unexpected = exc
            continue

        if result:
            logger.debug(
                "Access granted",
                extra={
                    "guard": name,
                    "operation": ctx.operation_name,
                    "user_id": ctx.principal.id,
                },
            )
            return Decision(
                granted=True,
                granted_by=name,
                evaluated=tuple(evaluated),
                failures=tuple(failures),
            )

    if unexpected is not None:
        raise unexpected

    return Decision(granted=False, evaluated=tuple(evaluated), failures=tuple(failures))


def any_of(*guards: Guard) -> Guard:
    """Compose guards into one guard that grants when any of them does.

    Example:
        >>> owner_or_admin = any_of(ownership_guard, global_permission_guard)
        >>> allowed = await owner_or_admin(ctx)
    """

    async def composed(ctx: GuardContext) -> bool:
        return (await evaluate(guards, ctx)).granted

    composed.__name__ = f"any_of({', '.join(guard_name(g) for g in guards)})"
    composed.__qualname__ = composed.__name__
    return composed


async def enforce(
    guards: Sequence[Guard],
    ctx: GuardContext,
    *,
    log_denials: bool = True,
) -> Decision:
    """Evaluate ``guards`` and raise a typed denial when none grants.

    Raises:
        AuthenticationRequiredError: No authenticated principal.
        PermissionDeniedError: A principal is present but no guard granted.
    """
    decision = await evaluate(guards, ctx)
    if decision.granted:
        return decision

    principal = ctx.principal
    authenticated = principal.is_authenticated and bool(principal.id)
    if log_denials:
        logger.warning(
            "Access denied",
            extra={
                "operation": ctx.operation_name,
                "user_id": principal.id,
                "authenticated": authenticated,
                "evaluated_guards": list(decision.evaluated),
                "guard_failures": {f.guard: f.message for f in decision.failures},
            },
        )

    if not authenticated:
        raise AuthenticationRequiredError(operation=ctx.operation_name)
    raise PermissionDeniedError(
        operation=ctx.operation_name,
        user_id=principal.id,
        evaluated=list(decision.evaluated),
    )
