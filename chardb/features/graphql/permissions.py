"""Strawberry permission classes backed by access policies.

A field is protected by handing its ``Policy`` to ``policy_extension``:

    UPDATE_SPECIES = Policy(
        name="updateSpecies",
        global_permission=GlobalPermission.IS_ADMIN,
        community=CommunityRule(
            CommunityPermission.CAN_EDIT_SPECIES, PathSpec.of(species_id="id")
        ),
    )

    @strawberry.mutation(extensions=[policy_extension(UPDATE_SPECIES)])
    async def update_species(self, info: Info, id: strawberry.ID, input: UpdateSpeciesInput) -> Species:
        ...

Policy paths address the resolver's keyword arguments by their Python
names (``input.species_variant_id``, not ``input.speciesVariantId``).

For fields that should quietly resolve to ``null`` instead of erroring
when access is denied (e.g. a user's email on a public profile):

    @strawberry.field(extensions=[policy_extension(VIEW_EMAIL, null_on_forbidden=True)])
    async def email(self) -> str | None:
        return self.email_address

Non-null fields can name their own stand-in value instead:

    @strawberry.field(extensions=[policy_extension(VIEW_EMAIL, on_forbidden="")])
    async def email_hint(self) -> str:
        ...

The permission check is async, so protected fields need async resolvers.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from graphql import GraphQLError
from strawberry.permission import BasePermission, PermissionExtension

from chardb.core.exceptions import AuthenticationRequiredError, PermissionDeniedError
from chardb.features.graphql.error_handler import ErrorCategory

if TYPE_CHECKING:
    from strawberry.types import Info

    from chardb.core.acl import Policy
    from chardb.features.graphql.context import GraphQLContext

logger = logging.getLogger(__name__)

__all__ = ["PolicyPermission", "policy_extension"]


_RAISE: Any = object()


class PolicyPermission(BasePermission):
    """Evaluate a ``Policy`` against the field's arguments and parent object.

    With ``raise_denials`` (the default) a denial surfaces as a GraphQL error
    whose ``extensions.code`` is ``AUTHENTICATION_ERROR`` or
    ``AUTHORIZATION_ERROR``. Without it, ``has_permission`` just returns
    ``False`` and ``on_unauthorized`` answers with ``fallback``, unless the
    surrounding ``PermissionExtension`` fails silently first.

    Instances hold only the policy, so one instance may serve every request.
    """

    message = "You do not have permission to perform this action"
    error_extensions = {"code": ErrorCategory.AUTHORIZATION}

    def __init__(
        self, policy: Policy, *, raise_denials: bool = True, fallback: Any = None
    ) -> None:
        self.policy = policy
        self.raise_denials = raise_denials
        self.fallback = fallback

    def _operation(self, info: Info[GraphQLContext, None]) -> str:
        return self.policy.name or f"{info.parent_type.name}.{info.field_name}"

    def on_unauthorized(self) -> Any:
        return self.fallback

    async def has_permission(
        self, source: Any, info: Info[GraphQLContext, None], **kwargs: Any
    ) -> bool:
        authorizer = info.context.authorizer
        operation = self._operation(info)

        if not self.raise_denials:
            return await authorizer.is_allowed(
                self.policy, kwargs, source=source, operation=operation
            )

        try:
            await authorizer.authorize(self.policy, kwargs, source=source, operation=operation)
        except AuthenticationRequiredError as exc:
            raise GraphQLError(
                exc.detail,
                original_error=exc,
                extensions={"code": ErrorCategory.AUTHENTICATION, "operation": operation},
            ) from exc
        except PermissionDeniedError as exc:
            raise GraphQLError(
                exc.detail,
                original_error=exc,
                extensions={"code": ErrorCategory.AUTHORIZATION, "operation": operation},
            ) from exc
        return True


def policy_extension(
    policy: Policy,
    *,
    null_on_forbidden: bool = False,
    on_forbidden: Any = _RAISE,
) -> PermissionExtension:
    """Build the field extension enforcing ``policy``.

    Args:
        policy: Policy for the field.
        null_on_forbidden: Resolve to ``null`` (or ``[]`` for list fields)
            instead of raising when access is denied. The field must be
            nullable or a list.
        on_forbidden: Value the field resolves to when access is denied,
            e.g. ``False`` for a flag or ``""`` for a string. ``None`` is
            the same as ``null_on_forbidden=True``.

    Example:
        @strawberry.field(extensions=[policy_extension(VIEW_PENDING, on_forbidden=False)])
        async def has_pending_ownership(self) -> bool:
            ...
    """
    if on_forbidden is None:
        null_on_forbidden = True
    if null_on_forbidden:
        return PermissionExtension(
            permissions=[PolicyPermission(policy, raise_denials=False)],
            fail_silently=True,
        )
    if on_forbidden is not _RAISE:
        return PermissionExtension(
            permissions=[PolicyPermission(policy, raise_denials=False, fallback=on_forbidden)]
        )
    return PermissionExtension(permissions=[PolicyPermission(policy)])
