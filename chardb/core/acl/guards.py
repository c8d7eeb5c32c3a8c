"""Guard strategies.

A guard is an async callable ``(GuardContext) -> bool``. Each one reads one
part of the operation's ``Policy`` and answers a single question about the
principal. A guard whose part of the policy is empty is not applicable and
returns ``False``: it never grants and never denies on behalf of the others.

Guards may raise ``AuthorizationError`` subclasses (for instance when the
community of an operation cannot be derived). The combinator counts that as
the branch returning ``False``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING

from chardb.core.acl.constants import (
    ANY_CHARACTER_EDIT_PERMISSIONS,
    OWN_CHARACTER_EDIT_PERMISSIONS,
    CommunityPermission,
    OwnedEntity,
)
from chardb.core.acl.paths import get_nested_value, is_blank

if TYPE_CHECKING:
    from chardb.core.acl.context import GuardContext

Guard = Callable[["GuardContext"], Awaitable[bool]]

__all__ = [
    "DEFAULT_GUARDS",
    "Guard",
    "authenticated_guard",
    "character_edit_guard",
    "community_permission_guard",
    "global_permission_guard",
    "guard_name",
    "ownership_guard",
    "self_guard",
    "unauthenticated_guard",
]


def guard_name(guard: Guard) -> str:
    return getattr(guard, "__name__", None) or repr(guard)


def _signed_in(ctx: GuardContext) -> bool:
    return ctx.principal.is_authenticated and bool(ctx.principal.id)


async def authenticated_guard(ctx: GuardContext) -> bool:
    """Grant any signed-in principal, when the policy allows authenticated access."""
    return ctx.policy.allow_authenticated and _signed_in(ctx)


async def unauthenticated_guard(ctx: GuardContext) -> bool:
    """Grant everyone on operations explicitly marked public."""
    return ctx.policy.allow_unauthenticated


async def global_permission_guard(ctx: GuardContext) -> bool:
    permission = ctx.policy.global_permission
    if permission is None:
        return False
    return ctx.permissions.has_global_permission(ctx.principal, permission)


async def community_permission_guard(ctx: GuardContext) -> bool:
    """Grant when the principal holds the rule's permission in the resolved community."""
    rule = ctx.policy.community
    if rule is None:
        return False
    if not _signed_in(ctx):
        return False
    community_id = await ctx.communities.resolve(rule.resolve_from, ctx.args)
    return await ctx.permissions.has_community_permission(
        ctx.principal, community_id, rule.permission
    )


async def ownership_guard(ctx: GuardContext) -> bool:
    """Grant when the principal owns the first entity referenced by the ownership spec."""
    spec = ctx.policy.ownership
    if spec is None:
        return False
    if not _signed_in(ctx):
        return False
    for entry in spec.entries:
        entity_id = get_nested_value(ctx.args, entry.path)
        if not is_blank(entity_id):
            return await ctx.ownership.is_owner_of(ctx.principal.id, entry.key, str(entity_id))
    return False


async def self_guard(ctx: GuardContext) -> bool:
    """Grant when the principal is the target user.

    The target is read from the declared argument path, or from the ``id``
    of the parent object when no path is declared.
    """
    spec = ctx.policy.self_target
    if spec is None:
        return False
    if not _signed_in(ctx):
        return False
    if spec.user_id is not None:
        target = get_nested_value(ctx.args, spec.user_id)
    else:
        target = get_nested_value(ctx.source, "id")
    if is_blank(target):
        return False
    return ctx.permissions.is_self(ctx.principal.id, str(target))


async def character_edit_guard(ctx: GuardContext) -> bool:
    """Grant when the principal may edit the referenced character.

    Owners may always edit their own characters, unless
    ``owner_requires_own_permission`` is set, in which case an owner whose
    character sits in a community also needs an own-character (or
    any-character) permission for the scope. Non-owners need the scope's
    any-character permission in the character's community. Orphaned
    characters also accept ``CAN_CREATE_ORPHANED_CHARACTER``. A character
    with no species has no community, so only its owner may edit it.
    """
    spec = ctx.policy.character_edit
    if spec is None:
        return False
    if not _signed_in(ctx):
        return False

    character_id = get_nested_value(ctx.args, spec.character_id)
    if is_blank(character_id):
        return False
    character_id = str(character_id)

    # Raises CommunityResolutionError when the character does not exist.
    community_id = await ctx.communities.get_character_community(character_id)
    owner_id = await ctx.ownership.resolve_entity_owner(OwnedEntity.CHARACTER, character_id)
    is_owner = owner_id is not None and owner_id == ctx.principal.id

    if is_owner:
        if community_id is None or not ctx.settings.owner_requires_own_permission:
            return True
        required = (
            OWN_CHARACTER_EDIT_PERMISSIONS[spec.scope] | ANY_CHARACTER_EDIT_PERMISSIONS[spec.scope]
        )
        return await ctx.permissions.has_any_community_permission(
            ctx.principal, community_id, required
        )

    if community_id is None:
        return False

    required = ANY_CHARACTER_EDIT_PERMISSIONS[spec.scope]
    if owner_id is None:
        required = required | {CommunityPermission.CAN_CREATE_ORPHANED_CHARACTER}
    return await ctx.permissions.has_any_community_permission(ctx.principal, community_id, required)


DEFAULT_GUARDS: tuple[Guard, ...] = (
    global_permission_guard,
    community_permission_guard,
    ownership_guard,
    self_guard,
    character_edit_guard,
    authenticated_guard,
    unauthenticated_guard,
)

