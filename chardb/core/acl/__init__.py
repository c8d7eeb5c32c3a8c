"""Access control for chardb operations.

Every protected operation declares a ``Policy``: plain data naming the ways
the operation may be authorized. Guard strategies each check one of those
ways, and the combinator grants access as soon as any of them does.

    ┌──────────┐   ┌──────────────┐   ┌──────────────────────────────┐
    │  Policy  │──►│  Authorizer  │──►│ guards (OR, in fixed order)  │
    └──────────┘   └──────────────┘   │  global permission           │
                                      │  community permission ──► CommunityResolverService
                                      │  ownership ─────────────► OwnershipService
                                      │  self                    │
                                      │  character edit          │
                                      │  authenticated           │
                                      │  unauthenticated         │
                                      └──────────────────────────────┘

Components:
    Policy metadata:
        - Policy, CommunityRule, PathSpec, OwnershipSpec, SelfSpec, CharacterEditSpec
    Vocabularies:
        - GlobalPermission, CommunityPermission, OwnedEntity, CommunityAnchor
    Services:
        - CommunityResolverService: argument ids → community id
        - OwnershipService: entity → owning user
        - PermissionService: global flags and community role grants
    Evaluation:
        - guards, any_of, evaluate, enforce, Authorizer

Denials:
    When no guard grants, ``AuthenticationRequiredError`` is raised for an
    anonymous principal and ``PermissionDeniedError`` otherwise. Both live in
    ``chardb.core.exceptions``.

Example:
    from chardb.core.acl import (
        Authorizer, CommunityPermission, CommunityRule, GlobalPermission, PathSpec, Policy,
    )

    UPDATE_TRAIT = Policy(
        name="updateTrait",
        global_permission=GlobalPermission.IS_ADMIN,
        community=CommunityRule(CommunityPermission.CAN_EDIT_SPECIES, PathSpec.of(trait_id="id")),
    )

    await Authorizer(session, principal).authorize(UPDATE_TRAIT, {"id": trait_id})
"""

from __future__ import annotations

from chardb.core.acl.authorizer import Authorizer
from chardb.core.acl.combinator import any_of, enforce, evaluate
from chardb.core.acl.community_resolver import CommunityResolverService
from chardb.core.acl.constants import (
    CharacterEditScope,
    CommunityAnchor,
    CommunityPermission,
    GlobalPermission,
    OwnedEntity,
)
from chardb.core.acl.context import Decision, GuardContext, GuardFailure, Principal
from chardb.core.acl.exceptions import (
    AuthorizationError,
    CommunityResolutionError,
    PolicyConfigurationError,
)
from chardb.core.acl.guards import (
    DEFAULT_GUARDS,
    Guard,
    authenticated_guard,
    character_edit_guard,
    community_permission_guard,
    global_permission_guard,
    ownership_guard,
    self_guard,
    unauthenticated_guard,
)
from chardb.core.acl.ownership import OwnershipService
from chardb.core.acl.paths import get_nested_value
from chardb.core.acl.permission_service import CommunityPermissionSet, PermissionService
from chardb.core.acl.policy import (
    CharacterEditSpec,
    CommunityRule,
    OwnershipSpec,
    PathSpec,
    Policy,
    SelfSpec,
)

__all__ = [
    "DEFAULT_GUARDS",
    "AuthorizationError",
    "Authorizer",
    "CharacterEditScope",
    "CharacterEditSpec",
    "CommunityAnchor",
    "CommunityPermission",
    "CommunityPermissionSet",
    "CommunityResolutionError",
    "CommunityResolverService",
    "CommunityRule",
    "Decision",
    "GlobalPermission",
    "Guard",
    "GuardContext",
    "GuardFailure",
    "OwnedEntity",
    "OwnershipService",
    "OwnershipSpec",
    "PathSpec",
    "PermissionService",
    "Policy",
    "PolicyConfigurationError",
    "Principal",
    "SelfSpec",
    "any_of",
    "authenticated_guard",
    "character_edit_guard",
    "community_permission_guard",
    "enforce",
    "evaluate",
    "get_nested_value",
    "global_permission_guard",
    "ownership_guard",
    "self_guard",
    "unauthenticated_guard",
]
