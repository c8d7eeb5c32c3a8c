"""Request-scoped inputs and outputs of an authorization decision."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from chardb.core.acl.constants import GlobalPermission

if TYPE_CHECKING:
    from collections.abc import Mapping

    from chardb.core.acl.community_resolver import CommunityResolverService
    from chardb.core.acl.ownership import OwnershipService
    from chardb.core.acl.permission_service import PermissionService
    from chardb.core.acl.policy import Policy
    from chardb.core.models import User
    from chardb.core.settings.authz import AuthorizationSettings

__all__ = ["Decision", "GuardContext", "GuardFailure", "Principal"]


@dataclass(frozen=True, slots=True)
class Principal:
    """The actor making a request.

    Built by the upstream authentication layer and never mutated afterwards.
    An anonymous principal has no id and is not authenticated.
    """

    id: str | None = None
    is_authenticated: bool = False
    global_permissions: frozenset[GlobalPermission] = frozenset()

    @property
    def is_admin(self) -> bool:
        return GlobalPermission.IS_ADMIN in self.global_permissions

    @classmethod
    def anonymous(cls) -> Principal:
        return cls()

    @classmethod
    def from_user(cls, user: User) -> Principal:
        """Build an authenticated principal from a loaded user row."""
        granted = frozenset(p for p in GlobalPermission if getattr(user, p.value, False))
        return cls(id=user.id, is_authenticated=True, global_permissions=granted)


@dataclass(frozen=True, slots=True)
class GuardContext:
    """Everything a guard may look at for one operation.

    Attributes:
        principal: Current actor, possibly anonymous.
        policy: Policy declared for the operation.
        args: Operation arguments (resolver kwargs or route params).
        permissions: Permission service bound to the request's session.
        communities: Community resolver bound to the request's session.
        ownership: Ownership service bound to the request's session.
        settings: Authorization settings in effect.
        source: Parent object for GraphQL field resolvers, if any.
        operation: Operation name used in logs and denial messages.
    """

    principal: Principal
    policy: Policy
    args: Mapping[str, Any]
    permissions: PermissionService
    communities: CommunityResolverService
    ownership: OwnershipService
    settings: AuthorizationSettings
    source: Any = None
    operation: str | None = None

    @property
    def operation_name(self) -> str:
        return self.operation or self.policy.name or "<anonymous operation>"


@dataclass(frozen=True, slots=True)
class GuardFailure:
    """A guard branch that raised instead of returning a boolean."""

    guard: str
    error: BaseException

    @property
    def message(self) -> str:
        return getattr(self.error, "message", None) or str(self.error)


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of evaluating a policy. Computed per request, never stored."""

    granted: bool
    granted_by: str | None = None
    evaluated: tuple[str, ...] = ()
    failures: tuple[GuardFailure, ...] = ()

    def __bool__(self) -> bool:
        return self.granted
