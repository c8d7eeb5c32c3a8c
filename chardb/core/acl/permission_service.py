"""Global and community-scoped permission evaluation."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING

from sqlalchemy import select

from chardb.core.acl.constants import CommunityPermission, GlobalPermission, role_permissions
from chardb.core.models import CommunityMember, Role

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from chardb.core.acl.context import Principal

logger = logging.getLogger(__name__)

__all__ = ["CommunityPermissionSet", "PermissionService"]


@dataclass(frozen=True, slots=True)
class CommunityPermissionSet:
    """Union of the permissions a user holds in one community.

    ``has_membership`` is true as soon as the user holds any role there,
    even a role that grants nothing.
    """

    has_membership: bool
    granted: frozenset[CommunityPermission]

    def allows(self, permission: CommunityPermission) -> bool:
        if permission is CommunityPermission.ANY:
            return self.has_membership
        return permission in self.granted


_NO_PERMISSIONS = CommunityPermissionSet(has_membership=False, granted=frozenset())


class PermissionService:
    """Evaluate global flags and community role grants for a principal."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def has_global_permission(principal: Principal | None, permission: GlobalPermission) -> bool:
        if principal is None or not principal.is_authenticated:
            return False
        return permission in principal.global_permissions

    async def get_community_permissions(
        self,
        user_id: str | None,
        community_id: str,
    ) -> CommunityPermissionSet:
        """Collect the permissions ``user_id`` holds in ``community_id``.

        Every role the user holds in that community contributes its granted
        flags. Roles in other communities are ignored.
        """
        if not user_id:
            return _NO_PERMISSIONS

        stmt = (
            select(Role)
            .join(CommunityMember, CommunityMember.role_id == Role.id)
            .where(CommunityMember.user_id == user_id, Role.community_id == community_id)
        )
        roles = (await self._session.scalars(stmt)).all()
        if not roles:
            return _NO_PERMISSIONS

        granted = frozenset(
            permission
            for permission in role_permissions()
            if any(getattr(role, permission.value) for role in roles)
        )
        return CommunityPermissionSet(has_membership=True, granted=granted)

    async def has_community_permission(
        self,
        principal: Principal | None,
        community_id: str,
        permission: CommunityPermission,
    ) -> bool:
        """Return True if any of the principal's roles in the community grants ``permission``.

        ``CommunityPermission.ANY`` only requires holding some role there.
        """
        if principal is None or not principal.is_authenticated:
            return False
        permissions = await self.get_community_permissions(principal.id, community_id)
        return permissions.allows(permission)

    async def has_any_community_permission(
        self,
        principal: Principal | None,
        community_id: str,
        permissions: frozenset[CommunityPermission] | set[CommunityPermission],
    ) -> bool:
        """Return True if at least one of ``permissions`` is granted in the community."""
        if principal is None or not principal.is_authenticated:
            return False
        held = await self.get_community_permissions(principal.id, community_id)
        return any(held.allows(permission) for permission in permissions)

    @staticmethod
    def is_self(user_id: str | None, target_user_id: str | None) -> bool:
        return bool(user_id) and user_id == target_user_id
