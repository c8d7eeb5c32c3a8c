"""Community, role, membership and invitation models."""

from __future__ import annotations

from sqlalchemy import Boolean, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from chardb.core.database import TimestampedBase


def _flag() -> Mapped[bool]:
    return mapped_column(Boolean, default=False, nullable=False)


class Community(TimestampedBase):
    """A community that owns species, roles and item types."""

    __tablename__ = "communities"

    name: Mapped[str] = mapped_column(String(255), nullable=False)

    def __repr__(self) -> str:
        return f"<Community(id={self.id}, name={self.name})>"


class Role(TimestampedBase):
    """A named set of community permissions.

    Every role belongs to exactly one community. Each boolean column is a
    ``CommunityPermission``; a member's permissions in a community are the
    union of the columns over all roles they hold there.
    """

    __tablename__ = "roles"

    community_id: Mapped[str] = mapped_column(
        ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)

    can_create_species: Mapped[bool] = _flag()
    can_create_character: Mapped[bool] = _flag()
    can_create_orphaned_character: Mapped[bool] = _flag()
    can_edit_character: Mapped[bool] = _flag()
    can_edit_own_character: Mapped[bool] = _flag()
    can_edit_own_character_registry: Mapped[bool] = _flag()
    can_edit_character_registry: Mapped[bool] = _flag()
    can_edit_species: Mapped[bool] = _flag()
    can_create_invite_code: Mapped[bool] = _flag()
    can_list_invite_codes: Mapped[bool] = _flag()
    can_create_role: Mapped[bool] = _flag()
    can_edit_role: Mapped[bool] = _flag()
    can_remove_community_member: Mapped[bool] = _flag()
    can_manage_member_roles: Mapped[bool] = _flag()
    can_manage_items: Mapped[bool] = _flag()
    can_grant_items: Mapped[bool] = _flag()
    can_upload_own_character_images: Mapped[bool] = _flag()
    can_upload_character_images: Mapped[bool] = _flag()
    can_moderate_images: Mapped[bool] = _flag()

    def __repr__(self) -> str:
        return f"<Role(id={self.id}, community_id={self.community_id}, name={self.name})>"


class CommunityMember(TimestampedBase):
    """A user holding a role. The community is the role's community."""

    __tablename__ = "community_members"

    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    role_id: Mapped[str] = mapped_column(
        ForeignKey("roles.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (Index("ix_community_members_user_role", "user_id", "role_id", unique=True),)


class CommunityInvitation(TimestampedBase):
    """An invitation from one user to another to join a community with a role."""

    __tablename__ = "community_invitations"

    community_id: Mapped[str] = mapped_column(
        ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    role_id: Mapped[str] = mapped_column(ForeignKey("roles.id", ondelete="CASCADE"), nullable=False)
    inviter_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False)
    invitee_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
