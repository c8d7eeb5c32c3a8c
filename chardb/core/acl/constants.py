"""Permission vocabularies and entity keys used by the access-control engine.

Components:
    - GlobalPermission: capabilities stored directly on the user record
    - CommunityPermission: capabilities granted by a community role
    - CommunityAnchor: argument keys a community can be derived from
    - OwnedEntity: entity kinds that have an owning user
    - CharacterEditScope: which family of character-edit permissions applies

Enum values match the column names on the ``users`` and ``roles`` tables, so a
permission can be read straight off a model instance with ``getattr``.
"""

from __future__ import annotations

from enum import Enum

__all__ = [
    "ANY_CHARACTER_EDIT_PERMISSIONS",
    "OWN_CHARACTER_EDIT_PERMISSIONS",
    "CharacterEditScope",
    "CommunityAnchor",
    "CommunityPermission",
    "GlobalPermission",
    "OwnedEntity",
    "role_permissions",
]


class GlobalPermission(str, Enum):
    """System-wide capabilities, independent of any community."""

    IS_ADMIN = "is_admin"
    CAN_CREATE_COMMUNITY = "can_create_community"
    CAN_LIST_USERS = "can_list_users"
    CAN_GRANT_GLOBAL_PERMISSIONS = "can_grant_global_permissions"


class CommunityPermission(str, Enum):
    """Capabilities scoped to one community, granted through roles.

    ``ANY`` is a sentinel rather than a role column: it is satisfied by
    holding any role at all in the community (a membership check).
    """

    ANY = "__any__"
    CAN_CREATE_SPECIES = "can_create_species"
    CAN_CREATE_CHARACTER = "can_create_character"
    CAN_CREATE_ORPHANED_CHARACTER = "can_create_orphaned_character"
    CAN_EDIT_CHARACTER = "can_edit_character"
    CAN_EDIT_OWN_CHARACTER = "can_edit_own_character"
    CAN_EDIT_OWN_CHARACTER_REGISTRY = "can_edit_own_character_registry"
    CAN_EDIT_CHARACTER_REGISTRY = "can_edit_character_registry"
    CAN_EDIT_SPECIES = "can_edit_species"
    CAN_CREATE_INVITE_CODE = "can_create_invite_code"
    CAN_LIST_INVITE_CODES = "can_list_invite_codes"
    CAN_CREATE_ROLE = "can_create_role"
    CAN_EDIT_ROLE = "can_edit_role"
    CAN_REMOVE_COMMUNITY_MEMBER = "can_remove_community_member"
    CAN_MANAGE_MEMBER_ROLES = "can_manage_member_roles"
    CAN_MANAGE_ITEMS = "can_manage_items"
    CAN_GRANT_ITEMS = "can_grant_items"
    CAN_UPLOAD_OWN_CHARACTER_IMAGES = "can_upload_own_character_images"
    CAN_UPLOAD_CHARACTER_IMAGES = "can_upload_character_images"
    CAN_MODERATE_IMAGES = "can_moderate_images"


def role_permissions() -> tuple[CommunityPermission, ...]:
    """Return every permission that is backed by a role column."""
    return tuple(p for p in CommunityPermission if p is not CommunityPermission.ANY)


class CommunityAnchor(str, Enum):
    """Logical keys a PathSpec may use to locate the community of an operation."""

    COMMUNITY_ID = "community_id"
    CHARACTER_ID = "character_id"
    SPECIES_ID = "species_id"
    SPECIES_VARIANT_ID = "species_variant_id"
    TRAIT_ID = "trait_id"
    ENUM_VALUE_ID = "enum_value_id"
    ENUM_VALUE_SETTING_ID = "enum_value_setting_id"
    TRAIT_LIST_ENTRY_ID = "trait_list_entry_id"
    COMMUNITY_MEMBER_ID = "community_member_id"
    COMMUNITY_INVITATION_ID = "community_invitation_id"
    ROLE_ID = "role_id"
    ITEM_TYPE_ID = "item_type_id"
    ITEM_ID = "item_id"


class OwnedEntity(str, Enum):
    """Entity kinds whose ownership can be checked.

    Two kinds address the same ``community_invitations`` row: the invitee
    alone, or inviter and invitee together (either one counts as owner).
    """

    CHARACTER = "character"
    MEDIA = "media"
    GALLERY = "gallery"
    IMAGE = "image"
    COMMENT = "comment"
    INVITEE_OF_INVITATION = "invitee_of_invitation"
    INVITER_OR_INVITEE_OF_INVITATION = "inviter_or_invitee_of_invitation"


class CharacterEditScope(str, Enum):
    """Which character fields an edit operation touches.

    PROFILE covers name, details, visibility, tags and deletion. REGISTRY
    covers registry id, variant and traits. ANY accepts either family.
    """

    ANY = "any"
    PROFILE = "profile"
    REGISTRY = "registry"


# Permissions that let a user edit characters they do not own.
ANY_CHARACTER_EDIT_PERMISSIONS: dict[CharacterEditScope, frozenset[CommunityPermission]] = {
    CharacterEditScope.ANY: frozenset(
        {CommunityPermission.CAN_EDIT_CHARACTER, CommunityPermission.CAN_EDIT_CHARACTER_REGISTRY}
    ),
    CharacterEditScope.PROFILE: frozenset({CommunityPermission.CAN_EDIT_CHARACTER}),
    CharacterEditScope.REGISTRY: frozenset({CommunityPermission.CAN_EDIT_CHARACTER_REGISTRY}),
}

# Permissions that let a user edit characters they own.
OWN_CHARACTER_EDIT_PERMISSIONS: dict[CharacterEditScope, frozenset[CommunityPermission]] = {
    CharacterEditScope.ANY: frozenset(
        {
            CommunityPermission.CAN_EDIT_OWN_CHARACTER,
            CommunityPermission.CAN_EDIT_OWN_CHARACTER_REGISTRY,
        }
    ),
    CharacterEditScope.PROFILE: frozenset({CommunityPermission.CAN_EDIT_OWN_CHARACTER}),
    CharacterEditScope.REGISTRY: frozenset({CommunityPermission.CAN_EDIT_OWN_CHARACTER_REGISTRY}),
}
