"""Database models package.

Import all models here so ``Base.metadata`` knows every table.
"""

from __future__ import annotations

from .character import Character, Comment, Gallery, Image, Media
from .community import Community, CommunityInvitation, CommunityMember, Role
from .item import Item, ItemType
from .species import EnumValue, EnumValueSetting, Species, SpeciesVariant, Trait, TraitListEntry
from .user import User

__all__ = [
    "Character",
    "Comment",
    "Community",
    "CommunityInvitation",
    "CommunityMember",
    "EnumValue",
    "EnumValueSetting",
    "Gallery",
    "Image",
    "Item",
    "ItemType",
    "Media",
    "Role",
    "Species",
    "SpeciesVariant",
    "Trait",
    "TraitListEntry",
    "User",
]
