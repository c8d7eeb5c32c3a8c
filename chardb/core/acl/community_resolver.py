"""Derive the community an operation concerns from its arguments.

Most community-scoped operations do not receive a community id directly.
They receive the id of something that lives inside a community (a trait, a
species variant, a role) and the community has to be found by walking
foreign keys upwards. Each ``CommunityAnchor`` has one fixed chain of
single-column lookups:

    enum_value_setting_id → species_variant_id → species_id → community_id

Every chain ends by loading the community row itself, so a dangling
community id fails the same way as a missing entity. Resolution is
read-only: the same arguments always produce the same community.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from chardb.core.acl.constants import CommunityAnchor
from chardb.core.acl.exceptions import CommunityResolutionError, PolicyConfigurationError
from chardb.core.acl.paths import get_nested_value, is_blank
from chardb.core.models import (
    Character,
    Community,
    CommunityInvitation,
    CommunityMember,
    EnumValue,
    EnumValueSetting,
    Item,
    ItemType,
    Role,
    Species,
    SpeciesVariant,
    Trait,
    TraitListEntry,
)

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from chardb.core.acl.policy import PathSpec
    from chardb.core.database import Base

logger = logging.getLogger(__name__)

__all__ = ["RESOLUTION_CHAINS", "CommunityResolverService", "Hop"]


@dataclass(frozen=True, slots=True)
class Hop:
    """Load ``column`` from the ``model`` row whose id is the current value."""

    entity: str
    model: type[Base]
    column: InstrumentedAttribute[Any]


_CHARACTER = Hop("character", Character, Character.species_id)
_SPECIES = Hop("species", Species, Species.community_id)
_VARIANT = Hop("species variant", SpeciesVariant, SpeciesVariant.species_id)
_TRAIT = Hop("trait", Trait, Trait.species_id)
_ENUM_VALUE = Hop("enum value", EnumValue, EnumValue.trait_id)
_ENUM_VALUE_SETTING = Hop("enum value setting", EnumValueSetting, EnumValueSetting.species_variant_id)
_TRAIT_LIST_ENTRY = Hop("trait list entry", TraitListEntry, TraitListEntry.species_variant_id)
_MEMBER = Hop("community member", CommunityMember, CommunityMember.role_id)
_INVITATION = Hop("community invitation", CommunityInvitation, CommunityInvitation.community_id)
_ROLE = Hop("role", Role, Role.community_id)
_ITEM_TYPE = Hop("item type", ItemType, ItemType.community_id)
_ITEM = Hop("item", Item, Item.item_type_id)
_COMMUNITY = Hop("community", Community, Community.id)

RESOLUTION_CHAINS: dict[CommunityAnchor, tuple[Hop, ...]] = {
    CommunityAnchor.COMMUNITY_ID: (_COMMUNITY,),
    CommunityAnchor.CHARACTER_ID: (_CHARACTER, _SPECIES, _COMMUNITY),
    CommunityAnchor.SPECIES_ID: (_SPECIES, _COMMUNITY),
    CommunityAnchor.SPECIES_VARIANT_ID: (_VARIANT, _SPECIES, _COMMUNITY),
    CommunityAnchor.TRAIT_ID: (_TRAIT, _SPECIES, _COMMUNITY),
    CommunityAnchor.ENUM_VALUE_ID: (_ENUM_VALUE, _TRAIT, _SPECIES, _COMMUNITY),
    CommunityAnchor.ENUM_VALUE_SETTING_ID: (_ENUM_VALUE_SETTING, _VARIANT, _SPECIES, _COMMUNITY),
    CommunityAnchor.TRAIT_LIST_ENTRY_ID: (_TRAIT_LIST_ENTRY, _VARIANT, _SPECIES, _COMMUNITY),
    CommunityAnchor.COMMUNITY_MEMBER_ID: (_MEMBER, _ROLE, _COMMUNITY),
    CommunityAnchor.COMMUNITY_INVITATION_ID: (_INVITATION, _COMMUNITY),
    CommunityAnchor.ROLE_ID: (_ROLE, _COMMUNITY),
    CommunityAnchor.ITEM_TYPE_ID: (_ITEM_TYPE, _COMMUNITY),
    CommunityAnchor.ITEM_ID: (_ITEM, _ITEM_TYPE, _COMMUNITY),
}


class CommunityResolverService:
    """Resolve community ids through the fixed anchor chains.

    Args:
        session: Async session used for the lookups.
        max_hops: Upper bound on chain length. A chain longer than this is a
            configuration error, detected when the service is built.
        chains: Override the chain table (tests only).
    """

    def __init__(
        self,
        session: AsyncSession,
        *,
        max_hops: int = 5,
        chains: Mapping[CommunityAnchor, Sequence[Hop]] | None = None,
    ) -> None:
        self._session = session
        self._max_hops = max_hops
        self._chains = {key: tuple(hops) for key, hops in (chains or RESOLUTION_CHAINS).items()}
        self._validate_chains()

    def _validate_chains(self) -> None:
        missing = [anchor.value for anchor in CommunityAnchor if anchor not in self._chains]
        if missing:
            msg = f"No resolution chain for: {', '.join(missing)}"
            raise PolicyConfigurationError(msg)
        for anchor, hops in self._chains.items():
            if not hops or len(hops) > self._max_hops:
                msg = (
                    f"Resolution chain for {anchor.value} has {len(hops)} hops "
                    f"(allowed 1..{self._max_hops})"
                )
                raise PolicyConfigurationError(msg, anchor=anchor.value)
            if hops[-1].model is not Community:
                msg = f"Resolution chain for {anchor.value} does not end at a community"
                raise PolicyConfigurationError(msg, anchor=anchor.value)

    async def resolve(self, spec: PathSpec, args: Mapping[str, Any] | Any) -> str:
        """Return the community id referenced by ``args``.

        The first PathSpec entry whose path holds a value decides the anchor.
        A list of ids is accepted if every id lands in the same community.

        Raises:
            CommunityResolutionError: No path holds a value, an entity along
                the chain is missing, or a foreign key along the chain is NULL.
        """
        for entry in spec.entries:
            value = get_nested_value(args, entry.path)
            if is_blank(value):
                continue
            if isinstance(value, (list, tuple)):
                return await self._resolve_many(entry.key, value)
            return await self.resolve_anchor(entry.key, str(value))

        tried = ", ".join(f"{entry.key.value}={entry.path}" for entry in spec.entries)
        msg = f"None of the community paths are present in the arguments ({tried})"
        raise CommunityResolutionError(msg)

    async def _resolve_many(self, anchor: CommunityAnchor, values: Sequence[Any]) -> str:
        communities = {await self.resolve_anchor(anchor, str(value)) for value in values}
        if len(communities) > 1:
            msg = f"{anchor.value} values span {len(communities)} communities"
            raise CommunityResolutionError(msg, anchor=anchor.value)
        return communities.pop()

    async def resolve_anchor(self, anchor: CommunityAnchor, entity_id: str) -> str:
        """Walk the chain for ``anchor`` starting at ``entity_id``."""
        current: Any = entity_id
        for hop in self._chains[anchor]:
            row = (
                await self._session.execute(select(hop.column).where(hop.model.id == current))
            ).first()
            if row is None:
                msg = f"{hop.entity.capitalize()} {current} not found"
                raise CommunityResolutionError(
                    msg, anchor=anchor.value, entity_id=str(current), hop=hop.entity
                )
            if row[0] is None:
                msg = f"{hop.entity.capitalize()} {current} has no {hop.column.key}"
                raise CommunityResolutionError(
                    msg, anchor=anchor.value, entity_id=str(current), hop=hop.entity
                )
            current = row[0]

        logger.debug(
            "Resolved community",
            extra={"anchor": anchor.value, "entity_id": entity_id, "community_id": current},
        )
        return str(current)

    async def get_character_community(self, character_id: str) -> str | None:
        """Community of a character, or ``None`` if it has no species.

        Raises:
            CommunityResolutionError: The character does not exist.
        """
        row = (
            await self._session.execute(
                select(Character.species_id).where(Character.id == character_id)
            )
        ).first()
        if row is None:
            msg = f"Character {character_id} not found"
            raise CommunityResolutionError(
                msg, anchor=CommunityAnchor.CHARACTER_ID.value, entity_id=character_id
            )
        if row[0] is None:
            return None
        return await self.resolve_anchor(CommunityAnchor.SPECIES_ID, row[0])
