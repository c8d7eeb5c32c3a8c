"""Polymorphic entity ownership lookups.

Each ``OwnedEntity`` kind maps to one table and the column(s) naming the
owning user. The mapping is exhaustive over the enum and checked on import,
so adding a kind without an owner field fails immediately.

Ownership is a plain read: a missing row, a NULL owner or an unknown kind
all mean "not the owner" and never raise.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from sqlalchemy import select

from chardb.core.acl.constants import OwnedEntity
from chardb.core.models import Character, Comment, CommunityInvitation, Gallery, Image, Media

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.orm import InstrumentedAttribute

    from chardb.core.database import Base

logger = logging.getLogger(__name__)

__all__ = ["OWNER_FIELDS", "OwnerField", "OwnershipService"]


@dataclass(frozen=True, slots=True)
class OwnerField:
    """Where the owner of an entity kind is stored.

    When several columns are listed, matching any one of them makes the
    user an owner. The first column is the canonical owner.
    """

    model: type[Base]
    columns: tuple[InstrumentedAttribute[Any], ...]


OWNER_FIELDS: dict[OwnedEntity, OwnerField] = {
    OwnedEntity.CHARACTER: OwnerField(Character, (Character.owner_id,)),
    OwnedEntity.MEDIA: OwnerField(Media, (Media.owner_id,)),
    OwnedEntity.GALLERY: OwnerField(Gallery, (Gallery.owner_id,)),
    OwnedEntity.IMAGE: OwnerField(Image, (Image.uploader_id,)),
    OwnedEntity.COMMENT: OwnerField(Comment, (Comment.author_id,)),
    OwnedEntity.INVITEE_OF_INVITATION: OwnerField(
        CommunityInvitation, (CommunityInvitation.invitee_id,)
    ),
    OwnedEntity.INVITER_OR_INVITEE_OF_INVITATION: OwnerField(
        CommunityInvitation,
        (CommunityInvitation.inviter_id, CommunityInvitation.invitee_id),
    ),
}

if set(OWNER_FIELDS) != set(OwnedEntity):  # pragma: no cover
    msg = "OWNER_FIELDS must cover every OwnedEntity"
    raise RuntimeError(msg)


class OwnershipService:
    """Answer "does X own Y" and "who owns Y" for every owned entity kind."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @staticmethod
    def _coerce_kind(entity_type: OwnedEntity | str) -> OwnedEntity | None:
        if isinstance(entity_type, OwnedEntity):
            return entity_type
        try:
            return OwnedEntity(entity_type)
        except ValueError:
            logger.warning(
                "Unknown owned entity type, treating as not owned",
                extra={"entity_type": entity_type},
            )
            return None

    async def _owner_ids(self, kind: OwnedEntity, entity_id: str) -> tuple[str | None, ...] | None:
        owner = OWNER_FIELDS[kind]
        row = (
            await self._session.execute(select(*owner.columns).where(owner.model.id == entity_id))
        ).first()
        if row is None:
            return None
        return tuple(row)

    async def is_owner_of(
        self,
        user_id: str | None,
        entity_type: OwnedEntity | str,
        entity_id: str,
    ) -> bool:
        """Return True if ``user_id`` is (one of) the owner(s) of the entity.

        Args:
            user_id: Candidate owner. ``None`` never owns anything.
            entity_type: Entity kind, as enum member or its string value.
            entity_id: Primary key of the entity.
        """
        if not user_id or not entity_id:
            return False
        kind = self._coerce_kind(entity_type)
        if kind is None:
            return False
        owners = await self._owner_ids(kind, entity_id)
        if owners is None:
            logger.debug(
                "Ownership check on missing entity",
                extra={"entity_type": kind.value, "entity_id": entity_id},
            )
            return False
        return any(owner is not None and owner == user_id for owner in owners)

    async def resolve_entity_owner(
        self,
        entity_type: OwnedEntity | str,
        entity_id: str,
    ) -> str | None:
        """Return the owning user id, or ``None`` if missing or unowned.

        For inviter-or-invitee invitations the inviter is returned.
        """
        if not entity_id:
            return None
        kind = self._coerce_kind(entity_type)
        if kind is None:
            return None
        owners = await self._owner_ids(kind, entity_id)
        if owners is None:
            return None
        return owners[0]
