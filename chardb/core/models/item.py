"""Item type and item database models."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chardb.core.database import TimestampedBase


class ItemType(TimestampedBase):
    """A kind of item defined by a community."""

    __tablename__ = "item_types"

    community_id: Mapped[str] = mapped_column(
        ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        """String representation."""
        return f"<ItemType(id={self.id}, name={self.name!r}, community={self.community_id})>"


class Item(TimestampedBase):
    """A stack of an item type held by a user.

    The community an item belongs to is its item type's community.
    """

    __tablename__ = "items"

    item_type_id: Mapped[str] = mapped_column(
        ForeignKey("item_types.id", ondelete="CASCADE"), nullable=False, index=True
    )
    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    def __repr__(self) -> str:
        """String representation."""
        return f"<Item(id={self.id}, item_type={self.item_type_id}, owner={self.owner_id})>"
