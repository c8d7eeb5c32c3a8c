"""Character, media, gallery, image and comment models."""

from __future__ import annotations

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from chardb.core.database import TimestampedBase


class Character(TimestampedBase):
    """A character.

    ``owner_id`` is NULL for orphaned characters (created by a community
    before being handed to a user). ``species_id`` is NULL for characters
    that belong to no community.
    """

    __tablename__ = "characters"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    owner_id: Mapped[str | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True
    )
    species_id: Mapped[str | None] = mapped_column(
        ForeignKey("species.id", ondelete="SET NULL"), nullable=True, index=True
    )
    species_variant_id: Mapped[str | None] = mapped_column(
        ForeignKey("species_variants.id", ondelete="SET NULL"), nullable=True
    )
    registry_id: Mapped[str | None] = mapped_column(String(100), nullable=True)

    def __repr__(self) -> str:
        return f"<Character(id={self.id}, owner_id={self.owner_id}, species_id={self.species_id})>"


class Media(TimestampedBase):
    __tablename__ = "media"

    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    character_id: Mapped[str | None] = mapped_column(
        ForeignKey("characters.id", ondelete="SET NULL"), nullable=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False, default="")


class Gallery(TimestampedBase):
    __tablename__ = "galleries"

    owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Image(TimestampedBase):
    __tablename__ = "images"

    uploader_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    filename: Mapped[str] = mapped_column(String(255), nullable=False)


class Comment(TimestampedBase):
    __tablename__ = "comments"

    author_id: Mapped[str] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
