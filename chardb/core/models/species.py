"""Species and trait configuration models.

Everything in this module hangs off a species, and every species belongs to
one community:

    community ← species ← variant ← enum value setting / trait list entry
                        ← trait   ← enum value
"""

from __future__ import annotations

from sqlalchemy import ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from chardb.core.database import TimestampedBase


class Species(TimestampedBase):
    __tablename__ = "species"

    community_id: Mapped[str] = mapped_column(
        ForeignKey("communities.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class SpeciesVariant(TimestampedBase):
    __tablename__ = "species_variants"

    species_id: Mapped[str] = mapped_column(
        ForeignKey("species.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class Trait(TimestampedBase):
    __tablename__ = "traits"

    species_id: Mapped[str] = mapped_column(
        ForeignKey("species.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class EnumValue(TimestampedBase):
    """One allowed value of an enum-typed trait."""

    __tablename__ = "enum_values"

    trait_id: Mapped[str] = mapped_column(
        ForeignKey("traits.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)


class EnumValueSetting(TimestampedBase):
    """Enables an enum value for a specific species variant."""

    __tablename__ = "enum_value_settings"

    enum_value_id: Mapped[str] = mapped_column(
        ForeignKey("enum_values.id", ondelete="CASCADE"), nullable=False
    )
    species_variant_id: Mapped[str] = mapped_column(
        ForeignKey("species_variants.id", ondelete="CASCADE"), nullable=False, index=True
    )


class TraitListEntry(TimestampedBase):
    """Places a trait on a species variant's trait list."""

    __tablename__ = "trait_list_entries"

    trait_id: Mapped[str] = mapped_column(ForeignKey("traits.id", ondelete="CASCADE"), nullable=False)
    species_variant_id: Mapped[str] = mapped_column(
        ForeignKey("species_variants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    position: Mapped[int] = mapped_column(default=0, nullable=False)
