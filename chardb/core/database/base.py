"""Base database model classes with composable mixins.

This module provides the foundation for SQLAlchemy models with:
- Text UUID primary keys (ids travel through GraphQL as opaque strings)
- Timestamp tracking (created_at, updated_at)
- Automatic table name generation

Example:
    class Species(TimestampedBase):
        __tablename__ = "species"
        community_id: Mapped[str] = mapped_column(ForeignKey("communities.id"))
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, MetaData, String
from sqlalchemy.orm import DeclarativeBase, Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

# Consistent naming convention for database constraints
NAMING_CONVENTION = {
    "ix": "ix_%(column_0_label)s",
    "uq": "uq_%(table_name)s_%(column_0_name)s",
    "ck": "ck_%(table_name)s_%(constraint_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


def generate_id() -> str:
    """Generate a new primary key value."""
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Declarative base with constraint naming and automatic table naming.

    The automatic table naming can be overridden by setting __tablename__
    explicitly on the model class.
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    @declared_attr.directive
    def __tablename__(cls) -> str:
        """Auto-derive table name from class name (lowercase)."""
        return cls.__name__.lower()


class StringPKMixin:
    """Text primary key holding a UUID4.

    Provides:
        id: 36-character UUID string primary key
    """

    __allow_unmapped__ = True

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=generate_id,
        comment="UUID primary key stored as text",
    )


class TimestampMixin:
    """Timestamp tracking for create and update operations.

    Uses both Python-side defaults (for test environments) and database
    server defaults (for direct SQL inserts).
    """

    __allow_unmapped__ = True

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        nullable=False,
        comment="Timestamp of record creation",
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        server_default=func.now(),
        onupdate=lambda: datetime.now(UTC),
        nullable=False,
        comment="Timestamp of last update",
    )


class TimestampedBase(Base, StringPKMixin, TimestampMixin):
    """Convenience base with text UUID PK and timestamps.

    Example:
        class Gallery(TimestampedBase):
            __tablename__ = "galleries"
            owner_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
    """

    __abstract__ = True


__all__ = [
    "Base",
    "StringPKMixin",
    "TimestampMixin",
    "TimestampedBase",
]
