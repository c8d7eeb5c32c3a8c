"""Core database package with composable base classes and mixins.

Base Classes and Mixins:
    - Base: Declarative base with auto table naming and constraint naming
    - StringPKMixin: Text UUID primary key
    - TimestampMixin: created_at, updated_at tracking
    - TimestampedBase: StringPKMixin + TimestampMixin

Example:
    from chardb.core.database import TimestampedBase

    class Comment(TimestampedBase):
        __tablename__ = "comments"
        author_id: Mapped[str] = mapped_column(ForeignKey("users.id"))
"""

from __future__ import annotations

from chardb.core.database.base import (
    Base,
    StringPKMixin,
    TimestampedBase,
    TimestampMixin,
)

__all__ = [
    "Base",
    "StringPKMixin",
    "TimestampMixin",
    "TimestampedBase",
]
