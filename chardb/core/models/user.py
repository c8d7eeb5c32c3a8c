"""User model with global permission flags."""

from __future__ import annotations

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from chardb.core.database import TimestampedBase


class User(TimestampedBase):
    """A registered user.

    The boolean columns are the user's global permissions; their names are
    the values of ``GlobalPermission``.
    """

    __tablename__ = "users"

    username: Mapped[str] = mapped_column(String(50), unique=True, nullable=False, index=True)
    display_name: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Global permissions
    is_admin: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_create_community: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_list_users: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    can_grant_global_permissions: Mapped[bool] = mapped_column(
        Boolean, default=False, nullable=False
    )

    def __repr__(self) -> str:
        """String representation of User."""
        return f"<User(id={self.id}, username={self.username})>"
