"""Declarative policy descriptors for protected operations.

A ``Policy`` is plain data attached to an operation when it is registered
(a Strawberry field, a FastAPI route). Each populated attribute opens one
branch through which the operation can be authorized; attributes left empty
keep their guard out of the decision.

Example:
    >>> from chardb.core.acl import (
    ...     CommunityPermission, CommunityRule, GlobalPermission, PathSpec, Policy,
    ... )
    >>> update_species = Policy(
    ...     name="updateSpecies",
    ...     global_permission=GlobalPermission.IS_ADMIN,
    ...     community=CommunityRule(
    ...         CommunityPermission.CAN_EDIT_SPECIES,
    ...         PathSpec.of(species_id="id"),
    ...     ),
    ... )

Key names are validated when the descriptor is built, so a typo fails at
import time instead of silently denying every request.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum

from chardb.core.acl.constants import (
    CharacterEditScope,
    CommunityAnchor,
    CommunityPermission,
    GlobalPermission,
    OwnedEntity,
)
from chardb.core.acl.exceptions import PolicyConfigurationError
from chardb.core.acl.paths import split_path

__all__ = [
    "CharacterEditSpec",
    "CommunityRule",
    "OwnershipSpec",
    "PathEntry",
    "PathSpec",
    "Policy",
    "SelfSpec",
]


@dataclass(frozen=True)
class PathEntry[E: Enum]:
    """One logical key and the argument path holding its id."""

    key: E
    path: str


def _validate_path(path: str) -> str:
    try:
        split_path(path)
    except ValueError as exc:
        raise PolicyConfigurationError(str(exc), path=path) from exc
    return path


def _build_entries[E: Enum](
    enum_cls: type[E],
    paths: dict[str, str],
    *,
    suffix: str = "",
) -> tuple[PathEntry[E], ...]:
    if not paths:
        msg = f"At least one {enum_cls.__name__} path is required"
        raise PolicyConfigurationError(msg)

    entries: list[PathEntry[E]] = []
    for raw_key, path in paths.items():
        key_value = raw_key.removesuffix(suffix) if suffix else raw_key
        try:
            if key_value == raw_key and suffix:
                raise ValueError(raw_key)
            key = enum_cls(key_value)
        except ValueError as exc:
            valid = ", ".join(f"{member.value}{suffix}" for member in enum_cls)
            msg = f"Unknown {enum_cls.__name__} key {raw_key!r} (expected one of: {valid})"
            raise PolicyConfigurationError(msg, key=raw_key) from exc
        entries.append(PathEntry(key, _validate_path(path)))
    return tuple(entries)


@dataclass(frozen=True, slots=True)
class PathSpec:
    """Where to find the id(s) a community is derived from.

    Entries are tried in declaration order; the first one whose path holds a
    non-empty value is used.
    """

    entries: tuple[PathEntry[CommunityAnchor], ...]

    @classmethod
    def of(cls, **paths: str) -> PathSpec:
        """Build from keyword arguments, e.g. ``PathSpec.of(trait_id="input.trait_id")``."""
        return cls(_build_entries(CommunityAnchor, paths))

    def __post_init__(self) -> None:
        if not self.entries:
            msg = "PathSpec requires at least one entry"
            raise PolicyConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class OwnershipSpec:
    """Which argument identifies the entity the principal must own.

    Keys are the entity kind with an ``_id`` suffix, e.g. ``character_id`` or
    ``inviter_or_invitee_of_invitation_id``.
    """

    entries: tuple[PathEntry[OwnedEntity], ...]

    @classmethod
    def of(cls, **paths: str) -> OwnershipSpec:
        return cls(_build_entries(OwnedEntity, paths, suffix="_id"))

    def __post_init__(self) -> None:
        if not self.entries:
            msg = "OwnershipSpec requires at least one entry"
            raise PolicyConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class SelfSpec:
    """Argument holding the target user id of a self-service operation.

    With no path, the ``id`` of the parent object being resolved is used,
    which suits field resolvers on the user type itself.
    """

    user_id: str | None = None

    def __post_init__(self) -> None:
        if self.user_id is not None:
            _validate_path(self.user_id)


@dataclass(frozen=True, slots=True)
class CharacterEditSpec:
    """Argument holding the id of the character being edited."""

    character_id: str
    scope: CharacterEditScope = CharacterEditScope.ANY

    def __post_init__(self) -> None:
        _validate_path(self.character_id)


@dataclass(frozen=True, slots=True)
class CommunityRule:
    """A community permission plus the PathSpec locating the community."""

    permission: CommunityPermission
    resolve_from: PathSpec

    def __post_init__(self) -> None:
        if not isinstance(self.resolve_from, PathSpec):
            msg = "CommunityRule.resolve_from must be a PathSpec"
            raise PolicyConfigurationError(msg, permission=str(self.permission))


@dataclass(frozen=True, slots=True)
class Policy:
    """Access policy for a single operation.

    Attributes:
        name: Operation name used in logs and denial messages.
        global_permission: Grant when the principal holds this global permission.
        community: Grant when the principal holds a permission in the resolved community.
        ownership: Grant when the principal owns the referenced entity.
        self_target: Grant when the principal is the referenced user.
        character_edit: Grant when the principal may edit the referenced character.
        allow_authenticated: Grant to any authenticated principal.
        allow_unauthenticated: Grant to everyone, authenticated or not.
    """

    name: str | None = None
    global_permission: GlobalPermission | None = None
    community: CommunityRule | None = None
    ownership: OwnershipSpec | None = None
    self_target: SelfSpec | None = None
    character_edit: CharacterEditSpec | None = None
    allow_authenticated: bool = False
    allow_unauthenticated: bool = False

    @property
    def declares_requirements(self) -> bool:
        """Whether any branch is open at all."""
        return any(
            (
                self.global_permission is not None,
                self.community is not None,
                self.ownership is not None,
                self.self_target is not None,
                self.character_edit is not None,
                self.allow_authenticated,
                self.allow_unauthenticated,
            )
        )

    def named(self, name: str) -> Policy:
        """Return a copy carrying ``name`` (used when one policy guards several fields)."""
        return replace(self, name=name)
