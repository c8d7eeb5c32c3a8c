"""Pytest configuration and shared fixtures.

Organization:
    - Database Fixtures: in-memory SQLite engine and session
    - World Fixtures: a seeded community graph every authorization test reads
    - Principal Fixtures: actors with different relations to that graph

The seeded world:

    community K ── species S ── variant V ── enum value setting EVS (EV on V)
                │             │            └─ trait list entry TLE (T on V)
                │             └─ trait T ── enum value EV
                ├─ roles: editor (species + character edit), plain (no flags)
                ├─ item type IT ── item I (owned by owner)
                └─ invitation INV (editor invites outsider)
    community L ── role l-editor (species edit)

    characters: C1 (owner, species S), orphan (no owner, species S),
                loner (owner, no species)
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from types import SimpleNamespace
from typing import TYPE_CHECKING

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from chardb.core.acl import Principal
from chardb.core.settings import AuthorizationSettings

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest.fixture
async def db_engine() -> AsyncGenerator[AsyncEngine]:
    """Async SQLAlchemy engine on a fresh in-memory SQLite database."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession]:
    """Async session with every table created.

    Example:
        async def test_create_user(db_session):
            db_session.add(User(username="alice"))
            await db_session.commit()
    """
    from chardb.core.database import Base
    import chardb.core.models  # noqa: F401

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()

    async with db_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ============================================================================
# World Fixtures
# ============================================================================


@pytest.fixture
async def world(db_session: AsyncSession) -> SimpleNamespace:
    """Seed the community graph described in the module docstring.

    Returns:
        Namespace of the seeded ids.
    """
    from chardb.core.models import (
        Character,
        Comment,
        Community,
        CommunityInvitation,
        CommunityMember,
        EnumValue,
        EnumValueSetting,
        Gallery,
        Image,
        Item,
        ItemType,
        Media,
        Role,
        Species,
        SpeciesVariant,
        Trait,
        TraitListEntry,
        User,
    )

    ids = SimpleNamespace(
        admin="user-admin",
        editor="user-editor",
        plain_member="user-plain",
        outsider="user-outsider",
        owner="user-owner",
        other_editor="user-other-editor",
        community="community-k",
        other_community="community-l",
        editor_role="role-k-editor",
        plain_role="role-k-plain",
        other_role="role-l-editor",
        editor_membership="member-k-editor",
        plain_membership="member-k-plain",
        species="species-s",
        variant="variant-v",
        trait="trait-t",
        enum_value="enum-value-ev",
        enum_value_setting="enum-setting-evs",
        trait_list_entry="trait-entry-tle",
        item_type="item-type-it",
        item="item-i",
        character="character-c1",
        orphan="character-orphan",
        loner="character-loner",
        invitation="invitation-inv",
        media="media-m",
        gallery="gallery-g",
        image="image-i",
        comment="comment-c",
    )

    db_session.add_all(
        [
            User(id=ids.admin, username="admin", is_admin=True),
            User(id=ids.editor, username="editor"),
            User(id=ids.plain_member, username="plain"),
            User(id=ids.outsider, username="outsider"),
            User(id=ids.owner, username="owner"),
            User(id=ids.other_editor, username="other-editor"),
            Community(id=ids.community, name="Kestrel Keep"),
            Community(id=ids.other_community, name="Lantern Lodge"),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            Role(
                id=ids.editor_role,
                community_id=ids.community,
                name="Editor",
                can_edit_species=True,
                can_edit_character=True,
            ),
            Role(id=ids.plain_role, community_id=ids.community, name="Member"),
            Role(
                id=ids.other_role,
                community_id=ids.other_community,
                name="Editor",
                can_edit_species=True,
                can_edit_character=True,
            ),
            Species(id=ids.species, community_id=ids.community, name="Gryphon"),
            ItemType(id=ids.item_type, community_id=ids.community, name="Feather"),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            CommunityMember(id=ids.editor_membership, user_id=ids.editor, role_id=ids.editor_role),
            CommunityMember(
                id=ids.plain_membership, user_id=ids.plain_member, role_id=ids.plain_role
            ),
            CommunityMember(user_id=ids.other_editor, role_id=ids.other_role),
            CommunityInvitation(
                id=ids.invitation,
                community_id=ids.community,
                role_id=ids.plain_role,
                inviter_id=ids.editor,
                invitee_id=ids.outsider,
            ),
            SpeciesVariant(id=ids.variant, species_id=ids.species, name="Common"),
            Trait(id=ids.trait, species_id=ids.species, name="Plumage"),
            Item(id=ids.item, item_type_id=ids.item_type, owner_id=ids.owner, quantity=3),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            EnumValue(id=ids.enum_value, trait_id=ids.trait, name="Golden"),
            TraitListEntry(
                id=ids.trait_list_entry, trait_id=ids.trait, species_variant_id=ids.variant
            ),
            Character(
                id=ids.character,
                name="Aster",
                owner_id=ids.owner,
                species_id=ids.species,
                species_variant_id=ids.variant,
            ),
            Character(id=ids.orphan, name="Stray", owner_id=None, species_id=ids.species),
            Character(id=ids.loner, name="Wanderer", owner_id=ids.owner, species_id=None),
        ]
    )
    await db_session.flush()

    db_session.add_all(
        [
            EnumValueSetting(
                id=ids.enum_value_setting,
                enum_value_id=ids.enum_value,
                species_variant_id=ids.variant,
            ),
            Media(id=ids.media, owner_id=ids.owner, character_id=ids.character, title="Ref"),
            Gallery(id=ids.gallery, owner_id=ids.owner, name="Sketches"),
            Image(id=ids.image, uploader_id=ids.owner, filename="aster.png"),
            Comment(id=ids.comment, author_id=ids.owner, content="Lovely colours"),
        ]
    )
    await db_session.commit()
    return ids


# ============================================================================
# Principal Fixtures
# ============================================================================


def _principal(user_id: str, *permissions) -> Principal:
    """Authenticated principal holding the given global permissions."""
    return Principal(id=user_id, is_authenticated=True, global_permissions=frozenset(permissions))


@pytest.fixture
def anonymous() -> Principal:
    return Principal.anonymous()


@pytest.fixture
def admin(world: SimpleNamespace) -> Principal:
    from chardb.core.acl import GlobalPermission

    return _principal(world.admin, GlobalPermission.IS_ADMIN)


@pytest.fixture
def editor(world: SimpleNamespace) -> Principal:
    return _principal(world.editor)


@pytest.fixture
def plain_member(world: SimpleNamespace) -> Principal:
    return _principal(world.plain_member)


@pytest.fixture
def outsider(world: SimpleNamespace) -> Principal:
    return _principal(world.outsider)


@pytest.fixture
def owner(world: SimpleNamespace) -> Principal:
    return _principal(world.owner)


@pytest.fixture
def other_editor(world: SimpleNamespace) -> Principal:
    return _principal(world.other_editor)


@pytest.fixture
def authz_settings() -> AuthorizationSettings:
    """Default engine settings, independent of the environment."""
    return AuthorizationSettings(
        max_resolution_hops=5,
        owner_requires_own_permission=False,
        log_denials=True,
    )


@pytest.fixture
def principal_factory():
    """Build authenticated principals: ``principal_factory("user-1", GlobalPermission.IS_ADMIN)``."""
    return _principal
