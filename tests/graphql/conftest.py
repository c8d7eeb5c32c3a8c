"""GraphQL test fixtures.

Provides:
- A small schema exercising every way a field can be protected
- An ``execute`` helper running documents as a given principal
"""

from collections.abc import Awaitable, Callable
from typing import Any

import pytest
from sqlalchemy.ext.asyncio import AsyncSession
import strawberry
from strawberry.types import ExecutionResult

from chardb.core.acl import (
    CharacterEditSpec,
    CommunityPermission,
    CommunityRule,
    GlobalPermission,
    OwnershipSpec,
    PathSpec,
    Policy,
    Principal,
    SelfSpec,
)
from chardb.core.settings import AuthorizationSettings
from chardb.features.graphql import GraphQLContext, Schema, policy_extension

LIST_SPECIES = Policy(name="species", allow_unauthenticated=True)
UPDATE_SPECIES = Policy(
    name="updateSpecies",
    global_permission=GlobalPermission.IS_ADMIN,
    community=CommunityRule(CommunityPermission.CAN_EDIT_SPECIES, PathSpec.of(species_id="id")),
)
UPDATE_VARIANT = Policy(
    community=CommunityRule(
        CommunityPermission.CAN_EDIT_SPECIES,
        PathSpec.of(species_variant_id="input.species_variant_id"),
    ),
)
UPDATE_CHARACTER = Policy(name="updateCharacter", character_edit=CharacterEditSpec("id"))
VIEW_EMAIL = Policy(
    name="viewEmail",
    global_permission=GlobalPermission.IS_ADMIN,
    self_target=SelfSpec(),
)
HIDDEN = Policy(name="hiddenThings")
EDIT_THING = Policy(
    name="editThing",
    community=CommunityRule(
        CommunityPermission.CAN_EDIT_SPECIES,
        PathSpec.of(species_id="input.species_id", trait_id="input.trait_id"),
    ),
    ownership=OwnershipSpec.of(character_id="input.character_id"),
)


@strawberry.input
class UpdateVariantInput:
    species_variant_id: strawberry.ID
    name: str


@strawberry.input
class EditThingInput:
    name: str
    species_id: strawberry.ID | None = strawberry.UNSET
    trait_id: strawberry.ID | None = strawberry.UNSET
    character_id: strawberry.ID | None = strawberry.UNSET


@strawberry.type
class UserType:
    id: strawberry.ID

    @strawberry.field(extensions=[policy_extension(VIEW_EMAIL, null_on_forbidden=True)])
    async def email(self) -> str | None:
        return f"{self.id}@example.com"

    @strawberry.field(extensions=[policy_extension(VIEW_EMAIL, on_forbidden=False)])
    async def has_pending_ownership(self) -> bool:
        return True

    @strawberry.field(extensions=[policy_extension(VIEW_EMAIL, on_forbidden="")])
    async def email_hint(self) -> str:
        return f"{self.id[:2]}***"


@strawberry.type
class Query:
    @strawberry.field(extensions=[policy_extension(LIST_SPECIES)])
    async def species_names(self) -> list[str]:
        return ["Gryphon"]

    @strawberry.field
    async def user(self, id: strawberry.ID) -> UserType:
        return UserType(id=id)

    @strawberry.field(extensions=[policy_extension(HIDDEN, null_on_forbidden=True)])
    async def hidden_things(self) -> list[str]:
        return ["secret"]

    @strawberry.field
    async def explode(self) -> str:
        msg = "connection reset by peer"
        raise RuntimeError(msg)


@strawberry.type
class Mutation:
    @strawberry.mutation(extensions=[policy_extension(UPDATE_SPECIES)])
    async def update_species(self, id: strawberry.ID, name: str) -> str:
        return name

    @strawberry.mutation(extensions=[policy_extension(UPDATE_VARIANT)])
    async def update_variant(self, input: UpdateVariantInput) -> str:
        return input.name

    @strawberry.mutation(extensions=[policy_extension(UPDATE_CHARACTER)])
    async def rename_character(self, id: strawberry.ID, name: str) -> str:
        return name

    @strawberry.mutation(extensions=[policy_extension(EDIT_THING)])
    async def edit_thing(self, input: EditThingInput) -> str:
        return input.name


SCHEMA = Schema(query=Query, mutation=Mutation)


@pytest.fixture
def graphql_schema() -> Schema:
    return SCHEMA


@pytest.fixture
def execute(
    db_session: AsyncSession, authz_settings: AuthorizationSettings
) -> Callable[..., Awaitable[ExecutionResult]]:
    """Run a document against the test schema as ``principal``.

    Example:
        result = await execute("{ speciesNames }", principal=editor)
    """

    async def _execute(
        query: str,
        *,
        principal: Principal | None = None,
        variables: dict[str, Any] | None = None,
    ) -> ExecutionResult:
        context = GraphQLContext(
            session=db_session,
            principal=principal or Principal.anonymous(),
            authz_settings=authz_settings,
            correlation_id="test-correlation",
        )
        return await SCHEMA.execute(query, variable_values=variables, context_value=context)

    return _execute
