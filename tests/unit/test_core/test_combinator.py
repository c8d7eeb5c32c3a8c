"""Tests for OR-composition of guards."""

from itertools import permutations
import logging

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from chardb.core.acl import (
    Authorizer,
    CommunityResolutionError,
    GuardContext,
    Policy,
    PolicyConfigurationError,
    Principal,
    any_of,
    enforce,
    evaluate,
)
from chardb.core.exceptions import AuthenticationRequiredError, PermissionDeniedError


async def grant(ctx: GuardContext) -> bool:
    return True


async def abstain(ctx: GuardContext) -> bool:
    return False


async def unresolvable(ctx: GuardContext) -> bool:
    raise CommunityResolutionError("Trait t-404 not found", anchor="trait_id", entity_id="t-404")


async def misconfigured(ctx: GuardContext) -> bool:
    raise PolicyConfigurationError("Unknown anchor")


async def database_down(ctx: GuardContext) -> bool:
    raise ConnectionError("database unavailable")


@pytest.fixture
def ctx(db_session: AsyncSession, authz_settings, principal_factory) -> GuardContext:
    authorizer = Authorizer(db_session, principal_factory("user-1"), settings=authz_settings)
    return authorizer.context(Policy(name="updateTrait"))


@pytest.fixture
def anonymous_ctx(db_session: AsyncSession, authz_settings) -> GuardContext:
    authorizer = Authorizer(db_session, Principal.anonymous(), settings=authz_settings)
    return authorizer.context(Policy(name="updateTrait"))


class TestEvaluate:
    async def test_empty_is_denied(self, ctx: GuardContext) -> None:
        decision = await evaluate([], ctx)

        assert decision.granted is False
        assert decision.evaluated == ()
        assert not decision

    async def test_result_does_not_depend_on_order(self, ctx: GuardContext) -> None:
        guards = [abstain, unresolvable, grant]
        for order in permutations(guards):
            assert (await evaluate(order, ctx)).granted is True

        denying = [abstain, unresolvable, misconfigured]
        for order in permutations(denying):
            assert (await evaluate(order, ctx)).granted is False

    async def test_stops_at_first_grant(self, ctx: GuardContext) -> None:
        calls: list[str] = []

        async def tracked(ctx: GuardContext) -> bool:
            calls.append("tracked")
            return False

        decision = await evaluate([abstain, grant, tracked], ctx)

        assert decision.granted_by == "grant"
        assert decision.evaluated == ("abstain", "grant")
        assert calls == []

    async def test_resolution_failure_counts_as_false(self, ctx: GuardContext) -> None:
        decision = await evaluate([unresolvable, grant], ctx)

        assert decision.granted is True
        assert [f.guard for f in decision.failures] == ["unresolvable"]
        assert decision.failures[0].message == "Trait t-404 not found"

    async def test_unexpected_error_reraised_when_nothing_grants(self, ctx: GuardContext) -> None:
        with pytest.raises(ConnectionError, match="database unavailable"):
            await evaluate([database_down, abstain], ctx)

    async def test_unexpected_error_ignored_when_another_grants(self, ctx: GuardContext) -> None:
        decision = await evaluate([database_down, grant], ctx)

        assert decision.granted is True
        assert decision.failures[0].guard == "database_down"

    async def test_failure_log_levels(
        self, ctx: GuardContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.DEBUG, logger="chardb.core.acl.combinator")

        await evaluate([unresolvable, misconfigured, grant], ctx)

        levels = {record.getMessage(): record.levelno for record in caplog.records}
        assert levels["Guard could not be evaluated: Trait t-404 not found"] == logging.INFO
        assert levels["Guard misconfigured"] == logging.ERROR
        assert levels["Access granted"] == logging.DEBUG


class TestAnyOf:
    async def test_composes(self, ctx: GuardContext) -> None:
        either = any_of(abstain, grant)

        assert either.__name__ == "any_of(abstain, grant)"
        assert await either(ctx) is True
        assert await any_of()(ctx) is False

    async def test_nested_composition(self, ctx: GuardContext) -> None:
        decision = await evaluate([any_of(abstain, unresolvable), any_of(grant)], ctx)

        assert decision.granted_by == "any_of(grant)"


class TestEnforce:
    async def test_returns_decision_on_grant(self, ctx: GuardContext) -> None:
        decision = await enforce([grant], ctx)

        assert decision.granted_by == "grant"

    async def test_anonymous_denial_requires_authentication(
        self, anonymous_ctx: GuardContext
    ) -> None:
        with pytest.raises(AuthenticationRequiredError) as exc:
            await enforce([abstain], anonymous_ctx)

        assert exc.value.status_code == 401
        assert exc.value.operation == "updateTrait"

    async def test_authenticated_denial_is_permission_denied(self, ctx: GuardContext) -> None:
        with pytest.raises(PermissionDeniedError) as exc:
            await enforce([abstain, unresolvable], ctx)

        assert exc.value.status_code == 403
        assert exc.value.user_id == "user-1"
        assert exc.value.evaluated == ["abstain", "unresolvable"]
        assert "updateTrait" in exc.value.detail

    async def test_denial_logged_with_guard_failures(
        self, ctx: GuardContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING, logger="chardb.core.acl.combinator")

        with pytest.raises(PermissionDeniedError):
            await enforce([unresolvable], ctx)

        (record,) = [r for r in caplog.records if r.getMessage() == "Access denied"]
        assert record.levelno == logging.WARNING
        assert record.operation == "updateTrait"
        assert record.guard_failures == {"unresolvable": "Trait t-404 not found"}

    async def test_denial_logging_can_be_disabled(
        self, ctx: GuardContext, caplog: pytest.LogCaptureFixture
    ) -> None:
        caplog.set_level(logging.WARNING, logger="chardb.core.acl.combinator")

        with pytest.raises(PermissionDeniedError):
            await enforce([abstain], ctx, log_denials=False)

        assert not [r for r in caplog.records if r.getMessage() == "Access denied"]
