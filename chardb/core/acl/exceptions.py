"""Internal authorization errors.

These never reach a client directly. The guard combinator treats each of
them as "this branch did not grant" and keeps evaluating the remaining
branches. Only AuthenticationRequiredError and PermissionDeniedError (see
``chardb.core.exceptions``) cross the combinator boundary.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "AuthorizationError",
    "CommunityResolutionError",
    "PolicyConfigurationError",
]


class AuthorizationError(Exception):
    """Base class for failures inside a single guard branch."""

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(message)


class PolicyConfigurationError(AuthorizationError):
    """A policy descriptor references a key, path or chain that cannot work.

    Raised at registration time where possible (unknown PathSpec keys) and
    at evaluation time otherwise (e.g. a community rule without a PathSpec).
    """


class CommunityResolutionError(AuthorizationError):
    """The community for an operation could not be derived.

    Raised when the declared argument path is missing, a referenced entity
    does not exist, or a hop in the chain has no parent.
    """

    def __init__(
        self,
        message: str,
        *,
        anchor: str | None = None,
        entity_id: str | None = None,
        hop: str | None = None,
    ) -> None:
        self.anchor = anchor
        self.entity_id = entity_id
        self.hop = hop
        super().__init__(message, anchor=anchor, entity_id=entity_id, hop=hop)
