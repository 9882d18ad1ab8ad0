"""The authenticated caller as seen by every bounded context."""

from __future__ import annotations

from dataclasses import dataclass, field

from shared_kernel.authorization.protocols import PermissionHolder

SYSTEM_USERNAME = "system"


@dataclass(frozen=True)
class Principal:
    """An authenticated caller and the roles it holds.

    Built by the IAM context after login; other contexts only read it.

    Attributes:
        username: Login name, used for created_by/updated_by stamps
        roles: Resolved roles, evaluated by PermissionEvaluator
        user_id: Identifier of the backing user (None for system work)
    """

    username: str
    roles: tuple[PermissionHolder, ...] = field(default_factory=tuple)
    user_id: str | None = None


def actor_name(principal: Principal | None) -> str:
    """Name to stamp on records, falling back to the system sentinel."""
    if principal is None or not principal.username:
        return SYSTEM_USERNAME
    return principal.username
