"""Permission definitions for role-based access control.

Permissions follow a "resource:action" naming convention (e.g. "member:read").
The special "system:admin" token is a super-admin wildcard that implies every
other permission, including permissions added after a role was granted it.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class Permission(StrEnum):
    """Closed set of permissions understood by the service.

    Each value is the token stored on roles.
    """

    MEMBER_CREATE = "member:create"
    MEMBER_READ = "member:read"
    MEMBER_UPDATE = "member:update"
    MEMBER_DELETE = "member:delete"

    USER_CREATE = "user:create"
    USER_READ = "user:read"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"

    ROLE_CREATE = "role:create"
    ROLE_READ = "role:read"
    ROLE_UPDATE = "role:update"
    ROLE_DELETE = "role:delete"

    SYSTEM_ADMIN = "system:admin"

    @property
    def resource(self) -> str:
        """Resource half of the token (e.g. "member")."""
        return self.value.split(":", 1)[0]

    @property
    def action(self) -> str:
        """Action half of the token (e.g. "read")."""
        return self.value.split(":", 1)[1]


SUPER_ADMIN = Permission.SYSTEM_ADMIN


def permission_from_token(token: str) -> Permission | None:
    """Map a stored token to a Permission.

    Args:
        token: Token as stored on a role (e.g. "member:read")

    Returns:
        The matching Permission, or None for unknown or malformed tokens
    """
    try:
        return Permission(token)
    except ValueError:
        return None


def permission_to_token(permission: Permission) -> str:
    """Return the storage token for a Permission."""
    return permission.value


def parse_permissions(tokens: Iterable[str]) -> frozenset[Permission]:
    """Map a collection of tokens to Permissions, skipping unknown tokens.

    Example:
        >>> parse_permissions(["member:read", "bogus"])
        frozenset({<Permission.MEMBER_READ: 'member:read'>})
    """
    parsed = (permission_from_token(token) for token in tokens)
    return frozenset(p for p in parsed if p is not None)
