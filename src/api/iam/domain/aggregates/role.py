"""Role aggregate for IAM context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from iam.domain.value_objects import RoleId
from shared_kernel.authorization.types import (
    Permission,
    parse_permissions,
    permission_to_token,
)


@dataclass(frozen=True)
class Role:
    """A named collection of permissions.

    Permissions are kept as raw tokens exactly as stored, so a role written by
    a newer release (with tokens this release does not know) still loads.
    Unknown tokens are ignored by granted_permissions().
    """

    id: RoleId
    name: str
    description: str = ""
    permissions: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        name: str,
        permissions: Iterable[Permission],
        description: str = "",
    ) -> Role:
        """Factory method for creating a new role from Permission values."""
        return cls(
            id=RoleId.generate(),
            name=name,
            description=description,
            permissions=frozenset(permission_to_token(p) for p in permissions),
        )

    def granted_permissions(self) -> frozenset[Permission]:
        """Known permissions granted by this role."""
        return parse_permissions(self.permissions)

    def grants(self, permission: Permission) -> bool:
        """Check whether this role grants a permission directly or via super-admin."""
        granted = self.granted_permissions()
        return Permission.SYSTEM_ADMIN in granted or permission in granted
