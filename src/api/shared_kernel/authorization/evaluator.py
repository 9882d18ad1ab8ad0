"""Role-based permission evaluation.

A principal is authorized when any of its roles grants the required
permission, or grants the super-admin permission.
"""

from __future__ import annotations

from collections.abc import Iterable

from shared_kernel.authorization.protocols import PermissionHolder
from shared_kernel.authorization.types import (
    SUPER_ADMIN,
    Permission,
    parse_permissions,
)


class PermissionEvaluator:
    """Decides allow/deny for a set of roles and a required permission.

    Stateless; a single instance can be shared across requests.
    """

    def effective_permissions(
        self, roles: Iterable[PermissionHolder]
    ) -> frozenset[Permission]:
        """Union of the known permissions granted by all roles.

        Unknown tokens stored on a role are skipped.
        """
        granted: set[Permission] = set()
        for role in roles:
            granted |= parse_permissions(role.permissions)
        return frozenset(granted)

    def authorize(
        self, roles: Iterable[PermissionHolder], required: Permission
    ) -> bool:
        """Check whether the roles grant the required permission.

        Args:
            roles: Roles held by the principal
            required: The permission the operation needs

        Returns:
            True if any role grants `required` or the super-admin permission
        """
        granted = self.effective_permissions(roles)
        return SUPER_ADMIN in granted or required in granted
