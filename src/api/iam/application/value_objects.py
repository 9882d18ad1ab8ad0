"""Application-layer value objects for IAM bounded context.

Read-only view objects returned by the user service. A User aggregate only
holds role references; these views pair it with the resolved roles.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from iam.domain.aggregates import Role, User


@dataclass(frozen=True)
class UserDetails:
    """A user together with the roles its references resolve to.

    Dangling role references are already dropped from ``roles``.

    Attributes:
        user: The User aggregate
        roles: Resolved roles, ordered by name
    """

    user: User
    roles: tuple[Role, ...]

    @property
    def role_names(self) -> list[str]:
        return [role.name for role in self.roles]

    @property
    def permissions(self) -> list[str]:
        """Union of the roles' known permission tokens, sorted."""
        granted = {p.value for role in self.roles for p in role.granted_permissions()}
        return sorted(granted)


@dataclass(frozen=True)
class UserPage:
    """One page of users for the administrative listing.

    Attributes:
        items: Users on this page
        total: Total number of users
        page: Zero-based page index
        size: Requested page size
    """

    items: tuple[UserDetails, ...]
    total: int
    page: int
    size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.size) if self.size else 0
