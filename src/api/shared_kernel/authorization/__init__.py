"""Authorization primitives shared across bounded contexts.

Provides the permission vocabulary, the caller identity and the role-based
permission evaluator.
"""

from shared_kernel.authorization.evaluator import PermissionEvaluator
from shared_kernel.authorization.principal import SYSTEM_USERNAME, Principal, actor_name
from shared_kernel.authorization.protocols import PermissionHolder
from shared_kernel.authorization.types import (
    SUPER_ADMIN,
    Permission,
    parse_permissions,
    permission_from_token,
    permission_to_token,
)

__all__ = [
    "Permission",
    "PermissionEvaluator",
    "PermissionHolder",
    "Principal",
    "SUPER_ADMIN",
    "SYSTEM_USERNAME",
    "actor_name",
    "parse_permissions",
    "permission_from_token",
    "permission_to_token",
]
