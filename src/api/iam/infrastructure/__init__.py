"""Infrastructure layer for IAM bounded context."""

from iam.infrastructure.role_repository import RoleRepository
from iam.infrastructure.user_repository import UserRepository

__all__ = [
    "RoleRepository",
    "UserRepository",
]
