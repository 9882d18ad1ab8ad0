"""Domain probes for IAM infrastructure."""

from iam.infrastructure.observability.repository_probe import (
    DefaultRoleRepositoryProbe,
    DefaultUserRepositoryProbe,
    RoleRepositoryProbe,
    UserRepositoryProbe,
)

__all__ = [
    "DefaultRoleRepositoryProbe",
    "DefaultUserRepositoryProbe",
    "RoleRepositoryProbe",
    "UserRepositoryProbe",
]
