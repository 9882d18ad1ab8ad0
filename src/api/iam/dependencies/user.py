"""Repository and service providers for users and roles."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from iam.application.observability import (
    DefaultRoleServiceProbe,
    DefaultUserServiceProbe,
    RoleServiceProbe,
    UserServiceProbe,
)
from iam.application.services import RoleService, UserService
from iam.infrastructure import RoleRepository, UserRepository
from iam.ports.repositories import IRoleRepository, IUserRepository
from infrastructure.database.dependencies import get_sessionmaker
from infrastructure.settings import get_security_settings
from shared_kernel.authorization import PermissionEvaluator
from shared_kernel.validation import FieldValidator


@lru_cache
def get_field_validator() -> FieldValidator:
    """Get the process-wide field validator."""
    return FieldValidator()


@lru_cache
def get_permission_evaluator() -> PermissionEvaluator:
    """Get the process-wide permission evaluator."""
    return PermissionEvaluator()


def get_user_repository() -> IUserRepository:
    """Get UserRepository bound to the shared session factory."""
    return UserRepository(session_factory=get_sessionmaker())


def get_role_repository() -> IRoleRepository:
    """Get RoleRepository bound to the shared session factory."""
    return RoleRepository(session_factory=get_sessionmaker())


def get_user_service_probe() -> UserServiceProbe:
    """Get UserServiceProbe instance.

    Returns:
        DefaultUserServiceProbe instance for observability
    """
    return DefaultUserServiceProbe()


def get_user_service(
    user_repo: Annotated[IUserRepository, Depends(get_user_repository)],
    role_repo: Annotated[IRoleRepository, Depends(get_role_repository)],
    validator: Annotated[FieldValidator, Depends(get_field_validator)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
    probe: Annotated[UserServiceProbe, Depends(get_user_service_probe)],
) -> UserService:
    """Get UserService instance.

    Args:
        user_repo: User repository
        role_repo: Role repository
        validator: Shared field validator
        evaluator: Shared permission evaluator
        probe: User service probe for observability

    Returns:
        UserService instance
    """
    return UserService(
        user_repository=user_repo,
        role_repository=role_repo,
        validator=validator,
        evaluator=evaluator,
        bcrypt_rounds=get_security_settings().bcrypt_rounds,
        probe=probe,
    )


def get_role_service_probe() -> RoleServiceProbe:
    """Get RoleServiceProbe instance."""
    return DefaultRoleServiceProbe()


def get_role_service(
    role_repo: Annotated[IRoleRepository, Depends(get_role_repository)],
    evaluator: Annotated[PermissionEvaluator, Depends(get_permission_evaluator)],
    probe: Annotated[RoleServiceProbe, Depends(get_role_service_probe)],
) -> RoleService:
    """Get RoleService instance."""
    return RoleService(role_repository=role_repo, evaluator=evaluator, probe=probe)
