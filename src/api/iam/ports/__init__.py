"""Ports (interfaces) for IAM bounded context.

Ports define the contracts for repositories and domain services without
specifying implementation details. This allows for dependency inversion
and makes the domain layer independent of infrastructure.
"""

from iam.ports.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    AccountPolicyError,
    AuthenticationError,
    DuplicateRoleNameError,
    DuplicateUserEmailError,
    DuplicateUsernameError,
    InvalidCredentialsError,
    InvalidRoleError,
    PasswordChangeError,
    PermissionDeniedError,
    ProtectedRoleError,
    RoleNotFoundError,
    UserNotFoundError,
    UserRegistrationError,
    UserStoreUnavailableError,
    UserValidationError,
)
from iam.ports.repositories import IRoleRepository, IUserRepository

__all__ = [
    "AccountDisabledError",
    "AccountLockedError",
    "AccountPolicyError",
    "AuthenticationError",
    "DuplicateRoleNameError",
    "DuplicateUserEmailError",
    "DuplicateUsernameError",
    "IRoleRepository",
    "IUserRepository",
    "InvalidCredentialsError",
    "InvalidRoleError",
    "PasswordChangeError",
    "PermissionDeniedError",
    "ProtectedRoleError",
    "RoleNotFoundError",
    "UserNotFoundError",
    "UserRegistrationError",
    "UserStoreUnavailableError",
    "UserValidationError",
]
