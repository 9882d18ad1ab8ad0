"""HTTP routes for IAM bounded context.

Provides self-registration, the current-principal endpoint, the caller's
own profile and the administrative user and role operations.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from iam.application.services import RoleService, UserService
from iam.application.services.user_service import DEFAULT_PAGE_SIZE
from iam.dependencies.authentication import get_current_principal
from iam.dependencies.user import get_role_service, get_user_service
from iam.domain.value_objects import RoleId, UserId
from iam.ports.exceptions import (
    AccountPolicyError,
    DuplicateRoleNameError,
    DuplicateUserEmailError,
    DuplicateUsernameError,
    InvalidRoleError,
    PasswordChangeError,
    PermissionDeniedError,
    ProtectedRoleError,
    RoleNotFoundError,
    UserNotFoundError,
    UserStoreUnavailableError,
    UserValidationError,
)
from iam.presentation.models import (
    ChangePasswordRequest,
    CreateUserRequest,
    PrincipalResponse,
    ProfileUpdateRequest,
    RegisterUserRequest,
    RoleAssignmentRequest,
    RoleRequest,
    RoleResponse,
    RoleUpdateRequest,
    UpdateUserRequest,
    UserDetailsResponse,
    UserPageResponse,
    UserResponse,
)
from shared_kernel.authorization import Principal

router = APIRouter(tags=["iam"])

# Failures an IAM operation reports to its caller; anything else is a 500.
_IAM_ERRORS = (
    PermissionDeniedError,
    UserNotFoundError,
    RoleNotFoundError,
    UserStoreUnavailableError,
    UserValidationError,
    DuplicateUsernameError,
    DuplicateUserEmailError,
    DuplicateRoleNameError,
    AccountPolicyError,
    ProtectedRoleError,
    InvalidRoleError,
    PasswordChangeError,
    ValueError,
)

PrincipalDep = Annotated[Principal, Depends(get_current_principal)]
UserServiceDep = Annotated[UserService, Depends(get_user_service)]
RoleServiceDep = Annotated[RoleService, Depends(get_role_service)]


def _parse_user_id(user_id: str) -> UserId:
    try:
        return UserId.from_string(user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User {user_id} not found",
        ) from e


def _parse_role_id(role_id: str) -> RoleId:
    try:
        return RoleId.from_string(role_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Role {role_id} not found",
        ) from e


def _admin_error(error: Exception) -> HTTPException:
    """Translate an IAM operation failure into an HTTP error."""
    if isinstance(error, PermissionDeniedError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="forbidden")
    if isinstance(error, UserNotFoundError | RoleNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(error))
    if isinstance(error, UserStoreUnavailableError):
        return HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="User store unavailable",
        )
    if isinstance(error, UserValidationError):
        return HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"errors": error.errors},
        )
    if isinstance(
        error, DuplicateUsernameError | DuplicateUserEmailError | DuplicateRoleNameError
    ):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(error))
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(error))


@router.post(
    "/auth/register",
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Validation failed"},
        409: {"description": "Username or email already registered"},
    },
)
async def register_user(
    request: RegisterUserRequest, service: UserServiceDep
) -> UserResponse:
    """Create an account holding the default USER role."""
    try:
        user = await service.register_user(
            username=request.username,
            email=request.email,
            password=request.password,
        )
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e

    return UserResponse.from_domain(user)


@router.get("/auth/me")
async def get_me(principal: PrincipalDep) -> PrincipalResponse:
    """Describe the authenticated caller and its effective permissions."""
    return PrincipalResponse.from_principal(principal)


@router.get("/profile")
async def get_profile(
    principal: PrincipalDep, service: UserServiceDep
) -> UserDetailsResponse:
    """The caller's own account with role names and permissions."""
    try:
        details = await service.get_profile(principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserDetailsResponse.from_details(details)


@router.put("/profile")
async def update_profile(
    request: ProfileUpdateRequest, principal: PrincipalDep, service: UserServiceDep
) -> UserResponse:
    """Change the caller's own email."""
    try:
        user = await service.update_profile(principal, request.email)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.post("/profile/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    request: ChangePasswordRequest, principal: PrincipalDep, service: UserServiceDep
) -> None:
    """Replace the caller's password after checking the current one."""
    try:
        await service.change_password(
            principal, request.current_password, request.new_password
        )
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e


@router.get("/admin/users")
async def list_users(
    principal: PrincipalDep,
    service: UserServiceDep,
    page: Annotated[int, Query(description="Zero-based page number")] = 0,
    size: Annotated[int, Query(description="Page size (1-100)")] = DEFAULT_PAGE_SIZE,
) -> UserPageResponse:
    """List accounts a page at a time (requires user:read)."""
    try:
        result = await service.list_users(principal, page=page, size=size)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserPageResponse.from_page(result)


@router.post("/admin/users", status_code=status.HTTP_201_CREATED)
async def create_user(
    request: CreateUserRequest, principal: PrincipalDep, service: UserServiceDep
) -> UserResponse:
    """Create an account (requires user:create)."""
    try:
        user = await service.create_user(
            username=request.username,
            email=request.email,
            password=request.password,
            principal=principal,
            role_names=request.roles,
        )
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.get("/admin/users/{user_id}")
async def get_user(
    user_id: str, principal: PrincipalDep, service: UserServiceDep
) -> UserDetailsResponse:
    """Read one account (requires user:read)."""
    try:
        details = await service.get_user(_parse_user_id(user_id), principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserDetailsResponse.from_details(details)


@router.put("/admin/users/{user_id}")
async def update_user(
    user_id: str,
    request: UpdateUserRequest,
    principal: PrincipalDep,
    service: UserServiceDep,
) -> UserResponse:
    """Change an account's email or enabled flag (requires user:update)."""
    try:
        user = await service.update_user(
            _parse_user_id(user_id),
            principal,
            email=request.email,
            enabled=request.enabled,
        )
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.delete("/admin/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: str, principal: PrincipalDep, service: UserServiceDep
) -> None:
    """Delete an account (requires user:delete)."""
    try:
        await service.delete_user(_parse_user_id(user_id), principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e


@router.post("/admin/users/{user_id}/roles")
async def assign_role(
    user_id: str,
    request: RoleAssignmentRequest,
    principal: PrincipalDep,
    service: UserServiceDep,
) -> UserResponse:
    """Grant a role to a user (requires user:update)."""
    try:
        user = await service.assign_role(
            _parse_user_id(user_id), request.role, principal
        )
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.delete("/admin/users/{user_id}/roles/{role}")
async def revoke_role(
    user_id: str, role: str, principal: PrincipalDep, service: UserServiceDep
) -> UserResponse:
    """Revoke a role from a user (requires user:update)."""
    try:
        user = await service.revoke_role(_parse_user_id(user_id), role, principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.post("/admin/users/{user_id}/enable")
async def enable_user(
    user_id: str, principal: PrincipalDep, service: UserServiceDep
) -> UserResponse:
    """Allow a disabled account to log in again."""
    try:
        user = await service.set_enabled(_parse_user_id(user_id), True, principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.post("/admin/users/{user_id}/disable")
async def disable_user(
    user_id: str, principal: PrincipalDep, service: UserServiceDep
) -> UserResponse:
    """Prevent an account from logging in."""
    try:
        user = await service.set_enabled(_parse_user_id(user_id), False, principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.post("/admin/users/{user_id}/unlock")
async def unlock_user(
    user_id: str, principal: PrincipalDep, service: UserServiceDep
) -> UserResponse:
    """Clear a lockout before it expires."""
    try:
        user = await service.unlock_user(_parse_user_id(user_id), principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return UserResponse.from_domain(user)


@router.get("/admin/roles")
async def list_roles(
    principal: PrincipalDep, service: RoleServiceDep
) -> list[RoleResponse]:
    """List every role (requires role:read)."""
    try:
        roles = await service.list_roles(principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return [RoleResponse.from_domain(role) for role in roles]


@router.get("/admin/roles/permissions")
async def list_permissions(
    principal: PrincipalDep, service: RoleServiceDep
) -> list[str]:
    """Every permission token a role can grant (requires role:read)."""
    try:
        permissions = service.list_permissions(principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return [permission.value for permission in permissions]


@router.get("/admin/roles/{role_id}")
async def get_role(
    role_id: str, principal: PrincipalDep, service: RoleServiceDep
) -> RoleResponse:
    """Read one role (requires role:read)."""
    try:
        role = await service.get_role(_parse_role_id(role_id), principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return RoleResponse.from_domain(role)


@router.post("/admin/roles", status_code=status.HTTP_201_CREATED)
async def create_role(
    request: RoleRequest, principal: PrincipalDep, service: RoleServiceDep
) -> RoleResponse:
    """Create a role (requires role:create)."""
    try:
        role = await service.create_role(
            request.name,
            principal,
            description=request.description,
            permissions=request.permissions,
        )
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return RoleResponse.from_domain(role)


@router.put("/admin/roles/{role_id}")
async def update_role(
    role_id: str,
    request: RoleUpdateRequest,
    principal: PrincipalDep,
    service: RoleServiceDep,
) -> RoleResponse:
    """Change a role's name, description or permissions (requires role:update)."""
    try:
        role = await service.update_role(
            _parse_role_id(role_id),
            principal,
            name=request.name,
            description=request.description,
            permissions=request.permissions,
        )
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
    return RoleResponse.from_domain(role)


@router.delete("/admin/roles/{role_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_role(
    role_id: str, principal: PrincipalDep, service: RoleServiceDep
) -> None:
    """Delete a role other than ADMIN or USER (requires role:delete)."""
    try:
        await service.delete_role(_parse_role_id(role_id), principal)
    except _IAM_ERRORS as e:
        raise _admin_error(e) from e
