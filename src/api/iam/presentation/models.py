"""Pydantic models for IAM API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from iam.application.value_objects import UserDetails, UserPage
from iam.domain.aggregates import Role, User
from shared_kernel.authorization import Principal, parse_permissions


class RegisterUserRequest(BaseModel):
    """Request model for self-registration.

    Field rules are enforced by the service so that every violated rule is
    reported at once.
    """

    username: str = Field(..., description="Login name (3-50 characters)")
    email: str = Field(..., description="Contact email")
    password: str = Field(..., description="Password meeting the complexity policy")


class RoleAssignmentRequest(BaseModel):
    """Request model for granting or revoking a role."""

    role: str = Field(..., description="Role name (e.g. ADMIN, USER, VIEWER)")


class CreateUserRequest(RegisterUserRequest):
    """Request model for an administrator creating an account."""

    roles: list[str] | None = Field(
        None, description="Role names to grant; defaults to USER"
    )


class UpdateUserRequest(BaseModel):
    """Request model for an administrative account update.

    Omitted fields are left unchanged.
    """

    email: str | None = Field(None, description="New contact email")
    enabled: bool | None = Field(None, description="Whether the account may log in")


class ProfileUpdateRequest(BaseModel):
    """Request model for changing the caller's own profile."""

    email: str = Field(..., description="New contact email")


class ChangePasswordRequest(BaseModel):
    """Request model for changing the caller's own password.

    Missing values are reported by the service rather than as a schema error.
    """

    current_password: str = Field("", description="Password in use today")
    new_password: str = Field("", description="Replacement password")


class RoleRequest(BaseModel):
    """Request model for creating a role."""

    name: str = Field(..., description="Unique role name")
    description: str = Field("", description="Free-text description")
    permissions: list[str] = Field(
        default_factory=list, description="Permission tokens such as member:read"
    )


class RoleUpdateRequest(BaseModel):
    """Request model for updating a role. Omitted fields are left unchanged."""

    name: str | None = Field(None, description="New role name")
    description: str | None = Field(None, description="New description")
    permissions: list[str] | None = Field(
        None, description="Replacement permission tokens"
    )


class UserResponse(BaseModel):
    """Response model for a user account (never includes the password hash)."""

    id: str = Field(..., description="User ID (ULID format)")
    username: str = Field(..., description="Normalized login name")
    email: str = Field(..., description="Normalized email")
    role_ids: list[str] = Field(default_factory=list, description="Held role IDs")
    enabled: bool = Field(..., description="Whether the account may log in")
    account_locked: bool = Field(..., description="Whether a lockout is recorded")
    lockout_end_time: datetime | None = Field(None, description="When the lock expires")
    last_login_date: datetime | None = Field(None, description="Last successful login")

    @classmethod
    def from_domain(cls, user: User) -> UserResponse:
        """Convert domain User aggregate to API response."""
        return cls(
            id=user.id.value,
            username=user.username,
            email=user.email,
            role_ids=[role_id.value for role_id in user.role_ids],
            enabled=user.enabled,
            account_locked=user.account_locked,
            lockout_end_time=user.lockout_end_time,
            last_login_date=user.last_login_date,
        )


class PrincipalResponse(BaseModel):
    """Response model describing the authenticated caller."""

    user_id: str | None = Field(None, description="User ID (ULID format)")
    username: str = Field(..., description="Login name")
    permissions: list[str] = Field(
        default_factory=list, description="Known permissions granted by all roles"
    )

    @classmethod
    def from_principal(cls, principal: Principal) -> PrincipalResponse:
        granted = set()
        for role in principal.roles:
            granted |= parse_permissions(role.permissions)
        return cls(
            user_id=principal.user_id,
            username=principal.username,
            permissions=sorted(p.value for p in granted),
        )


class UserDetailsResponse(UserResponse):
    """A user account with role names and effective permissions."""

    roles: list[str] = Field(default_factory=list, description="Held role names")
    permissions: list[str] = Field(
        default_factory=list, description="Known permissions granted by all roles"
    )

    @classmethod
    def from_details(cls, details: UserDetails) -> UserDetailsResponse:
        base = UserResponse.from_domain(details.user)
        return cls(
            **base.model_dump(),
            roles=details.role_names,
            permissions=details.permissions,
        )


class UserPageResponse(BaseModel):
    """One page of the user listing."""

    items: list[UserDetailsResponse]
    total: int = Field(..., description="Total number of users")
    page: int = Field(..., description="Zero-based page index")
    size: int = Field(..., description="Page size")
    total_pages: int = Field(..., description="Number of pages at this size")

    @classmethod
    def from_page(cls, page: UserPage) -> UserPageResponse:
        return cls(
            items=[UserDetailsResponse.from_details(item) for item in page.items],
            total=page.total,
            page=page.page,
            size=page.size,
            total_pages=page.total_pages,
        )


class RoleResponse(BaseModel):
    """Response model for a role."""

    id: str = Field(..., description="Role ID (ULID format)")
    name: str
    description: str = ""
    permissions: list[str] = Field(
        default_factory=list, description="Stored permission tokens, sorted"
    )

    @classmethod
    def from_domain(cls, role: Role) -> RoleResponse:
        return cls(
            id=role.id.value,
            name=role.name,
            description=role.description,
            permissions=sorted(role.permissions),
        )
