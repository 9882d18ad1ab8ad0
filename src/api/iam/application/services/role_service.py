"""Role administration service for IAM bounded context."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from iam.application.observability import DefaultRoleServiceProbe, RoleServiceProbe
from iam.domain.aggregates import Role
from iam.domain.value_objects import RoleId, RoleName
from iam.ports.exceptions import (
    DuplicateRoleNameError,
    InvalidRoleError,
    PermissionDeniedError,
    ProtectedRoleError,
    RoleNotFoundError,
)
from iam.ports.repositories import IRoleRepository
from shared_kernel.authorization import Permission, PermissionEvaluator, Principal
from shared_kernel.authorization.types import permission_from_token

MAX_ROLE_NAME_LENGTH = 50
MAX_DESCRIPTION_LENGTH = 255

# Registration and startup seeding look these up by name.
PROTECTED_ROLES = frozenset({RoleName.ADMIN.value, RoleName.USER.value})


class RoleService:
    """Application service for listing and editing roles.

    Every operation is guarded by the matching role:* permission.
    """

    def __init__(
        self,
        role_repository: IRoleRepository,
        evaluator: PermissionEvaluator | None = None,
        probe: RoleServiceProbe | None = None,
    ):
        self._role_repository = role_repository
        self._evaluator = evaluator or PermissionEvaluator()
        self._probe = probe or DefaultRoleServiceProbe()

    async def list_roles(self, principal: Principal) -> list[Role]:
        """All roles ordered by name."""
        self._require(principal, Permission.ROLE_READ)
        return await self._role_repository.list_all()

    def list_permissions(self, principal: Principal) -> list[Permission]:
        """Every permission a role can grant, in declaration order."""
        self._require(principal, Permission.ROLE_READ)
        return list(Permission)

    async def get_role(self, role_id: RoleId, principal: Principal) -> Role:
        """Read one role.

        Raises:
            PermissionDeniedError: If the principal lacks role:read
            RoleNotFoundError: If the role does not exist
        """
        self._require(principal, Permission.ROLE_READ)
        return await self._get(role_id)

    async def create_role(
        self,
        name: str,
        principal: Principal,
        description: str = "",
        permissions: Iterable[str] = (),
    ) -> Role:
        """Create a role from permission tokens such as "member:read".

        Raises:
            PermissionDeniedError: If the principal lacks role:create
            InvalidRoleError: Blank or over-long name, or an unknown token
            DuplicateRoleNameError: If the name is already used
        """
        self._require(principal, Permission.ROLE_CREATE)
        name = self._checked_name(name)
        role = Role(
            id=RoleId.generate(),
            name=name,
            description=self._checked_description(name, description),
            permissions=self._checked_permissions(name, permissions),
        )
        if await self._role_repository.get_by_name(name) is not None:
            self._probe.role_rejected(name, "duplicate_name")
            raise DuplicateRoleNameError(f"Role name '{name}' already exists")

        await self._role_repository.save(role)
        self._probe.role_created(role.id.value, role.name, principal.username)
        return role

    async def update_role(
        self,
        role_id: RoleId,
        principal: Principal,
        name: str | None = None,
        description: str | None = None,
        permissions: Iterable[str] | None = None,
    ) -> Role:
        """Change any of a role's name, description or permissions.

        Arguments left as None keep their current value. The permission set is
        replaced as a whole.

        Raises:
            PermissionDeniedError: If the principal lacks role:update
            RoleNotFoundError: If the role does not exist
            ProtectedRoleError: If ADMIN or USER would be renamed
            InvalidRoleError: Blank or over-long name, or an unknown token
            DuplicateRoleNameError: If another role has the new name
        """
        self._require(principal, Permission.ROLE_UPDATE)
        role = await self._get(role_id)

        changes: dict[str, object] = {}
        if name is not None and name.strip() != role.name:
            if role.name in PROTECTED_ROLES:
                self._probe.role_rejected(role.name, "protected")
                raise ProtectedRoleError(f"Cannot rename system role {role.name}")
            new_name = self._checked_name(name)
            other = await self._role_repository.get_by_name(new_name)
            if other is not None and other.id != role.id:
                self._probe.role_rejected(new_name, "duplicate_name")
                raise DuplicateRoleNameError(f"Role name '{new_name}' already exists")
            changes["name"] = new_name
        if description is not None:
            changes["description"] = self._checked_description(role.name, description)
        if permissions is not None:
            changes["permissions"] = self._checked_permissions(role.name, permissions)

        updated = replace(role, **changes)
        await self._role_repository.save(updated)
        self._probe.role_updated(updated.id.value, updated.name, principal.username)
        return updated

    async def delete_role(self, role_id: RoleId, principal: Principal) -> None:
        """Delete a role other than ADMIN or USER.

        Users holding the role keep a dangling reference that role
        resolution skips.

        Raises:
            PermissionDeniedError: If the principal lacks role:delete
            RoleNotFoundError: If the role does not exist
            ProtectedRoleError: If the role is ADMIN or USER
        """
        self._require(principal, Permission.ROLE_DELETE)
        role = await self._get(role_id)
        if role.name in PROTECTED_ROLES:
            self._probe.role_rejected(role.name, "protected")
            raise ProtectedRoleError("Cannot delete system role")

        if not await self._role_repository.delete_by_id(role.id):
            raise RoleNotFoundError(f"Role {role_id} not found")
        self._probe.role_deleted(role.id.value, role.name, principal.username)

    async def _get(self, role_id: RoleId) -> Role:
        role = await self._role_repository.get_by_id(role_id)
        if role is None:
            raise RoleNotFoundError(f"Role {role_id} not found")
        return role

    def _checked_name(self, name: str) -> str:
        name = (name or "").strip()
        if not name:
            raise InvalidRoleError("Role name is required")
        if len(name) > MAX_ROLE_NAME_LENGTH:
            raise InvalidRoleError(
                f"Role name must be at most {MAX_ROLE_NAME_LENGTH} characters"
            )
        return name

    def _checked_description(self, name: str, description: str) -> str:
        if len(description) > MAX_DESCRIPTION_LENGTH:
            self._probe.role_rejected(name, "description_too_long")
            raise InvalidRoleError(
                f"Description must be at most {MAX_DESCRIPTION_LENGTH} characters"
            )
        return description

    def _checked_permissions(self, name: str, tokens: Iterable[str]) -> frozenset[str]:
        tokens = frozenset(tokens)
        unknown = sorted(t for t in tokens if permission_from_token(t) is None)
        if unknown:
            self._probe.role_rejected(name, "unknown_permission")
            raise InvalidRoleError(f"Unknown permissions: {', '.join(unknown)}")
        return tokens

    def _require(self, principal: Principal, permission: Permission) -> None:
        if not self._evaluator.authorize(principal.roles, permission):
            raise PermissionDeniedError("forbidden")
