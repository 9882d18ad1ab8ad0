"""Unit tests for RoleService."""

from unittest.mock import create_autospec

import pytest

from fakes import InMemoryRoleRepository
from iam.application.observability import RoleServiceProbe
from iam.application.services import RoleService
from iam.domain.aggregates import Role
from iam.domain.value_objects import RoleId
from iam.ports.exceptions import (
    DuplicateRoleNameError,
    InvalidRoleError,
    PermissionDeniedError,
    ProtectedRoleError,
    RoleNotFoundError,
)
from shared_kernel.authorization import Permission


@pytest.fixture
def role_repo(admin_role, user_role, viewer_role) -> InMemoryRoleRepository:
    return InMemoryRoleRepository([admin_role, user_role, viewer_role])


@pytest.fixture
def mock_probe():
    return create_autospec(RoleServiceProbe, instance=True)


@pytest.fixture
def service(role_repo, mock_probe) -> RoleService:
    return RoleService(role_repository=role_repo, probe=mock_probe)


class TestReadRoles:
    @pytest.mark.asyncio
    async def test_list_roles_by_name(self, service, admin_principal):
        roles = await service.list_roles(admin_principal)

        assert [role.name for role in roles] == ["ADMIN", "USER", "VIEWER"]

    def test_list_permissions(self, service, admin_principal):
        permissions = service.list_permissions(admin_principal)

        assert permissions == list(Permission)

    @pytest.mark.asyncio
    async def test_get_role(self, service, viewer_role, admin_principal):
        assert await service.get_role(viewer_role.id, admin_principal) == viewer_role

    @pytest.mark.asyncio
    async def test_get_missing_role(self, service, admin_principal):
        with pytest.raises(RoleNotFoundError):
            await service.get_role(RoleId.generate(), admin_principal)

    @pytest.mark.asyncio
    async def test_requires_role_read(self, service, user_principal):
        with pytest.raises(PermissionDeniedError, match="forbidden"):
            await service.list_roles(user_principal)


class TestCreateRole:
    @pytest.mark.asyncio
    async def test_creates_role(self, service, role_repo, admin_principal, mock_probe):
        role = await service.create_role(
            " AUDITOR ",
            admin_principal,
            description="Reads everything",
            permissions=["member:read", "user:read"],
        )

        assert role.name == "AUDITOR"
        assert role.granted_permissions() == {
            Permission.MEMBER_READ,
            Permission.USER_READ,
        }
        assert await role_repo.get_by_name("AUDITOR") == role
        mock_probe.role_created.assert_called_once_with(
            role.id.value, "AUDITOR", "admin"
        )

    @pytest.mark.asyncio
    async def test_duplicate_name(self, service, admin_principal):
        with pytest.raises(DuplicateRoleNameError):
            await service.create_role("VIEWER", admin_principal)

    @pytest.mark.asyncio
    async def test_unknown_permission_is_rejected(
        self, service, role_repo, admin_principal
    ):
        with pytest.raises(InvalidRoleError, match="member:purge"):
            await service.create_role(
                "AUDITOR", admin_principal, permissions=["member:read", "member:purge"]
            )

        assert await role_repo.get_by_name("AUDITOR") is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["", "   ", "X" * 51])
    async def test_invalid_name(self, service, admin_principal, name):
        with pytest.raises(InvalidRoleError):
            await service.create_role(name, admin_principal)

    @pytest.mark.asyncio
    async def test_requires_role_create(self, service, user_principal):
        with pytest.raises(PermissionDeniedError):
            await service.create_role("AUDITOR", user_principal)


class TestUpdateRole:
    @pytest.mark.asyncio
    async def test_replaces_permissions(
        self, service, role_repo, viewer_role, admin_principal
    ):
        updated = await service.update_role(
            viewer_role.id,
            admin_principal,
            permissions=["member:read", "role:read"],
        )

        assert updated.name == "VIEWER"
        assert updated.permissions == frozenset({"member:read", "role:read"})
        assert await role_repo.get_by_id(viewer_role.id) == updated

    @pytest.mark.asyncio
    async def test_renames_role(self, service, role_repo, viewer_role, admin_principal):
        updated = await service.update_role(
            viewer_role.id, admin_principal, name="READER", description="Read only"
        )

        assert updated.name == "READER"
        assert updated.description == "Read only"
        assert await role_repo.get_by_name("VIEWER") is None

    @pytest.mark.asyncio
    async def test_rename_to_taken_name(self, service, viewer_role, admin_principal):
        with pytest.raises(DuplicateRoleNameError):
            await service.update_role(viewer_role.id, admin_principal, name="USER")

    @pytest.mark.asyncio
    async def test_system_roles_keep_their_names(
        self, service, admin_role, admin_principal
    ):
        with pytest.raises(ProtectedRoleError):
            await service.update_role(admin_role.id, admin_principal, name="ROOT")

    @pytest.mark.asyncio
    async def test_system_role_permissions_can_change(
        self, service, user_role, admin_principal
    ):
        updated = await service.update_role(
            user_role.id, admin_principal, permissions=["member:read"]
        )

        assert updated.permissions == frozenset({"member:read"})

    @pytest.mark.asyncio
    async def test_missing_role(self, service, admin_principal):
        with pytest.raises(RoleNotFoundError):
            await service.update_role(
                RoleId.generate(), admin_principal, description="x"
            )

    @pytest.mark.asyncio
    async def test_requires_role_update(self, service, viewer_role, user_principal):
        with pytest.raises(PermissionDeniedError):
            await service.update_role(viewer_role.id, user_principal, name="READER")


class TestDeleteRole:
    @pytest.mark.asyncio
    async def test_deletes_role(
        self, service, role_repo, viewer_role, admin_principal, mock_probe
    ):
        await service.delete_role(viewer_role.id, admin_principal)

        assert await role_repo.get_by_id(viewer_role.id) is None
        mock_probe.role_deleted.assert_called_once_with(
            viewer_role.id.value, "VIEWER", "admin"
        )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["ADMIN", "USER"])
    async def test_system_roles_cannot_be_deleted(
        self, service, role_repo, admin_principal, name
    ):
        role = await role_repo.get_by_name(name)

        with pytest.raises(ProtectedRoleError, match="Cannot delete system role"):
            await service.delete_role(role.id, admin_principal)

        assert await role_repo.get_by_id(role.id) == role

    @pytest.mark.asyncio
    async def test_holders_keep_dangling_reference(
        self, service, role_repo, admin_principal
    ):
        extra = Role.create("AUDITOR", [Permission.MEMBER_READ])
        await role_repo.save(extra)

        await service.delete_role(extra.id, admin_principal)

        assert await role_repo.get_many([extra.id]) == []

    @pytest.mark.asyncio
    async def test_requires_role_delete(self, service, viewer_role, user_principal):
        with pytest.raises(PermissionDeniedError):
            await service.delete_role(viewer_role.id, user_principal)
