"""Unit tests for IAM startup seeding."""

import pytest

from fakes import InMemoryRoleRepository, InMemoryUserRepository
from iam.application.security import verify_password
from iam.bootstrap import ADMIN_USERNAME, DEFAULT_ROLES, bootstrap_iam, seed_roles
from iam.domain.value_objects import RoleName
from shared_kernel.authorization import Permission


class TestSeedRoles:
    @pytest.mark.asyncio
    async def test_creates_builtin_roles(self):
        role_repo = InMemoryRoleRepository()

        roles = await seed_roles(role_repo)

        assert set(roles) == set(DEFAULT_ROLES)
        assert roles[RoleName.ADMIN].grants(Permission.MEMBER_DELETE)
        assert not roles[RoleName.USER].grants(Permission.MEMBER_DELETE)
        assert roles[RoleName.VIEWER].granted_permissions() == {Permission.MEMBER_READ}

    @pytest.mark.asyncio
    async def test_is_idempotent(self):
        role_repo = InMemoryRoleRepository()

        first = await seed_roles(role_repo)
        second = await seed_roles(role_repo)

        assert first == second
        assert len(await role_repo.list_all()) == len(DEFAULT_ROLES)


class TestBootstrapIam:
    @pytest.mark.asyncio
    async def test_seeds_admin_when_password_configured(self):
        user_repo = InMemoryUserRepository()
        role_repo = InMemoryRoleRepository()

        await bootstrap_iam(user_repo, role_repo, "Admin123!", bcrypt_rounds=4)

        admin = await user_repo.get_by_username(ADMIN_USERNAME)
        admin_role = await role_repo.get_by_name(RoleName.ADMIN)
        assert admin is not None
        assert admin.role_ids == [admin_role.id]
        assert verify_password("Admin123!", admin.password_hash)

    @pytest.mark.asyncio
    async def test_skips_admin_without_password(self):
        user_repo = InMemoryUserRepository()

        await bootstrap_iam(user_repo, InMemoryRoleRepository(), None)

        assert await user_repo.get_by_username(ADMIN_USERNAME) is None

    @pytest.mark.asyncio
    async def test_existing_admin_is_left_alone(self):
        user_repo = InMemoryUserRepository()
        role_repo = InMemoryRoleRepository()
        await bootstrap_iam(user_repo, role_repo, "Admin123!", bcrypt_rounds=4)
        original = await user_repo.get_by_username(ADMIN_USERNAME)

        await bootstrap_iam(user_repo, role_repo, "Other123!", bcrypt_rounds=4)

        admin = await user_repo.get_by_username(ADMIN_USERNAME)
        assert admin.id == original.id
        assert verify_password("Admin123!", admin.password_hash)
