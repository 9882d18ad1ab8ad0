"""Unit tests for the Role aggregate."""

from iam.domain.aggregates import Role
from iam.domain.value_objects import RoleId
from shared_kernel.authorization import Permission


class TestRole:
    def test_create_stores_tokens(self):
        role = Role.create("USER", [Permission.MEMBER_READ, Permission.MEMBER_CREATE])

        assert role.permissions == frozenset({"member:read", "member:create"})

    def test_unknown_tokens_are_kept_but_not_granted(self):
        role = Role(
            id=RoleId.generate(),
            name="FUTURE",
            permissions=frozenset({"member:read", "report:export"}),
        )

        assert "report:export" in role.permissions
        assert role.granted_permissions() == frozenset({Permission.MEMBER_READ})

    def test_grants_direct_permission(self):
        role = Role.create("VIEWER", [Permission.MEMBER_READ])

        assert role.grants(Permission.MEMBER_READ)
        assert not role.grants(Permission.MEMBER_DELETE)

    def test_system_admin_grants_everything(self):
        role = Role.create("ROOT", [Permission.SYSTEM_ADMIN])

        assert all(role.grants(permission) for permission in Permission)
