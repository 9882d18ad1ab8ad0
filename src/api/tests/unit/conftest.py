"""Unit test fixtures shared across bounded contexts."""

from datetime import UTC, datetime

import pytest

from iam.domain.aggregates import Role
from iam.domain.value_objects import RoleName
from shared_kernel.authorization import Permission, Principal

FIXED_NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_db_settings():
    """Provide test database settings."""
    from infrastructure.settings import DatabaseSettings

    return DatabaseSettings(
        host="testhost",
        port=5432,
        database="testdb",
        username="testuser",
        password="testpass",
    )


@pytest.fixture
def fixed_clock():
    """Clock that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def admin_role() -> Role:
    return Role.create(RoleName.ADMIN.value, Permission)


@pytest.fixture
def user_role() -> Role:
    return Role.create(
        RoleName.USER.value,
        [Permission.MEMBER_CREATE, Permission.MEMBER_READ, Permission.MEMBER_UPDATE],
    )


@pytest.fixture
def viewer_role() -> Role:
    return Role.create(RoleName.VIEWER.value, [Permission.MEMBER_READ])


@pytest.fixture
def admin_principal(admin_role: Role) -> Principal:
    return Principal(username="admin", roles=(admin_role,), user_id="admin-id")


@pytest.fixture
def user_principal(user_role: Role) -> Principal:
    return Principal(username="alice", roles=(user_role,), user_id="alice-id")


@pytest.fixture
def viewer_principal(viewer_role: Role) -> Principal:
    return Principal(username="victor", roles=(viewer_role,), user_id="victor-id")
