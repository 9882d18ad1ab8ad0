"""Unit tests for IAM HTTP routes."""

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from iam.application.services import RoleService, UserService
from iam.application.value_objects import UserDetails, UserPage
from iam.dependencies.authentication import get_current_principal
from iam.dependencies.user import get_role_service, get_user_service
from iam.domain.aggregates import User
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
    UserRegistrationError,
    UserValidationError,
)
from shared_kernel.authorization import Permission


@pytest.fixture
def mock_service() -> AsyncMock:
    return AsyncMock(spec=UserService)


@pytest.fixture
def mock_role_service() -> AsyncMock:
    return AsyncMock(spec=RoleService)


@pytest.fixture
def bob(user_role) -> User:
    return User(
        id=UserId.generate(),
        username="bob",
        email="bob@example.com",
        password_hash="$2b$04$hash",
        role_ids=[user_role.id],
    )


@pytest.fixture
def client(mock_service, mock_role_service, admin_principal) -> TestClient:
    from iam.presentation import router

    app = FastAPI()
    app.dependency_overrides[get_user_service] = lambda: mock_service
    app.dependency_overrides[get_role_service] = lambda: mock_role_service
    app.dependency_overrides[get_current_principal] = lambda: admin_principal
    app.include_router(router)
    return TestClient(app)


REGISTRATION = {
    "username": "bob",
    "email": "bob@example.com",
    "password": "Secret123!",
}


class TestRegisterRoute:
    def test_returns_201_without_password_hash(self, client, mock_service, bob):
        mock_service.register_user.return_value = bob

        response = client.post(
            "/auth/register",
            json=REGISTRATION,
        )

        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["username"] == "bob"
        assert "password_hash" not in body

    def test_validation_errors_are_400(self, client, mock_service):
        mock_service.register_user.side_effect = UserRegistrationError(
            {"password": "Password must be at least 8 characters"}
        )

        response = client.post(
            "/auth/register",
            json={"username": "bob", "email": "bob@example.com", "password": "x"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "password" in response.json()["detail"]["errors"]

    def test_duplicate_is_409(self, client, mock_service):
        mock_service.register_user.side_effect = DuplicateUsernameError("taken")

        response = client.post(
            "/auth/register",
            json=REGISTRATION,
        )

        assert response.status_code == status.HTTP_409_CONFLICT


class TestMeRoute:
    def test_lists_effective_permissions(self, client):
        response = client.get("/auth/me")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["username"] == "admin"
        assert "system:admin" in body["permissions"]
        assert "member:delete" in body["permissions"]


class TestAdminRoutes:
    def test_assign_role(self, client, mock_service, bob, admin_principal):
        mock_service.assign_role.return_value = bob

        response = client.post(
            f"/admin/users/{bob.id.value}/roles", json={"role": "ADMIN"}
        )

        assert response.status_code == status.HTTP_200_OK
        mock_service.assign_role.assert_awaited_once_with(
            bob.id, "ADMIN", admin_principal
        )

    def test_invalid_user_id_is_404(self, client, mock_service):
        response = client.post("/admin/users/not-a-ulid/disable")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        mock_service.set_enabled.assert_not_called()

    @pytest.mark.parametrize(
        "error,expected_status",
        [
            (PermissionDeniedError("forbidden"), status.HTTP_403_FORBIDDEN),
            (UserNotFoundError("gone"), status.HTTP_404_NOT_FOUND),
            (RoleNotFoundError("nope"), status.HTTP_404_NOT_FOUND),
            (ValueError("not held"), status.HTTP_400_BAD_REQUEST),
        ],
    )
    def test_revoke_role_errors(
        self, client, mock_service, bob, error, expected_status
    ):
        mock_service.revoke_role.side_effect = error

        response = client.delete(f"/admin/users/{bob.id.value}/roles/VIEWER")

        assert response.status_code == expected_status

    def test_unlock(self, client, mock_service, bob):
        mock_service.unlock_user.return_value = bob

        response = client.post(f"/admin/users/{bob.id.value}/unlock")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["account_locked"] is False


class TestProfileRoutes:
    def test_profile_lists_roles_and_permissions(
        self, client, mock_service, bob, user_role, admin_principal
    ):
        mock_service.get_profile.return_value = UserDetails(bob, (user_role,))

        response = client.get("/profile")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["username"] == "bob"
        assert body["roles"] == ["USER"]
        assert body["permissions"] == ["member:create", "member:read", "member:update"]
        assert "password_hash" not in body
        mock_service.get_profile.assert_awaited_once_with(admin_principal)

    def test_update_profile_email_in_use_is_409(self, client, mock_service):
        mock_service.update_profile.side_effect = DuplicateUserEmailError(
            "Email already in use by another account"
        )

        response = client.put("/profile", json={"email": "taken@example.com"})

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_change_password(self, client, mock_service, admin_principal):
        mock_service.change_password.return_value = None

        response = client.post(
            "/profile/change-password",
            json={"current_password": "Secret123!", "new_password": "Better456!"},
        )

        assert response.status_code == status.HTTP_204_NO_CONTENT
        mock_service.change_password.assert_awaited_once_with(
            admin_principal, "Secret123!", "Better456!"
        )

    def test_wrong_current_password_is_400(self, client, mock_service):
        mock_service.change_password.side_effect = PasswordChangeError(
            "Current password is incorrect"
        )

        response = client.post(
            "/profile/change-password",
            json={"current_password": "nope", "new_password": "Better456!"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Current password is incorrect"

    def test_weak_new_password_lists_errors(self, client, mock_service):
        mock_service.change_password.side_effect = UserValidationError(
            {"password": "Password must be at least 8 characters"}
        )

        response = client.post(
            "/profile/change-password",
            json={"current_password": "Secret123!", "new_password": "x"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert "password" in response.json()["detail"]["errors"]


class TestAdminUserRoutes:
    def test_list_users(self, client, mock_service, bob, user_role, admin_principal):
        mock_service.list_users.return_value = UserPage(
            items=(UserDetails(bob, (user_role,)),), total=21, page=1, size=10
        )

        response = client.get("/admin/users", params={"page": 1, "size": 10})

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["total"] == 21
        assert body["total_pages"] == 3
        assert body["items"][0]["roles"] == ["USER"]
        mock_service.list_users.assert_awaited_once_with(
            admin_principal, page=1, size=10
        )

    def test_list_users_forbidden(self, client, mock_service):
        mock_service.list_users.side_effect = PermissionDeniedError("forbidden")

        response = client.get("/admin/users")

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_get_user(self, client, mock_service, bob, user_role):
        mock_service.get_user.return_value = UserDetails(bob, (user_role,))

        response = client.get(f"/admin/users/{bob.id.value}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["id"] == bob.id.value

    def test_create_user(self, client, mock_service, bob, admin_principal):
        mock_service.create_user.return_value = bob

        response = client.post(
            "/admin/users", json={**REGISTRATION, "roles": ["USER", "VIEWER"]}
        )

        assert response.status_code == status.HTTP_201_CREATED
        mock_service.create_user.assert_awaited_once_with(
            username="bob",
            email="bob@example.com",
            password="Secret123!",
            principal=admin_principal,
            role_names=["USER", "VIEWER"],
        )

    def test_update_user_passes_only_given_fields(
        self, client, mock_service, bob, admin_principal
    ):
        mock_service.update_user.return_value = bob

        response = client.put(f"/admin/users/{bob.id.value}", json={"enabled": False})

        assert response.status_code == status.HTTP_200_OK
        mock_service.update_user.assert_awaited_once_with(
            bob.id, admin_principal, email=None, enabled=False
        )

    def test_delete_user(self, client, mock_service, bob):
        mock_service.delete_user.return_value = None

        response = client.delete(f"/admin/users/{bob.id.value}")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_deleting_last_admin_is_400(self, client, mock_service, bob):
        mock_service.delete_user.side_effect = AccountPolicyError(
            "Cannot delete the last admin user"
        )

        response = client.delete(f"/admin/users/{bob.id.value}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Cannot delete the last admin user"


class TestAdminRoleRoutes:
    def test_list_roles(self, client, mock_role_service, admin_role, user_role):
        mock_role_service.list_roles.return_value = [admin_role, user_role]

        response = client.get("/admin/roles")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert [role["name"] for role in body] == ["ADMIN", "USER"]
        assert body[1]["permissions"] == [
            "member:create",
            "member:read",
            "member:update",
        ]

    def test_permissions_route_is_not_a_role_id(self, client, mock_role_service):
        mock_role_service.list_permissions.return_value = list(Permission)

        response = client.get("/admin/roles/permissions")

        assert response.status_code == status.HTTP_200_OK
        assert "role:delete" in response.json()
        mock_role_service.get_role.assert_not_called()

    def test_get_role(self, client, mock_role_service, user_role):
        mock_role_service.get_role.return_value = user_role

        response = client.get(f"/admin/roles/{user_role.id.value}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "USER"

    def test_invalid_role_id_is_404(self, client, mock_role_service):
        response = client.get("/admin/roles/not-a-ulid")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        mock_role_service.get_role.assert_not_called()

    def test_create_role(self, client, mock_role_service, viewer_role, admin_principal):
        mock_role_service.create_role.return_value = viewer_role

        response = client.post(
            "/admin/roles",
            json={"name": "VIEWER", "permissions": ["member:read"]},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["id"] == viewer_role.id.value
        mock_role_service.create_role.assert_awaited_once_with(
            "VIEWER", admin_principal, description="", permissions=["member:read"]
        )

    @pytest.mark.parametrize(
        "error,expected_status",
        [
            (DuplicateRoleNameError("exists"), status.HTTP_409_CONFLICT),
            (InvalidRoleError("Unknown permissions: x:y"), status.HTTP_400_BAD_REQUEST),
            (PermissionDeniedError("forbidden"), status.HTTP_403_FORBIDDEN),
        ],
    )
    def test_create_role_errors(
        self, client, mock_role_service, error, expected_status
    ):
        mock_role_service.create_role.side_effect = error

        response = client.post("/admin/roles", json={"name": "AUDITOR"})

        assert response.status_code == expected_status

    def test_update_role(self, client, mock_role_service, viewer_role, admin_principal):
        mock_role_service.update_role.return_value = viewer_role
        role_id = viewer_role.id.value

        response = client.put(
            f"/admin/roles/{role_id}", json={"description": "Read only"}
        )

        assert response.status_code == status.HTTP_200_OK
        mock_role_service.update_role.assert_awaited_once_with(
            RoleId(value=role_id),
            admin_principal,
            name=None,
            description="Read only",
            permissions=None,
        )

    def test_delete_role(self, client, mock_role_service, viewer_role):
        mock_role_service.delete_role.return_value = None

        response = client.delete(f"/admin/roles/{viewer_role.id.value}")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_system_role_is_400(self, client, mock_role_service, admin_role):
        mock_role_service.delete_role.side_effect = ProtectedRoleError(
            "Cannot delete system role"
        )

        response = client.delete(f"/admin/roles/{admin_role.id.value}")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
