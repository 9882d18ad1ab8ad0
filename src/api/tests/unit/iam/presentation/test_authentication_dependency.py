"""Unit tests for HTTP Basic principal resolution."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from fastapi import Depends, FastAPI, status
from fastapi.testclient import TestClient

from iam.application.services import AuthenticationService
from iam.dependencies.authentication import (
    get_authentication_service,
    get_current_principal,
)
from iam.ports.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    InvalidCredentialsError,
    UserStoreUnavailableError,
)
from shared_kernel.authorization import Principal


@pytest.fixture
def mock_service() -> AsyncMock:
    return AsyncMock(spec=AuthenticationService)


@pytest.fixture
def client(mock_service) -> TestClient:
    app = FastAPI()

    @app.get("/whoami")
    async def whoami(principal: Principal = Depends(get_current_principal)):
        return {"username": principal.username}

    app.dependency_overrides[get_authentication_service] = lambda: mock_service
    return TestClient(app)


class TestGetCurrentPrincipal:
    def test_missing_credentials_is_401(self, client, mock_service):
        response = client.get("/whoami")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Basic"
        mock_service.authenticate.assert_not_called()

    def test_valid_credentials(self, client, mock_service, user_role):
        mock_service.authenticate.return_value = Principal(
            username="alice", roles=(user_role,), user_id="alice-id"
        )

        response = client.get("/whoami", auth=("alice", "Secret123!"))

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"username": "alice"}
        args = mock_service.authenticate.call_args
        assert args.args == ("alice", "Secret123!")
        assert "ip_address" in args.kwargs

    @pytest.mark.parametrize(
        "error,expected_status",
        [
            (InvalidCredentialsError(), status.HTTP_401_UNAUTHORIZED),
            (
                AccountLockedError(datetime(2024, 3, 1, 12, 30, tzinfo=UTC)),
                status.HTTP_423_LOCKED,
            ),
            (AccountDisabledError(), status.HTTP_403_FORBIDDEN),
            (UserStoreUnavailableError("down"), status.HTTP_503_SERVICE_UNAVAILABLE),
        ],
    )
    def test_maps_authentication_errors(
        self, client, mock_service, error, expected_status
    ):
        mock_service.authenticate.side_effect = error

        response = client.get("/whoami", auth=("alice", "whatever"))

        assert response.status_code == expected_status

    def test_invalid_credentials_message_is_generic(self, client, mock_service):
        mock_service.authenticate.side_effect = InvalidCredentialsError()

        response = client.get("/whoami", auth=("nobody", "whatever"))

        assert response.json()["detail"] == "Invalid username or password"
