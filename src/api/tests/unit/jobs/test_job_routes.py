"""Unit tests for Jobs HTTP routes."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from jobs.application import JobService
from jobs.domain import Job, JobStatus, JobType

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_service() -> AsyncMock:
    return AsyncMock(spec=JobService)


@pytest.fixture
def alice_job() -> Job:
    return Job.create(JobType.BULK_DELETE, "alice-id", "alice", 2, now=NOW)


@pytest.fixture
def client(mock_service, user_principal) -> TestClient:
    from jobs.dependencies import get_job_service
    from jobs.presentation import router
    from members.dependencies import get_principal

    app = FastAPI()
    app.dependency_overrides[get_job_service] = lambda: mock_service
    app.dependency_overrides[get_principal] = lambda: user_principal
    app.include_router(router)
    return TestClient(app)


class TestStartJobs:
    def test_bulk_delete_is_accepted(
        self, client, mock_service, alice_job, user_principal
    ):
        mock_service.create_job.return_value = alice_job

        response = client.post("/jobs/bulk-delete", json={"member_ids": ["m1", "m2"]})

        assert response.status_code == status.HTTP_202_ACCEPTED
        assert response.json()["status"] == "PENDING"
        mock_service.create_job.assert_awaited_once_with(
            JobType.BULK_DELETE, "alice-id", "alice", 2
        )
        mock_service.process_bulk_delete.assert_awaited_once_with(
            alice_job.id, ["m1", "m2"], user_principal
        )

    def test_bulk_delete_requires_ids(self, client, mock_service):
        response = client.post("/jobs/bulk-delete", json={"member_ids": []})

        assert response.status_code == 422
        mock_service.create_job.assert_not_called()

    def test_member_import_is_accepted(self, client, mock_service, user_principal):
        job = Job.create(JobType.EXCEL_UPLOAD, "alice-id", "alice", 1, now=NOW)
        mock_service.create_job.return_value = job
        row = {
            "name": "Jane",
            "email": "jane@example.com",
            "phone_number": "9876543210",
        }

        response = client.post("/jobs/member-import", json={"rows": [row]})

        assert response.status_code == status.HTTP_202_ACCEPTED
        assert response.json()["type"] == "EXCEL_UPLOAD"
        mock_service.process_member_import.assert_awaited_once_with(
            job.id, [row], user_principal
        )


class TestReadJobs:
    def test_list_jobs(self, client, mock_service, alice_job):
        mock_service.list_jobs.return_value = [alice_job]

        response = client.get("/jobs")

        assert response.status_code == status.HTTP_200_OK
        assert [j["id"] for j in response.json()] == [alice_job.id.value]
        mock_service.list_jobs.assert_awaited_once_with("alice-id")

    def test_list_active_jobs(self, client, mock_service):
        mock_service.list_active_jobs.return_value = []

        response = client.get("/jobs", params={"active": "true"})

        assert response.status_code == status.HTTP_200_OK
        mock_service.list_active_jobs.assert_awaited_once_with("alice-id")

    def test_get_own_job(self, client, mock_service, alice_job):
        mock_service.get_job.return_value = alice_job

        response = client.get(f"/jobs/{alice_job.id.value}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["progress"] == 0

    def test_other_users_job_is_not_found(self, client, mock_service):
        bobs_job = Job.create(JobType.BULK_DELETE, "bob-id", "bob", 1, now=NOW)
        mock_service.get_job.return_value = bobs_job

        response = client.get(f"/jobs/{bobs_job.id.value}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_malformed_job_id_is_not_found(self, client, mock_service):
        response = client.get("/jobs/not-a-ulid")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        mock_service.get_job.assert_not_called()


class TestCancelAndDelete:
    def test_cancel(self, client, mock_service, alice_job):
        mock_service.get_job.return_value = alice_job
        mock_service.cancel_job.return_value = True

        response = client.post(f"/jobs/{alice_job.id.value}/cancel")

        assert response.status_code == status.HTTP_200_OK
        mock_service.cancel_job.assert_awaited_once_with(alice_job.id, "alice-id")

    def test_cancel_finished_job_is_conflict(self, client, mock_service, alice_job):
        alice_job.cancel(NOW)
        mock_service.get_job.return_value = alice_job
        mock_service.cancel_job.return_value = False

        response = client.post(f"/jobs/{alice_job.id.value}/cancel")

        assert response.status_code == status.HTTP_409_CONFLICT

    def test_delete_finished_job(self, client, mock_service, alice_job):
        alice_job.cancel(NOW)
        mock_service.get_job.return_value = alice_job
        mock_service.delete_job.return_value = True

        response = client.delete(f"/jobs/{alice_job.id.value}")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_delete_running_job_is_conflict(self, client, mock_service, alice_job):
        mock_service.get_job.return_value = alice_job
        mock_service.delete_job.return_value = False

        response = client.delete(f"/jobs/{alice_job.id.value}")

        assert response.status_code == status.HTTP_409_CONFLICT
        assert alice_job.status == JobStatus.PENDING
