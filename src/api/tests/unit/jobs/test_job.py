"""Unit tests for the Job aggregate."""

from datetime import UTC, datetime, timedelta

import pytest

from jobs.domain import (
    InvalidJobTransitionError,
    Job,
    JobId,
    JobResultItem,
    JobStatus,
    JobType,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def job() -> Job:
    return Job.create(JobType.BULK_DELETE, "alice-id", "alice", total_items=3, now=NOW)


class TestJobLifecycle:
    def test_new_job_is_pending(self, job):
        assert job.status == JobStatus.PENDING
        assert job.progress == 0
        assert job.created_at == NOW
        assert not job.is_terminal

    def test_start_then_complete(self, job):
        job.start(NOW)
        job.complete(NOW + timedelta(seconds=5))

        assert job.status == JobStatus.COMPLETED
        assert job.progress == 100
        assert job.started_at == NOW
        assert job.completed_at == NOW + timedelta(seconds=5)
        assert job.is_terminal

    def test_fail_records_message(self, job):
        job.start(NOW)
        job.fail("store down", NOW)

        assert job.status == JobStatus.FAILED
        assert job.error_message == "store down"

    def test_pending_job_can_be_cancelled(self, job):
        job.cancel(NOW)

        assert job.status == JobStatus.CANCELLED
        assert job.completed_at == NOW

    @pytest.mark.parametrize("finish", ["complete", "cancel"])
    def test_finished_job_cannot_move(self, job, finish):
        job.start(NOW)
        getattr(job, finish)(NOW)

        with pytest.raises(InvalidJobTransitionError):
            job.cancel(NOW)

    def test_pending_job_cannot_complete(self, job):
        with pytest.raises(InvalidJobTransitionError) as exc_info:
            job.complete(NOW)

        assert exc_info.value.current == JobStatus.PENDING
        assert exc_info.value.target == JobStatus.COMPLETED


class TestJobProgress:
    def test_progress_is_integer_percentage(self, job):
        job.start(NOW)

        job.record_progress(1, [JobResultItem("a", "Member ID: a")], [])

        assert job.processed_items == 1
        assert job.progress == 33
        assert job.successful_items == 1
        assert job.failed_items == 0

    def test_progress_with_zero_items(self):
        job = Job.create(JobType.EXCEL_UPLOAD, "u", "u", total_items=0, now=NOW)

        job.record_progress(0, [], [])

        assert job.progress == 0

    def test_result_item_success_flag(self):
        assert JobResultItem("1", "Row 2").succeeded
        assert not JobResultItem("1", "Row 2", "Email is required").succeeded


class TestJobIdentity:
    def test_ownership(self, job):
        assert job.is_owned_by("alice-id")
        assert not job.is_owned_by("bob-id")

    def test_job_id_rejects_non_ulid(self):
        with pytest.raises(ValueError, match="Invalid JobId"):
            JobId.from_string("42")

    def test_terminal_statuses(self):
        assert {s for s in JobStatus if s.is_terminal} == {
            JobStatus.COMPLETED,
            JobStatus.FAILED,
            JobStatus.CANCELLED,
        }
