"""Domain probe for job service operations."""

from __future__ import annotations

from typing import Protocol

import structlog


class JobServiceProbe(Protocol):
    """Domain probe for job lifecycle and processing."""

    def job_created(
        self, job_id: str, job_type: str, user_id: str, total_items: int
    ) -> None:
        ...

    def job_started(self, job_id: str, total_items: int) -> None:
        ...

    def job_progress(self, job_id: str, processed: int, total: int) -> None:
        ...

    def item_failed(self, job_id: str, item_id: str, error: str) -> None:
        ...

    def job_completed(self, job_id: str, successful: int, failed: int) -> None:
        ...

    def job_failed(self, job_id: str, error: str) -> None:
        ...

    def job_cancelled(self, job_id: str, user_id: str) -> None:
        ...

    def job_stopped_after_cancel(self, job_id: str, processed: int) -> None:
        ...

    def job_not_found(self, job_id: str) -> None:
        ...

    def job_already_finished(self, job_id: str, status: str) -> None:
        ...

    def job_deleted(self, job_id: str, user_id: str) -> None:
        ...

    def jobs_cleaned_up(self, deleted: int) -> None:
        ...


class DefaultJobServiceProbe:
    """Default implementation of JobServiceProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def job_created(
        self, job_id: str, job_type: str, user_id: str, total_items: int
    ) -> None:
        self._logger.info(
            "job_created",
            job_id=job_id,
            job_type=job_type,
            user_id=user_id,
            total_items=total_items,
        )

    def job_started(self, job_id: str, total_items: int) -> None:
        self._logger.info("job_started", job_id=job_id, total_items=total_items)

    def job_progress(self, job_id: str, processed: int, total: int) -> None:
        self._logger.debug(
            "job_progress", job_id=job_id, processed=processed, total=total
        )

    def item_failed(self, job_id: str, item_id: str, error: str) -> None:
        self._logger.warning(
            "job_item_failed", job_id=job_id, item_id=item_id, error=error
        )

    def job_completed(self, job_id: str, successful: int, failed: int) -> None:
        self._logger.info(
            "job_completed", job_id=job_id, successful=successful, failed=failed
        )

    def job_failed(self, job_id: str, error: str) -> None:
        self._logger.error("job_failed", job_id=job_id, error=error)

    def job_cancelled(self, job_id: str, user_id: str) -> None:
        self._logger.info("job_cancelled", job_id=job_id, user_id=user_id)

    def job_stopped_after_cancel(self, job_id: str, processed: int) -> None:
        self._logger.info(
            "job_stopped_after_cancel", job_id=job_id, processed=processed
        )

    def job_not_found(self, job_id: str) -> None:
        self._logger.warning("job_not_found", job_id=job_id)

    def job_already_finished(self, job_id: str, status: str) -> None:
        self._logger.warning("job_already_finished", job_id=job_id, status=status)

    def job_deleted(self, job_id: str, user_id: str) -> None:
        self._logger.info("job_deleted", job_id=job_id, user_id=user_id)

    def jobs_cleaned_up(self, deleted: int) -> None:
        self._logger.info("jobs_cleaned_up", deleted=deleted)
