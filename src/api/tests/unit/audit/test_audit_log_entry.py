"""Unit tests for AuditLogEntry factories."""

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime

import pytest

from audit.domain import AuditAction, AuditLogEntry, AuditLogId, AuditStatus

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


class TestAuditLogEntry:
    def test_success_entry(self):
        entry = AuditLogEntry.success(
            action=AuditAction.DELETE,
            entity_type="Member",
            entity_id="01HQ",
            principal="admin",
            timestamp=NOW,
            ip_address="127.0.0.1",
            details={"state": "COMPLETED"},
        )

        assert entry.status == AuditStatus.SUCCESS
        assert entry.error_message is None
        assert entry.details == {"state": "COMPLETED"}
        assert AuditLogId.from_string(entry.id.value) == entry.id

    def test_failure_entry_carries_reason(self):
        entry = AuditLogEntry.failure(
            action=AuditAction.CREATE,
            entity_type="Member",
            entity_id=None,
            principal="alice",
            timestamp=NOW,
            error_message="forbidden",
        )

        assert entry.status == AuditStatus.FAILURE
        assert entry.error_message == "forbidden"
        assert entry.details == {}

    def test_entries_are_immutable(self):
        entry = AuditLogEntry.success(
            action=AuditAction.LOGIN,
            entity_type="User",
            entity_id=None,
            principal="alice",
            timestamp=NOW,
        )

        with pytest.raises(FrozenInstanceError):
            entry.principal = "mallory"  # type: ignore[misc]

    def test_details_are_copied(self):
        details = {"state": "COMPLETED"}
        entry = AuditLogEntry.success(
            action=AuditAction.UPDATE,
            entity_type="Member",
            entity_id="1",
            principal="alice",
            timestamp=NOW,
            details=details,
        )

        details["state"] = "CHANGED"

        assert entry.details == {"state": "COMPLETED"}
