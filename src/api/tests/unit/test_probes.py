"""Unit tests for domain probes.

Tests that domain probes correctly capture domain events
following the Domain Oriented Observability pattern.
"""

from unittest.mock import MagicMock

import structlog

from audit.infrastructure.observability import DefaultAuditEmitterProbe
from iam.application.observability import (
    DefaultRoleServiceProbe,
    DefaultUserServiceProbe,
)
from infrastructure.observability import ObservationContext
from infrastructure.observability.probes import DefaultConnectionProbe
from members.application.observability import (
    DefaultMemberPipelineProbe,
    DefaultUniquenessProbe,
)
from members.infrastructure.observability import DefaultMemberRepositoryProbe


def mock_logger() -> MagicMock:
    return MagicMock(spec=structlog.stdlib.BoundLogger)


class TestConnectionProbe:
    """Tests for ConnectionProbe protocol and implementation."""

    def test_default_probe_creates_with_default_logger(self):
        probe = DefaultConnectionProbe()
        assert probe._logger is not None

    def test_engine_created_logs_info(self):
        logger = mock_logger()
        probe = DefaultConnectionProbe(logger=logger)

        probe.engine_created(
            connection_string="postgresql://u@localhost:5432/db", pool_size=5
        )

        logger.info.assert_called_once_with(
            "database_engine_created",
            connection_string="postgresql://u@localhost:5432/db",
            pool_size=5,
        )


class TestMemberPipelineProbe:
    """Tests for DefaultMemberPipelineProbe."""

    def test_with_context_adds_request_metadata(self):
        logger = mock_logger()
        probe = DefaultMemberPipelineProbe(logger=logger).with_context(
            ObservationContext(request_id="req-1", client_ip="10.0.0.1")
        )

        probe.request_completed("register_member", "01HQ", "alice")

        logger.info.assert_called_once_with(
            "member_request_completed",
            operation="register_member",
            member_id="01HQ",
            principal="alice",
            request_id="req-1",
            client_ip="10.0.0.1",
        )

    def test_with_context_returns_new_probe(self):
        probe = DefaultMemberPipelineProbe(logger=mock_logger())

        bound = probe.with_context(ObservationContext(request_id="req-1"))

        assert bound is not probe
        assert probe._get_context_kwargs() == {}

    def test_store_failures_log_as_errors(self):
        logger = mock_logger()
        probe = DefaultMemberPipelineProbe(logger=logger)

        probe.request_failed("register_member", "PERSIST_FAILED", "alice", "boom")

        logger.error.assert_called_once()
        logger.warning.assert_not_called()

    def test_rejections_log_as_warnings(self):
        logger = mock_logger()
        probe = DefaultMemberPipelineProbe(logger=logger)

        probe.request_failed("register_member", "FORBIDDEN", "bob", "forbidden")

        logger.warning.assert_called_once()
        logger.error.assert_not_called()


class TestUniquenessProbe:
    def test_conflicting_email_is_masked(self):
        logger = mock_logger()
        probe = DefaultUniquenessProbe(logger=logger)

        probe.value_taken("email", "jane@example.com", "01HQ")

        logger.info.assert_called_once_with(
            "uniqueness_conflict",
            field="email",
            value="j***@example.com",
            owner_id="01HQ",
        )


class TestAuditEmitterProbe:
    def test_dropped_entry_is_a_warning(self):
        logger = mock_logger()
        probe = DefaultAuditEmitterProbe(logger=logger)

        probe.entry_dropped(entry_id="01HQ", action="CREATE", dropped_total=3)

        logger.warning.assert_called_once_with(
            "audit_entry_dropped", entry_id="01HQ", action="CREATE", dropped_total=3
        )


class TestMemberRepositoryProbe:
    def test_saved_member_contact_details_are_masked(self):
        logger = mock_logger()
        probe = DefaultMemberRepositoryProbe(logger=logger)

        probe.member_saved("01HQ", "jane@example.com", "9876543210")

        logger.debug.assert_called_once_with(
            "member_saved",
            member_id="01HQ",
            email="j***@example.com",
            phone_number="******3210",
        )


class TestPipelineAuditFailure:
    def test_lost_audit_entry_is_an_error(self):
        logger = mock_logger()
        probe = DefaultMemberPipelineProbe(logger=logger)

        probe.audit_failed("register_member", "COMPLETED", "audit store down")

        logger.error.assert_called_once_with(
            "member_audit_failed",
            operation="register_member",
            state="COMPLETED",
            error="audit store down",
        )


class TestAccountAdministrationProbes:
    def test_refused_password_change_is_a_warning(self):
        logger = mock_logger()
        probe = DefaultUserServiceProbe(logger=logger)

        probe.password_change_failed("01HQ", "incorrect_current")

        logger.warning.assert_called_once_with(
            "password_change_failed", user_id="01HQ", reason="incorrect_current"
        )

    def test_role_deletion_names_the_actor(self):
        logger = mock_logger()
        probe = DefaultRoleServiceProbe(logger=logger)

        probe.role_deleted("01HQ", "AUDITOR", "admin")

        logger.info.assert_called_once_with(
            "role_deleted", role_id="01HQ", name="AUDITOR", principal="admin"
        )
