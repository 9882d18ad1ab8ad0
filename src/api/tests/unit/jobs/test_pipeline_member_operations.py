"""Unit tests for PipelineMemberOperations."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest

from jobs.infrastructure import PipelineMemberOperations
from jobs.ports import MemberItemError
from members.application import MemberRequest, MemberRequestPipeline
from members.domain import Member, MemberId
from members.ports import AuthorizationError, ConflictError, MemberNotFoundError

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def mock_pipeline() -> AsyncMock:
    return AsyncMock(spec=MemberRequestPipeline)


@pytest.fixture
def operations(mock_pipeline) -> PipelineMemberOperations:
    return PipelineMemberOperations(mock_pipeline)


class TestDeleteMember:
    @pytest.mark.asyncio
    async def test_runs_pipeline_delete(
        self, operations, mock_pipeline, admin_principal
    ):
        await operations.delete_member("m1", admin_principal)

        mock_pipeline.delete_member.assert_awaited_once_with("m1", admin_principal)

    @pytest.mark.asyncio
    async def test_pipeline_failure_becomes_item_error(
        self, operations, mock_pipeline, admin_principal
    ):
        mock_pipeline.delete_member.side_effect = MemberNotFoundError("m1")

        with pytest.raises(MemberItemError, match="m1"):
            await operations.delete_member("m1", admin_principal)

    @pytest.mark.asyncio
    async def test_other_errors_propagate(
        self, operations, mock_pipeline, admin_principal
    ):
        mock_pipeline.delete_member.side_effect = RuntimeError("bug")

        with pytest.raises(RuntimeError):
            await operations.delete_member("m1", admin_principal)


class TestImportMember:
    @pytest.mark.asyncio
    async def test_registers_row(self, operations, mock_pipeline, user_principal):
        member = Member(
            id=MemberId.generate(),
            name="Jane",
            email="jane@example.com",
            phone_number="9876543210",
            created_at=NOW,
            updated_at=NOW,
            created_by="alice",
            updated_by="alice",
        )
        mock_pipeline.register_member.return_value = member
        row = {
            "name": "Jane",
            "email": "jane@example.com",
            "phone_number": "9876543210",
        }

        member_id = await operations.import_member(row, user_principal)

        assert member_id == member.id.value
        mock_pipeline.register_member.assert_awaited_once_with(
            MemberRequest(
                name="Jane", email="jane@example.com", phone_number="9876543210"
            ),
            user_principal,
        )

    @pytest.mark.asyncio
    async def test_missing_columns_reach_validation(
        self, operations, mock_pipeline, user_principal
    ):
        mock_pipeline.register_member.side_effect = ConflictError("email", "x")

        with pytest.raises(MemberItemError, match="email already registered"):
            await operations.import_member({"email": "x"}, user_principal)

        request = mock_pipeline.register_member.call_args.args[0]
        assert request == MemberRequest(name=None, email="x", phone_number=None)

    @pytest.mark.asyncio
    async def test_forbidden_row(self, operations, mock_pipeline, viewer_principal):
        mock_pipeline.register_member.side_effect = AuthorizationError("member:create")

        with pytest.raises(MemberItemError, match="forbidden"):
            await operations.import_member({"email": "x"}, viewer_principal)
