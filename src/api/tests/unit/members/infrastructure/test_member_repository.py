"""Unit tests for MemberRepository error translation."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock, create_autospec

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError, ProgrammingError

from members.domain import Member, MemberField, MemberId
from members.infrastructure import MemberModel, MemberRepository
from members.infrastructure.observability import MemberRepositoryProbe
from members.ports import (
    DependencyUnavailableError,
    DuplicateMemberEmailError,
    PersistFailedError,
)

NOW = datetime(2024, 3, 1, tzinfo=UTC)


def make_member() -> Member:
    return Member(
        id=MemberId.generate(),
        name="Jane",
        email="jane@example.com",
        phone_number="9876543210",
        created_at=NOW,
        updated_at=NOW,
        created_by="alice",
        updated_by="alice",
    )


@pytest.fixture
def mock_session():
    session = MagicMock()
    session.get = AsyncMock(return_value=None)
    session.execute = AsyncMock()
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=None)
    transaction.__aexit__ = AsyncMock(return_value=False)
    session.begin = MagicMock(return_value=transaction)
    return session


@pytest.fixture
def session_factory(mock_session):
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=mock_session)
    context.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=context)


@pytest.fixture
def mock_probe():
    return create_autospec(MemberRepositoryProbe, instance=True)


@pytest.fixture
def repository(session_factory, mock_probe):
    return MemberRepository(session_factory=session_factory, probe=mock_probe)


def fail_on_commit(mock_session, error: Exception) -> None:
    mock_session.begin.return_value.__aexit__ = AsyncMock(side_effect=error)


class TestSave:
    """Tests for MemberRepository.save."""

    @pytest.mark.asyncio
    async def test_adds_new_member(self, repository, mock_session, mock_probe):
        member = make_member()

        await repository.save(member)

        added = mock_session.add.call_args[0][0]
        assert isinstance(added, MemberModel)
        assert added.id == member.id.value
        assert added.email == "jane@example.com"
        mock_probe.member_saved.assert_called_once_with(
            member.id.value, member.email, member.phone_number
        )

    @pytest.mark.asyncio
    async def test_updates_existing_row_in_place(self, repository, mock_session):
        member = make_member()
        existing = MemberModel(id=member.id.value, name="Old")
        mock_session.get = AsyncMock(return_value=existing)

        await repository.save(member)

        mock_session.add.assert_not_called()
        assert existing.name == "Jane"
        assert existing.updated_by == "alice"

    @pytest.mark.asyncio
    async def test_email_constraint_violation_is_duplicate(
        self, repository, mock_session, mock_probe
    ):
        fail_on_commit(
            mock_session,
            IntegrityError(
                "INSERT INTO members",
                {},
                Exception(
                    'duplicate key value violates unique constraint "uq_members_email"'
                ),
            ),
        )

        with pytest.raises(DuplicateMemberEmailError) as exc_info:
            await repository.save(make_member())

        assert exc_info.value.field == "email"
        mock_probe.duplicate_email.assert_called_once()

    @pytest.mark.asyncio
    async def test_sqlite_style_message_is_recognized(self, repository, mock_session):
        fail_on_commit(
            mock_session,
            IntegrityError(
                "INSERT", {}, Exception("UNIQUE constraint failed: members.email")
            ),
        )

        with pytest.raises(DuplicateMemberEmailError):
            await repository.save(make_member())

    @pytest.mark.asyncio
    async def test_other_integrity_errors_are_persist_failures(
        self, repository, mock_session
    ):
        fail_on_commit(
            mock_session,
            IntegrityError("INSERT", {}, Exception('null value in column "name"')),
        )

        with pytest.raises(PersistFailedError):
            await repository.save(make_member())

    @pytest.mark.asyncio
    async def test_lost_connection_is_dependency_unavailable(
        self, repository, mock_session, mock_probe
    ):
        mock_session.get = AsyncMock(
            side_effect=OperationalError("SELECT", {}, Exception("connection refused"))
        )

        with pytest.raises(DependencyUnavailableError):
            await repository.save(make_member())

        mock_probe.store_unavailable.assert_called_once()

    @pytest.mark.asyncio
    async def test_other_write_errors_are_persist_failures(
        self, repository, mock_session, mock_probe
    ):
        fail_on_commit(
            mock_session, ProgrammingError("INSERT", {}, Exception("syntax error"))
        )

        with pytest.raises(PersistFailedError):
            await repository.save(make_member())

        mock_probe.write_failed.assert_called_once()


class TestReads:
    """Tests for read operations."""

    @pytest.mark.asyncio
    async def test_find_by_field_maps_row(self, repository, mock_session):
        member = make_member()
        model = MemberModel(
            id=member.id.value,
            name=member.name,
            email=member.email,
            phone_number=member.phone_number,
            created_at=NOW,
            updated_at=NOW,
            created_by="alice",
            updated_by="alice",
        )
        result = MagicMock()
        result.scalars.return_value.all.return_value = [model]
        mock_session.execute = AsyncMock(return_value=result)

        found = await repository.find_by_field(MemberField.EMAIL, "jane@example.com")

        assert found == member

    @pytest.mark.asyncio
    async def test_find_by_field_returns_none_when_missing(
        self, repository, mock_session
    ):
        result = MagicMock()
        result.scalars.return_value.all.return_value = []
        mock_session.execute = AsyncMock(return_value=result)

        found = await repository.find_by_field(MemberField.EMAIL, "x@example.com")

        assert found is None

    @pytest.mark.asyncio
    async def test_unreachable_store_on_read(self, repository, mock_session):
        mock_session.execute = AsyncMock(side_effect=ConnectionRefusedError())

        with pytest.raises(DependencyUnavailableError):
            await repository.find_by_field(MemberField.EMAIL, "jane@example.com")

    @pytest.mark.asyncio
    async def test_count_returns_integer(self, repository, mock_session):
        result = MagicMock()
        result.scalar_one.return_value = 7
        mock_session.execute = AsyncMock(return_value=result)

        assert await repository.count("ja") == 7


class TestDelete:
    @pytest.mark.asyncio
    async def test_reports_whether_a_row_was_deleted(self, repository, mock_session):
        mock_session.execute = AsyncMock(return_value=MagicMock(rowcount=1))
        assert await repository.delete_by_id(MemberId.generate()) is True

        mock_session.execute = AsyncMock(return_value=MagicMock(rowcount=0))
        assert await repository.delete_by_id(MemberId.generate()) is False
