"""PostgreSQL implementation of IMemberRepository."""

from __future__ import annotations

from typing import NoReturn

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from infrastructure.database import is_unavailable_error, unique_violation_column
from members.domain import Member, MemberField, MemberId, SortDirection
from members.infrastructure.models import MemberModel
from members.infrastructure.observability import (
    DefaultMemberRepositoryProbe,
    MemberRepositoryProbe,
)
from members.ports import (
    DependencyUnavailableError,
    DuplicateMemberEmailError,
    IMemberRepository,
    MemberQuery,
    PersistFailedError,
)

_UNIQUE_CONSTRAINTS = (
    ("uq_members_email", "email"),
    ("members.email", "email"),
)

_COLUMNS = {
    MemberField.NAME: MemberModel.name,
    MemberField.EMAIL: MemberModel.email,
    MemberField.PHONE_NUMBER: MemberModel.phone_number,
    MemberField.CREATED_AT: MemberModel.created_at,
    MemberField.UPDATED_AT: MemberModel.updated_at,
}


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class MemberRepository(IMemberRepository):
    """PostgreSQL-backed repository for Member entities.

    Each call runs in its own session and transaction. Driver failures are
    translated into the Members port exceptions so the pipeline never sees
    SQLAlchemy types.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: MemberRepositoryProbe | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._probe = probe or DefaultMemberRepositoryProbe()

    async def find_by_field(self, field: MemberField, value: str) -> Member | None:
        column = _COLUMNS[field]
        models = await self._read(
            "find_by_field", select(MemberModel).where(column == value).limit(1)
        )
        return self._to_domain(models[0]) if models else None

    async def get_by_id(self, member_id: MemberId) -> Member | None:
        models = await self._read(
            "get_by_id", select(MemberModel).where(MemberModel.id == member_id.value)
        )
        return self._to_domain(models[0]) if models else None

    async def save(self, member: Member) -> None:
        try:
            async with self._session_factory() as session, session.begin():
                model = await session.get(MemberModel, member.id.value)
                if model is None:
                    session.add(self._to_model(member))
                else:
                    self._copy_onto(member, model)
        except IntegrityError as e:
            if unique_violation_column(e, _UNIQUE_CONSTRAINTS) == "email":
                self._probe.duplicate_email(member.id.value)
                raise DuplicateMemberEmailError(member.email) from e
            self._probe.write_failed("save", str(e))
            raise PersistFailedError(str(e.orig or e)) from e
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            self._raise_write_error("save", e)

        self._probe.member_saved(member.id.value, member.email, member.phone_number)

    async def delete_by_id(self, member_id: MemberId) -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    delete(MemberModel).where(MemberModel.id == member_id.value)
                )
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            self._raise_write_error("delete", e)

        if result.rowcount:
            self._probe.member_deleted(member_id.value)
            return True
        return False

    async def list(self, query: MemberQuery) -> list[Member]:
        column = _COLUMNS[query.sort_field]
        order = column.desc() if query.direction == SortDirection.DESC else column.asc()
        stmt = (
            self._apply_search(select(MemberModel), query.search)
            .order_by(order, MemberModel.id.asc())
            .offset(query.offset)
            .limit(query.limit)
        )
        return [self._to_domain(model) for model in await self._read("list", stmt)]

    async def count(self, search: str | None = None) -> int:
        stmt = self._apply_search(
            select(func.count()).select_from(MemberModel), search
        )
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return int(result.scalar_one())
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable("count", str(e))
                raise DependencyUnavailableError(str(e)) from e
            raise

    @staticmethod
    def _apply_search(stmt, search: str | None):
        if not search:
            return stmt
        pattern = f"%{_escape_like(search)}%"
        return stmt.where(
            or_(
                MemberModel.name.ilike(pattern, escape="\\"),
                MemberModel.email.ilike(pattern, escape="\\"),
                MemberModel.phone_number.ilike(pattern, escape="\\"),
            )
        )

    async def _read(self, operation: str, stmt) -> list[MemberModel]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable(operation, str(e))
                raise DependencyUnavailableError(str(e)) from e
            raise

    def _raise_write_error(self, operation: str, error: BaseException) -> NoReturn:
        if is_unavailable_error(error):
            self._probe.store_unavailable(operation, str(error))
            raise DependencyUnavailableError(str(error)) from error
        self._probe.write_failed(operation, str(error))
        raise PersistFailedError(str(error)) from error

    @staticmethod
    def _to_model(member: Member) -> MemberModel:
        model = MemberModel(id=member.id.value)
        MemberRepository._copy_onto(member, model)
        return model

    @staticmethod
    def _copy_onto(member: Member, model: MemberModel) -> None:
        model.name = member.name
        model.email = member.email
        model.phone_number = member.phone_number
        model.created_at = member.created_at
        model.updated_at = member.updated_at
        model.created_by = member.created_by
        model.updated_by = member.updated_by

    @staticmethod
    def _to_domain(model: MemberModel) -> Member:
        return Member(
            id=MemberId(value=model.id),
            name=model.name,
            email=model.email,
            phone_number=model.phone_number,
            created_at=model.created_at,
            updated_at=model.updated_at,
            created_by=model.created_by,
            updated_by=model.updated_by,
        )
