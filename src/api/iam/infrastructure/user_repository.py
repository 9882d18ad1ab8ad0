"""PostgreSQL implementation of IUserRepository."""

from __future__ import annotations

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from iam.domain.aggregates import User
from iam.domain.value_objects import RoleId, UserId
from iam.infrastructure.models import UserModel
from iam.infrastructure.observability import (
    DefaultUserRepositoryProbe,
    UserRepositoryProbe,
)
from iam.ports.exceptions import (
    DuplicateUserEmailError,
    DuplicateUsernameError,
    UserStoreUnavailableError,
)
from iam.ports.repositories import IUserRepository
from infrastructure.database import is_unavailable_error, unique_violation_column

_UNIQUE_CONSTRAINTS = (
    ("uq_users_username", "username"),
    ("users.username", "username"),
    ("uq_users_email", "email"),
    ("users.email", "email"),
)


class UserRepository(IUserRepository):
    """PostgreSQL-backed repository for User aggregates.

    Each call runs in its own session and transaction.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: UserRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with a session factory and probe.

        Args:
            session_factory: Factory producing one session per call
            probe: Optional domain probe for observability
        """
        self._session_factory = session_factory
        self._probe = probe or DefaultUserRepositoryProbe()

    async def save(self, user: User) -> None:
        """Insert or update a user.

        Raises:
            DuplicateUsernameError: Username unique constraint violated
            DuplicateUserEmailError: Email unique constraint violated
            UserStoreUnavailableError: Database unreachable
        """
        try:
            async with self._session_factory() as session, session.begin():
                model = await session.get(UserModel, user.id.value)
                if model is None:
                    session.add(self._to_model(user))
                else:
                    self._copy_onto(user, model)
        except IntegrityError as e:
            column = unique_violation_column(e, _UNIQUE_CONSTRAINTS)
            if column == "username":
                self._probe.duplicate_user("username")
                raise DuplicateUsernameError(
                    f"Username '{user.username}' is taken"
                ) from e
            if column == "email":
                self._probe.duplicate_user("email")
                raise DuplicateUserEmailError("Email is already registered") from e
            raise
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable("save", str(e))
                raise UserStoreUnavailableError(str(e)) from e
            raise

        self._probe.user_saved(user.id.value, user.username)

    async def get_by_id(self, user_id: UserId) -> User | None:
        return await self._get_one(
            select(UserModel).where(UserModel.id == user_id.value), user_id.value
        )

    async def get_by_username(self, username: str) -> User | None:
        return await self._get_one(
            select(UserModel).where(UserModel.username == username), username
        )

    async def get_by_email(self, email: str) -> User | None:
        return await self._get_one(
            select(UserModel).where(UserModel.email == email), "email"
        )

    async def list_users(self, offset: int, limit: int) -> list[User]:
        stmt = (
            select(UserModel)
            .order_by(UserModel.username.asc())
            .offset(offset)
            .limit(limit)
        )
        return [self._to_domain(model) for model in await self._fetch("list", stmt)]

    async def count(self) -> int:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(func.count()).select_from(UserModel)
                )
                return int(result.scalar_one())
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable("count", str(e))
                raise UserStoreUnavailableError(str(e)) from e
            raise

    async def count_with_role(self, role_id: RoleId) -> int:
        # role_ids is a JSON list; membership is tested here, not in SQL.
        stored = await self._fetch("count_with_role", select(UserModel.role_ids))
        return sum(1 for role_ids in stored if role_id.value in (role_ids or []))

    async def delete_by_id(self, user_id: UserId) -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    delete(UserModel).where(UserModel.id == user_id.value)
                )
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable("delete", str(e))
                raise UserStoreUnavailableError(str(e)) from e
            raise

        if result.rowcount:
            self._probe.user_deleted(user_id.value)
            return True
        return False

    async def _fetch(self, operation: str, stmt) -> list:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                return list(result.scalars().all())
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable(operation, str(e))
                raise UserStoreUnavailableError(str(e)) from e
            raise

    async def _get_one(self, stmt, lookup: str) -> User | None:
        try:
            async with self._session_factory() as session:
                result = await session.execute(stmt)
                model = result.scalar_one_or_none()
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable("get", str(e))
                raise UserStoreUnavailableError(str(e)) from e
            raise

        if model is None:
            self._probe.user_not_found(lookup)
            return None
        return self._to_domain(model)

    @staticmethod
    def _to_model(user: User) -> UserModel:
        model = UserModel(id=user.id.value)
        UserRepository._copy_onto(user, model)
        return model

    @staticmethod
    def _copy_onto(user: User, model: UserModel) -> None:
        model.username = user.username
        model.email = user.email
        model.password_hash = user.password_hash
        model.role_ids = [role_id.value for role_id in user.role_ids]
        model.enabled = user.enabled
        model.account_locked = user.account_locked
        model.failed_login_attempts = user.failed_login_attempts
        model.lockout_end_time = user.lockout_end_time
        model.last_login_date = user.last_login_date

    @staticmethod
    def _to_domain(model: UserModel) -> User:
        return User(
            id=UserId(value=model.id),
            username=model.username,
            email=model.email,
            password_hash=model.password_hash,
            role_ids=[RoleId(value=value) for value in model.role_ids or []],
            enabled=model.enabled,
            account_locked=model.account_locked,
            failed_login_attempts=model.failed_login_attempts,
            lockout_end_time=model.lockout_end_time,
            last_login_date=model.last_login_date,
        )
