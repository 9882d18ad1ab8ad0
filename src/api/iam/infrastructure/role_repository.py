"""PostgreSQL implementation of IRoleRepository."""

from __future__ import annotations

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from iam.domain.aggregates import Role
from iam.domain.value_objects import RoleId
from iam.infrastructure.models import RoleModel
from iam.infrastructure.observability import (
    DefaultRoleRepositoryProbe,
    RoleRepositoryProbe,
)
from iam.ports.exceptions import DuplicateRoleNameError, UserStoreUnavailableError
from iam.ports.repositories import IRoleRepository
from infrastructure.database import is_unavailable_error, unique_violation_column

_UNIQUE_CONSTRAINTS = (
    ("uq_roles_name", "name"),
    ("roles.name", "name"),
)


class RoleRepository(IRoleRepository):
    """PostgreSQL-backed repository for Role aggregates."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        probe: RoleRepositoryProbe | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._probe = probe or DefaultRoleRepositoryProbe()

    async def save(self, role: Role) -> None:
        """Insert or update a role.

        Raises:
            DuplicateRoleNameError: Role name unique constraint violated
            UserStoreUnavailableError: Database unreachable
        """
        try:
            async with self._session_factory() as session, session.begin():
                model = await session.get(RoleModel, role.id.value)
                if model is None:
                    session.add(
                        RoleModel(
                            id=role.id.value,
                            name=role.name,
                            description=role.description,
                            permissions=sorted(role.permissions),
                        )
                    )
                else:
                    model.name = role.name
                    model.description = role.description
                    model.permissions = sorted(role.permissions)
        except IntegrityError as e:
            if unique_violation_column(e, _UNIQUE_CONSTRAINTS) == "name":
                self._probe.duplicate_role(role.name)
                raise DuplicateRoleNameError(
                    f"Role name '{role.name}' already exists"
                ) from e
            raise
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable("save", str(e))
                raise UserStoreUnavailableError(str(e)) from e
            raise
        self._probe.role_saved(role.id.value, role.name)

    async def delete_by_id(self, role_id: RoleId) -> bool:
        try:
            async with self._session_factory() as session, session.begin():
                result = await session.execute(
                    delete(RoleModel).where(RoleModel.id == role_id.value)
                )
        except (SQLAlchemyError, OSError, TimeoutError) as e:
            if is_unavailable_error(e):
                self._probe.store_unavailable("delete", str(e))
                raise UserStoreUnavailableError(str(e)) from e
            raise

        if result.rowcount:
            self._probe.role_deleted(role_id.value)
            return True
        return False

    async def get_by_id(self, role_id: RoleId) -> Role | None:
        async with self._session_factory() as session:
            model = await session.get(RoleModel, role_id.value)
        return self._to_domain(model) if model else None

    async def get_by_name(self, name: str) -> Role | None:
        async with self._session_factory() as session:
            result = await session.execute(
                select(RoleModel).where(RoleModel.name == name)
            )
            model = result.scalar_one_or_none()
        return self._to_domain(model) if model else None

    async def get_many(self, role_ids: Iterable[RoleId]) -> list[Role]:
        ids = {role_id.value for role_id in role_ids}
        if not ids:
            return []
        async with self._session_factory() as session:
            result = await session.execute(
                select(RoleModel).where(RoleModel.id.in_(ids))
            )
            roles = [self._to_domain(model) for model in result.scalars().all()]
        self._probe.roles_resolved(requested=len(ids), found=len(roles))
        return roles

    async def list_all(self) -> list[Role]:
        async with self._session_factory() as session:
            result = await session.execute(select(RoleModel).order_by(RoleModel.name))
            return [self._to_domain(model) for model in result.scalars().all()]

    @staticmethod
    def _to_domain(model: RoleModel) -> Role:
        return Role(
            id=RoleId(value=model.id),
            name=model.name,
            description=model.description,
            permissions=frozenset(model.permissions or []),
        )
