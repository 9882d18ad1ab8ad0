"""Startup seeding for the IAM bounded context.

Creates the built-in roles and, when a bootstrap password is configured, an
"admin" account. Safe to run on every start: existing rows are left alone.
"""

from __future__ import annotations

import structlog

from iam.application.security import DEFAULT_BCRYPT_ROUNDS, hash_password
from iam.domain.aggregates import Role, User
from iam.domain.value_objects import RoleName, UserId
from iam.ports.repositories import IRoleRepository, IUserRepository
from shared_kernel.authorization import Permission

logger = structlog.get_logger()

ADMIN_USERNAME = "admin"
ADMIN_EMAIL = "admin@directory.local"

DEFAULT_ROLES: dict[RoleName, tuple[str, frozenset[Permission]]] = {
    RoleName.ADMIN: ("Full system access", frozenset(Permission)),
    RoleName.USER: (
        "Standard user access",
        frozenset(
            {Permission.MEMBER_CREATE, Permission.MEMBER_READ, Permission.MEMBER_UPDATE}
        ),
    ),
    RoleName.VIEWER: ("Read-only access", frozenset({Permission.MEMBER_READ})),
}


async def seed_roles(role_repository: IRoleRepository) -> dict[RoleName, Role]:
    """Ensure every built-in role exists.

    Returns:
        The built-in roles keyed by name, whether created now or earlier
    """
    roles: dict[RoleName, Role] = {}
    for name, (description, permissions) in DEFAULT_ROLES.items():
        role = await role_repository.get_by_name(name)
        if role is None:
            role = Role.create(
                name=name, permissions=permissions, description=description
            )
            await role_repository.save(role)
            logger.info("role_seeded", role=name.value, permissions=len(permissions))
        roles[name] = role
    return roles


async def seed_admin(
    user_repository: IUserRepository,
    admin_role: Role,
    password: str,
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> User | None:
    """Create the admin account unless one already exists.

    Returns:
        The created user, or None when "admin" was already present
    """
    if await user_repository.get_by_username(ADMIN_USERNAME) is not None:
        return None

    admin = User(
        id=UserId.generate(),
        username=ADMIN_USERNAME,
        email=ADMIN_EMAIL,
        password_hash=hash_password(password, rounds=bcrypt_rounds),
        role_ids=[admin_role.id],
    )
    await user_repository.save(admin)
    logger.info("admin_user_seeded", user_id=admin.id.value)
    return admin


async def bootstrap_iam(
    user_repository: IUserRepository,
    role_repository: IRoleRepository,
    admin_password: str | None,
    bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
) -> None:
    """Seed roles, then the admin account when a password is configured."""
    roles = await seed_roles(role_repository)
    if admin_password:
        await seed_admin(
            user_repository, roles[RoleName.ADMIN], admin_password, bcrypt_rounds
        )
    else:
        logger.info(
            "admin_user_seed_skipped", reason="no bootstrap password configured"
        )
