"""User application service for IAM bounded context.

Handles self-registration, the administrative operations on accounts
(listing, creation, updates, deletion, role grants, enable/disable, unlock)
and the caller's own profile.
"""

from __future__ import annotations

from collections.abc import Sequence

from iam.application.observability import DefaultUserServiceProbe, UserServiceProbe
from iam.application.security import (
    DEFAULT_BCRYPT_ROUNDS,
    hash_password,
    verify_password,
)
from iam.application.value_objects import UserDetails, UserPage
from iam.domain.aggregates import User
from iam.domain.value_objects import RoleId, RoleName, UserId
from iam.ports.exceptions import (
    AccountPolicyError,
    DuplicateUserEmailError,
    DuplicateUsernameError,
    PasswordChangeError,
    PermissionDeniedError,
    RoleNotFoundError,
    UserNotFoundError,
    UserRegistrationError,
    UserValidationError,
)
from iam.ports.repositories import IRoleRepository, IUserRepository
from shared_kernel.authorization import Permission, PermissionEvaluator, Principal
from shared_kernel.validation import FieldValidator, normalize_identity

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


class UserService:
    """Application service for user management."""

    def __init__(
        self,
        user_repository: IUserRepository,
        role_repository: IRoleRepository,
        validator: FieldValidator,
        evaluator: PermissionEvaluator | None = None,
        bcrypt_rounds: int = DEFAULT_BCRYPT_ROUNDS,
        probe: UserServiceProbe | None = None,
    ):
        """Initialize UserService with dependencies.

        Args:
            user_repository: Repository for user persistence
            role_repository: Repository for role lookup
            validator: Field validator for username, email and password
            evaluator: Permission evaluator for administrative operations
            bcrypt_rounds: bcrypt cost factor for new password hashes
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._role_repository = role_repository
        self._validator = validator
        self._evaluator = evaluator or PermissionEvaluator()
        self._bcrypt_rounds = bcrypt_rounds
        self._probe = probe or DefaultUserServiceProbe()

    async def register_user(self, username: str, email: str, password: str) -> User:
        """Create a new account holding the default USER role.

        Args:
            username: Requested login name
            email: Contact email
            password: Plaintext password (must satisfy the complexity policy)

        Returns:
            The newly created User aggregate

        Raises:
            UserRegistrationError: If any field fails validation
            DuplicateUsernameError: If the username is taken
            DuplicateUserEmailError: If the email is taken
        """
        return await self._create(username, email, password, role_names=None)

    async def create_user(
        self,
        username: str,
        email: str,
        password: str,
        principal: Principal,
        role_names: Sequence[str] | None = None,
    ) -> User:
        """Create an account on behalf of an administrator.

        Same rules as self-registration. With no role names the account gets
        the default USER role.

        Raises:
            PermissionDeniedError: If the principal lacks user:create
            RoleNotFoundError: If a requested role does not exist
        """
        self._require(principal, Permission.USER_CREATE)
        return await self._create(username, email, password, role_names or None)

    async def list_users(
        self, principal: Principal, page: int = 0, size: int = DEFAULT_PAGE_SIZE
    ) -> UserPage:
        """List users ordered by username.

        The page index is floored at 0 and the size clamped to
        1..MAX_PAGE_SIZE.

        Raises:
            PermissionDeniedError: If the principal lacks user:read
        """
        self._require(principal, Permission.USER_READ)
        page = max(page, 0)
        size = min(max(size, 1), MAX_PAGE_SIZE)

        total = await self._user_repository.count()
        users = await self._user_repository.list_users(page * size, size)
        items = tuple([await self._details(user) for user in users])
        self._probe.users_listed(principal.username, len(items), total)
        return UserPage(items=items, total=total, page=page, size=size)

    async def get_user(self, user_id: UserId, principal: Principal) -> UserDetails:
        """Read one user with its resolved roles.

        Raises:
            PermissionDeniedError: If the principal lacks user:read
            UserNotFoundError: If the user does not exist
        """
        self._require(principal, Permission.USER_READ)
        return await self._details(await self._get(user_id))

    async def update_user(
        self,
        user_id: UserId,
        principal: Principal,
        email: str | None = None,
        enabled: bool | None = None,
    ) -> User:
        """Change a user's email and/or enabled flag.

        Raises:
            PermissionDeniedError: If the principal lacks user:update
            UserNotFoundError: If the user does not exist
            AccountPolicyError: If an administrator changes their own status
            UserValidationError: If the email is malformed
            DuplicateUserEmailError: If another account uses the email
        """
        user = await self._load_for(user_id, principal, Permission.USER_UPDATE)
        if enabled is not None and self._is_self(principal, user):
            raise AccountPolicyError("Cannot modify your own account status")

        changed: list[str] = []
        if email is not None:
            user.email = await self._checked_email(user, email)
            changed.append("email")
        if enabled is not None:
            user.enabled = enabled
            changed.append("enabled")

        await self._user_repository.save(user)
        self._probe.user_updated(user.id.value, changed)
        return user

    async def delete_user(self, user_id: UserId, principal: Principal) -> None:
        """Delete an account.

        Raises:
            PermissionDeniedError: If the principal lacks user:delete
            UserNotFoundError: If the user does not exist
            AccountPolicyError: On self-deletion or when removing the last
                ADMIN holder
        """
        user = await self._load_for(user_id, principal, Permission.USER_DELETE)
        if self._is_self(principal, user):
            raise AccountPolicyError("Cannot delete your own account")

        admin = await self._role_repository.get_by_name(RoleName.ADMIN)
        if admin is not None and await self._is_last_holder(user, admin.id):
            raise AccountPolicyError("Cannot delete the last admin user")

        if not await self._user_repository.delete_by_id(user.id):
            raise UserNotFoundError(f"User {user_id} not found")
        self._probe.user_deleted(user.id.value, principal.username)

    async def assign_role(
        self, user_id: UserId, role_name: str, principal: Principal
    ) -> User:
        """Grant a role to a user.

        Raises:
            PermissionDeniedError: If the principal lacks user:update
            UserNotFoundError: If the user does not exist
            RoleNotFoundError: If no role has that name
        """
        user = await self._load_for(user_id, principal, Permission.USER_UPDATE)
        role = await self._role_repository.get_by_name(role_name)
        if role is None:
            raise RoleNotFoundError(f"Role '{role_name}' not found")

        user.add_role(role.id)
        await self._user_repository.save(user)
        self._probe.role_assigned(user.id.value, role.name)
        return user

    async def revoke_role(
        self, user_id: UserId, role_name: str, principal: Principal
    ) -> User:
        """Revoke a role from a user.

        Raises:
            PermissionDeniedError: If the principal lacks user:update
            UserNotFoundError: If the user does not exist
            RoleNotFoundError: If no role has that name
            AccountPolicyError: On the caller's own account, or when taking
                ADMIN from its last holder
            ValueError: If the user does not hold the role
        """
        user = await self._load_for(user_id, principal, Permission.USER_UPDATE)
        if self._is_self(principal, user):
            raise AccountPolicyError("Cannot remove roles from your own account")
        role = await self._role_repository.get_by_name(role_name)
        if role is None:
            raise RoleNotFoundError(f"Role '{role_name}' not found")
        if role.name == RoleName.ADMIN and await self._is_last_holder(user, role.id):
            raise AccountPolicyError("Cannot remove ADMIN role from the last admin")

        user.remove_role(role.id)
        await self._user_repository.save(user)
        self._probe.role_revoked(user.id.value, role.name)
        return user

    async def set_enabled(
        self, user_id: UserId, enabled: bool, principal: Principal
    ) -> User:
        """Enable or disable an account. Disabled accounts cannot log in.

        Raises:
            AccountPolicyError: If an administrator disables their own account
        """
        user = await self._load_for(user_id, principal, Permission.USER_UPDATE)
        if not enabled and self._is_self(principal, user):
            raise AccountPolicyError("Cannot disable your own account")
        user.enabled = enabled
        await self._user_repository.save(user)
        self._probe.user_enabled_changed(user.id.value, enabled)
        return user

    async def unlock_user(self, user_id: UserId, principal: Principal) -> User:
        """Clear a lockout before it expires and reset the failure counter."""
        user = await self._load_for(user_id, principal, Permission.USER_UPDATE)
        user.account_locked = False
        user.lockout_end_time = None
        user.failed_login_attempts = 0
        await self._user_repository.save(user)
        self._probe.user_unlocked(user.id.value)
        return user

    async def get_profile(self, principal: Principal) -> UserDetails:
        """The caller's own account with its roles and permissions.

        Raises:
            UserNotFoundError: If the caller has no backing user
        """
        return await self._details(await self._own_account(principal))

    async def update_profile(self, principal: Principal, email: str) -> User:
        """Change the caller's own email.

        Raises:
            UserValidationError: If the email is malformed
            DuplicateUserEmailError: If another account uses the email
        """
        user = await self._own_account(principal)
        user.email = await self._checked_email(user, email)
        await self._user_repository.save(user)
        self._probe.user_updated(user.id.value, ["email"])
        return user

    async def change_password(
        self, principal: Principal, current_password: str, new_password: str
    ) -> None:
        """Replace the caller's password.

        The new password must satisfy the complexity policy and differ from
        the current one.

        Raises:
            PasswordChangeError: Missing input, wrong current password or an
                unchanged password
            UserValidationError: If the new password breaks the policy
        """
        if not current_password:
            raise PasswordChangeError("Current password is required")
        if not new_password:
            raise PasswordChangeError("New password is required")
        errors = self._validator.validate_fields({"password": new_password})
        if errors:
            raise UserValidationError(errors)

        user = await self._own_account(principal)
        if not verify_password(current_password, user.password_hash):
            self._probe.password_change_failed(user.id.value, "incorrect_current")
            raise PasswordChangeError("Current password is incorrect")
        if verify_password(new_password, user.password_hash):
            self._probe.password_change_failed(user.id.value, "unchanged")
            raise PasswordChangeError(
                "New password must be different from current password"
            )

        user.password_hash = hash_password(new_password, rounds=self._bcrypt_rounds)
        await self._user_repository.save(user)
        self._probe.password_changed(user.id.value)

    async def _create(
        self,
        username: str,
        email: str,
        password: str,
        role_names: Sequence[str] | None,
    ) -> User:
        errors = self._validator.validate_fields(
            {"username": username, "email": email, "password": password}
        )
        if errors:
            self._probe.user_registration_failed(username, error="validation_failed")
            raise UserRegistrationError(errors)

        normalized_username = normalize_identity(username)
        normalized_email = normalize_identity(email)

        try:
            if await self._user_repository.get_by_username(normalized_username):
                raise DuplicateUsernameError(
                    f"Username '{normalized_username}' is taken"
                )
            if await self._user_repository.get_by_email(normalized_email):
                raise DuplicateUserEmailError("Email is already registered")

            user = User(
                id=UserId.generate(),
                username=normalized_username,
                email=normalized_email,
                password_hash=hash_password(password, rounds=self._bcrypt_rounds),
                role_ids=await self._initial_roles(role_names),
            )
            await self._user_repository.save(user)

        except Exception as e:
            self._probe.user_registration_failed(normalized_username, error=str(e))
            raise

        self._probe.user_registered(user.id.value, user.username, user.email)
        return user

    async def _initial_roles(self, role_names: Sequence[str] | None) -> list[RoleId]:
        if role_names is None:
            default_role = await self._role_repository.get_by_name(RoleName.USER)
            return [default_role.id] if default_role else []

        role_ids: list[RoleId] = []
        for name in role_names:
            role = await self._role_repository.get_by_name(name)
            if role is None:
                raise RoleNotFoundError(f"Role '{name}' not found")
            if role.id not in role_ids:
                role_ids.append(role.id)
        return role_ids

    async def _checked_email(self, user: User, email: str) -> str:
        errors = self._validator.validate_fields({"email": email})
        if errors:
            raise UserValidationError(errors)
        normalized = normalize_identity(email)
        other = await self._user_repository.get_by_email(normalized)
        if other is not None and other.id != user.id:
            raise DuplicateUserEmailError("Email already in use by another account")
        return normalized

    async def _details(self, user: User) -> UserDetails:
        roles = await self._role_repository.get_many(user.role_ids)
        return UserDetails(user=user, roles=tuple(sorted(roles, key=lambda r: r.name)))

    async def _is_last_holder(self, user: User, role_id: RoleId) -> bool:
        if role_id not in user.role_ids:
            return False
        return await self._user_repository.count_with_role(role_id) <= 1

    async def _own_account(self, principal: Principal) -> User:
        if principal.user_id is None:
            raise UserNotFoundError(f"No account for {principal.username}")
        return await self._get(UserId(value=principal.user_id))

    async def _get(self, user_id: UserId) -> User:
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return user

    async def _load_for(
        self, user_id: UserId, principal: Principal, permission: Permission
    ) -> User:
        self._require(principal, permission)
        return await self._get(user_id)

    def _require(self, principal: Principal, permission: Permission) -> None:
        if not self._evaluator.authorize(principal.roles, permission):
            raise PermissionDeniedError("forbidden")

    @staticmethod
    def _is_self(principal: Principal, user: User) -> bool:
        return principal.user_id == user.id.value
