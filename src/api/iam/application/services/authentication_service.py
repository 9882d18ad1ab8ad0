"""Authentication service for IAM bounded context.

Verifies credentials, enforces account lockout and turns a user into the
Principal other bounded contexts authorize against.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

from audit.domain import AuditAction, AuditLogEntry
from audit.ports import AuditSink
from iam.application.observability import (
    AuthenticationProbe,
    DefaultAuthenticationProbe,
)
from iam.application.security import verify_password
from iam.domain.aggregates import LOCKOUT_DURATION, MAX_FAILED_LOGIN_ATTEMPTS, User
from iam.domain.value_objects import UserId
from iam.ports.exceptions import (
    AccountDisabledError,
    AccountLockedError,
    AuthenticationError,
    InvalidCredentialsError,
    UserNotFoundError,
)
from iam.ports.repositories import IRoleRepository, IUserRepository
from shared_kernel.authorization import Principal
from shared_kernel.validation import normalize_identity


def _utc_now() -> datetime:
    return datetime.now(UTC)


class AuthenticationService:
    """Application service for login and principal resolution."""

    def __init__(
        self,
        user_repository: IUserRepository,
        role_repository: IRoleRepository,
        audit_sink: AuditSink | None = None,
        clock: Callable[[], datetime] = _utc_now,
        max_failed_attempts: int = MAX_FAILED_LOGIN_ATTEMPTS,
        lockout_duration: timedelta = LOCKOUT_DURATION,
        probe: AuthenticationProbe | None = None,
    ):
        """Initialize AuthenticationService with dependencies.

        Args:
            user_repository: Repository for user lookup and lockout persistence
            role_repository: Repository used to resolve a user's role references
            audit_sink: Optional sink receiving one LOGIN entry per attempt
            clock: Source of the current time (injected for tests)
            max_failed_attempts: Consecutive failures that lock an account
            lockout_duration: How long a lock lasts
            probe: Optional domain probe for observability
        """
        self._user_repository = user_repository
        self._role_repository = role_repository
        self._audit_sink = audit_sink
        self._clock = clock
        self._max_failed_attempts = max_failed_attempts
        self._lockout_duration = lockout_duration
        self._probe = probe or DefaultAuthenticationProbe()

    async def authenticate(
        self, username: str, password: str, ip_address: str | None = None
    ) -> Principal:
        """Verify credentials and return the caller's principal.

        The lock is checked before the password, so a locked account stays
        locked even when the right password is supplied. An expired lock is
        released first.

        Args:
            username: Login name as typed (normalized here)
            password: Plaintext password
            ip_address: Caller address, recorded on the audit entry

        Returns:
            Principal carrying the user's resolved roles

        Raises:
            InvalidCredentialsError: Unknown username or wrong password
            AccountLockedError: Too many recent failures
            AccountDisabledError: Account switched off by an administrator
            UserStoreUnavailableError: The user store cannot be reached
        """
        now = self._clock()
        normalized = normalize_identity(username)

        try:
            user = await self._user_repository.get_by_username(normalized)
            if user is None:
                raise InvalidCredentialsError()

            if user.release_expired_lock(now):
                await self._user_repository.save(user)
                self._probe.expired_lock_released(user.id.value, user.username)

            if user.is_locked(now):
                raise AccountLockedError(user.lockout_end_time)

            if not user.enabled:
                raise AccountDisabledError()

            if not verify_password(password, user.password_hash):
                await self._record_failure(user, now)
                raise InvalidCredentialsError()

        except AuthenticationError as e:
            self._probe.authentication_failed(normalized, reason=_failure_reason(e))
            self._audit_login(normalized, now, ip_address, error=str(e))
            raise

        user.record_successful_login(now)
        await self._user_repository.save(user)

        self._probe.user_authenticated(user.id.value, user.username)
        self._audit_login(normalized, now, ip_address, entity_id=user.id.value)
        return await self._principal_for(user)

    async def resolve_principal(self, user_id: UserId) -> Principal:
        """Build the principal for an already-identified user.

        Raises:
            UserNotFoundError: If the user no longer exists
        """
        user = await self._user_repository.get_by_id(user_id)
        if user is None:
            raise UserNotFoundError(f"User {user_id} not found")
        return await self._principal_for(user)

    async def _principal_for(self, user: User) -> Principal:
        roles = await self._role_repository.get_many(user.role_ids)
        self._probe.principal_resolved(user.id.value, len(roles))
        return Principal(
            username=user.username,
            roles=tuple(roles),
            user_id=user.id.value,
        )

    async def _record_failure(self, user: User, now: datetime) -> None:
        was_locked = user.account_locked
        user.record_failed_login(
            now,
            max_attempts=self._max_failed_attempts,
            lockout_duration=self._lockout_duration,
        )
        await self._user_repository.save(user)
        if user.account_locked and not was_locked:
            self._probe.account_locked(
                user.id.value, user.username, user.failed_login_attempts
            )

    def _audit_login(
        self,
        username: str,
        now: datetime,
        ip_address: str | None,
        entity_id: str | None = None,
        error: str | None = None,
    ) -> None:
        if self._audit_sink is None:
            return
        try:
            if error is None:
                entry = AuditLogEntry.success(
                    action=AuditAction.LOGIN,
                    entity_type="User",
                    entity_id=entity_id,
                    principal=username,
                    timestamp=now,
                    ip_address=ip_address,
                )
            else:
                entry = AuditLogEntry.failure(
                    action=AuditAction.LOGIN,
                    entity_type="User",
                    entity_id=entity_id,
                    principal=username,
                    timestamp=now,
                    error_message=error,
                    ip_address=ip_address,
                )
            self._audit_sink.record(entry)
        except Exception as e:
            self._probe.login_audit_failed(username, str(e))


def _failure_reason(error: AuthenticationError) -> str:
    if isinstance(error, AccountLockedError):
        return "locked"
    if isinstance(error, AccountDisabledError):
        return "disabled"
    return "invalid_credentials"
