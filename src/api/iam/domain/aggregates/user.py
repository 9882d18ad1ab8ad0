"""User aggregate for IAM context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from iam.domain.value_objects import RoleId, UserId

MAX_FAILED_LOGIN_ATTEMPTS = 5
LOCKOUT_DURATION = timedelta(minutes=30)


@dataclass
class User:
    """User aggregate representing a principal that can log in.

    Distinct from a directory Member: a Member is a registry entry, a User is
    someone who authenticates and holds roles.

    Business rules:
    - Reaching the failed-login threshold locks the account for a fixed window
    - An expired lock is released on the next access (no background sweep)
    - A successful login resets the failure counter and clears any lock

    Roles are referenced by RoleId only and resolved through the role
    repository.
    """

    id: UserId
    username: str
    email: str
    password_hash: str
    role_ids: list[RoleId] = field(default_factory=list)
    enabled: bool = True
    account_locked: bool = False
    failed_login_attempts: int = 0
    lockout_end_time: datetime | None = None
    last_login_date: datetime | None = None

    def __str__(self) -> str:
        """Return string representation."""
        return f"User({self.username})"

    def __eq__(self, other: object) -> bool:
        """Users are equal if they have the same ID (identity-based equality)."""
        if not isinstance(other, User):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on ID for use in sets and dicts."""
        return hash(self.id)

    def is_locked(self, now: datetime) -> bool:
        """Check whether the account is locked at the given instant.

        A lock whose end time has passed no longer counts, even before
        release_expired_lock() has been called.
        """
        if not self.account_locked:
            return False
        if self.lockout_end_time is not None and now > self.lockout_end_time:
            return False
        return True

    def release_expired_lock(self, now: datetime) -> bool:
        """Clear an expired lock.

        Returns:
            True if a lock was released, False if nothing changed
        """
        if not self.account_locked or self.is_locked(now):
            return False
        self.account_locked = False
        self.lockout_end_time = None
        self.failed_login_attempts = 0
        return True

    def record_failed_login(
        self,
        now: datetime,
        max_attempts: int = MAX_FAILED_LOGIN_ATTEMPTS,
        lockout_duration: timedelta = LOCKOUT_DURATION,
    ) -> None:
        """Increment failed attempts and lock once the threshold is reached."""
        self.failed_login_attempts += 1
        if self.failed_login_attempts >= max_attempts:
            self.account_locked = True
            self.lockout_end_time = now + lockout_duration

    def record_successful_login(self, now: datetime) -> None:
        """Reset failure tracking and stamp the login time."""
        self.failed_login_attempts = 0
        self.account_locked = False
        self.lockout_end_time = None
        self.last_login_date = now

    def add_role(self, role_id: RoleId) -> None:
        """Grant a role by reference. Granting twice is a no-op."""
        if role_id not in self.role_ids:
            self.role_ids.append(role_id)

    def remove_role(self, role_id: RoleId) -> None:
        """Revoke a role by reference.

        Raises:
            ValueError: If the user does not hold the role
        """
        if role_id not in self.role_ids:
            raise ValueError(f"User {self.id} does not hold role {role_id}")
        self.role_ids.remove(role_id)
