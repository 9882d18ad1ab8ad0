"""Domain exceptions for IAM bounded context.

These exceptions represent domain-level errors that can occur during
authentication and repository operations. They should be caught and handled
by the application or presentation layer.
"""

from __future__ import annotations

from datetime import datetime


class AuthenticationError(Exception):
    """Base class for login failures.

    Messages are safe to show to the caller: they never reveal whether the
    username exists.
    """

    pass


class InvalidCredentialsError(AuthenticationError):
    """Raised when the username is unknown or the password does not match."""

    def __init__(self) -> None:
        super().__init__("Invalid username or password")


class AccountLockedError(AuthenticationError):
    """Raised when a locked account attempts to log in.

    The lock is checked before the password, so a correct password does not
    bypass it. locked_until tells the caller when to retry.
    """

    def __init__(self, locked_until: datetime | None) -> None:
        self.locked_until = locked_until
        super().__init__("Account is locked due to too many failed login attempts")


class AccountDisabledError(AuthenticationError):
    """Raised when a disabled account attempts to log in."""

    def __init__(self) -> None:
        super().__init__("Account is disabled")


class DuplicateUsernameError(Exception):
    """Raised when attempting to register a username that already exists.

    Usernames are compared after normalization (trimmed, lowercased).
    """

    pass


class DuplicateUserEmailError(Exception):
    """Raised when attempting to register an email already used by another user."""

    pass


class UserValidationError(Exception):
    """Raised when account fields fail validation.

    Attributes:
        errors: Mapping of field name to the full validation message
    """

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = errors
        super().__init__("; ".join(errors.values()))


class UserRegistrationError(UserValidationError):
    """Raised when a registration request fails field validation."""

    pass


class PermissionDeniedError(Exception):
    """Raised when a principal lacks the permission an IAM operation needs.

    The message never names the missing permission.
    """

    pass


class RoleNotFoundError(Exception):
    """Raised when a role name or id does not resolve to a role."""

    pass


class UserNotFoundError(Exception):
    """Raised when a principal cannot be resolved because the user is gone."""

    pass


class UserStoreUnavailableError(Exception):
    """Raised when the user or role store cannot be reached."""

    pass


class DuplicateRoleNameError(Exception):
    """Raised when a role name is already used by another role."""

    pass


class InvalidRoleError(Exception):
    """Raised when a role definition is rejected.

    Covers a blank or over-long name and permission tokens this release does
    not know. Stored roles may still carry unknown tokens; only new writes
    through the role service are checked.
    """

    pass


class ProtectedRoleError(Exception):
    """Raised when deleting a role the service depends on (ADMIN, USER)."""

    pass


class AccountPolicyError(Exception):
    """Raised when an administrative change would break an account rule.

    Examples: an administrator disabling or deleting their own account, or
    removing the last ADMIN holder.
    """

    pass


class PasswordChangeError(Exception):
    """Raised when a password change is rejected.

    The message is safe to show to the caller.
    """

    pass
