"""Exceptions for the Members bounded context.

Every failure of a member request derives from PipelineError and carries the
terminal state the request ended in. The presentation layer maps these to
HTTP status codes; the pipeline records them on the audit entry.
"""

from __future__ import annotations

from members.domain import PipelineState


class PipelineError(Exception):
    """Base class for member request failures."""

    state: PipelineState = PipelineState.PERSIST_FAILED


class ValidationError(PipelineError):
    """Raised when one or more fields fail validation.

    Attributes:
        errors: Mapping of field name to the full message for that field.
            Every failing field is present, not just the first.
    """

    state = PipelineState.VALIDATION_FAILED

    def __init__(self, errors: dict[str, str]) -> None:
        self.errors = dict(errors)
        super().__init__("; ".join(self.errors.values()))


class ConflictError(PipelineError):
    """Raised when a unique field value is already used by another member.

    Raised both by the pre-check and when the store's unique constraint
    rejects a write that raced past it.
    """

    state = PipelineState.CONFLICT

    def __init__(self, field: str, value: str) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field} already registered")


class DuplicateMemberEmailError(ConflictError):
    """Raised by the store when the email unique constraint is violated."""

    def __init__(self, email: str) -> None:
        super().__init__("email", email)


class AuthorizationError(PipelineError):
    """Raised when the principal lacks the required permission.

    The message is deliberately only "forbidden"; the required permission
    is kept on the exception for logging, never shown to the caller.
    """

    state = PipelineState.FORBIDDEN

    def __init__(self, required_permission: str) -> None:
        self.required_permission = required_permission
        super().__init__("forbidden")


class MemberNotFoundError(PipelineError):
    """Raised when the target member does not exist."""

    state = PipelineState.NOT_FOUND

    def __init__(self, member_id: str) -> None:
        self.member_id = member_id
        super().__init__(f"Member {member_id} not found")


class DependencyUnavailableError(PipelineError):
    """Raised when the member store cannot be reached.

    Transient; the pipeline does not retry, the caller may.
    """

    state = PipelineState.DEPENDENCY_UNAVAILABLE


class PersistFailedError(PipelineError):
    """Raised when the store rejects a write for a non-transient reason."""

    state = PipelineState.PERSIST_FAILED
