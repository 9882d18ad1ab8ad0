"""Ports for the Members bounded context."""

from members.ports.exceptions import (
    AuthorizationError,
    ConflictError,
    DependencyUnavailableError,
    DuplicateMemberEmailError,
    MemberNotFoundError,
    PersistFailedError,
    PipelineError,
    ValidationError,
)
from members.ports.repositories import IMemberRepository, MemberQuery

__all__ = [
    "AuthorizationError",
    "ConflictError",
    "DependencyUnavailableError",
    "DuplicateMemberEmailError",
    "IMemberRepository",
    "MemberNotFoundError",
    "MemberQuery",
    "PersistFailedError",
    "PipelineError",
    "ValidationError",
]
