"""Domain-Oriented Observability for the Members infrastructure layer."""

from members.infrastructure.observability.repository_probe import (
    DefaultMemberRepositoryProbe,
    MemberRepositoryProbe,
)

__all__ = ["DefaultMemberRepositoryProbe", "MemberRepositoryProbe"]
