"""Infrastructure layer for the Members bounded context."""

from members.infrastructure.models import MemberModel
from members.infrastructure.repository import MemberRepository

__all__ = ["MemberModel", "MemberRepository"]
