"""Domain aggregates for IAM context.

Aggregates are the core business objects containing state and business logic.
They enforce invariants and business rules without depending on infrastructure.
"""

from iam.domain.aggregates.role import Role
from iam.domain.aggregates.user import LOCKOUT_DURATION, MAX_FAILED_LOGIN_ATTEMPTS, User

__all__ = [
    "LOCKOUT_DURATION",
    "MAX_FAILED_LOGIN_ATTEMPTS",
    "Role",
    "User",
]
