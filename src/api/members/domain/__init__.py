"""Domain layer for the Members bounded context."""

from members.domain.member import Member
from members.domain.pipeline_state import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATES,
    PipelineState,
)
from members.domain.value_objects import (
    UNIQUE_FIELDS,
    MemberField,
    MemberId,
    SortDirection,
)

__all__ = [
    "ALLOWED_TRANSITIONS",
    "Member",
    "MemberField",
    "MemberId",
    "PipelineState",
    "SortDirection",
    "TERMINAL_STATES",
    "UNIQUE_FIELDS",
]
