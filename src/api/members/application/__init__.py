"""Application layer for the Members bounded context."""

from members.application.assembler import EntityAssembler
from members.application.pipeline import (
    MEMBER_ENTITY_TYPE,
    IllegalTransitionError,
    MemberRequestPipeline,
    parse_sort,
)
from members.application.requests import (
    DEFAULT_PAGE_SIZE,
    DEFAULT_SORT,
    MAX_PAGE_SIZE,
    MemberPage,
    MemberRequest,
)
from members.application.uniqueness import UniquenessChecker

__all__ = [
    "DEFAULT_PAGE_SIZE",
    "DEFAULT_SORT",
    "EntityAssembler",
    "IllegalTransitionError",
    "MAX_PAGE_SIZE",
    "MEMBER_ENTITY_TYPE",
    "MemberPage",
    "MemberRequest",
    "MemberRequestPipeline",
    "UniquenessChecker",
    "parse_sort",
]
