"""States of a single member request as it moves through the pipeline."""

from __future__ import annotations

from enum import StrEnum


class PipelineState(StrEnum):
    RECEIVED = "RECEIVED"
    VALIDATING = "VALIDATING"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    UNIQUENESS_CHECKING = "UNIQUENESS_CHECKING"
    CONFLICT = "CONFLICT"
    DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"
    AUTHORIZING = "AUTHORIZING"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    ASSEMBLING = "ASSEMBLING"
    PERSISTING = "PERSISTING"
    PERSIST_FAILED = "PERSIST_FAILED"
    COMPLETED = "COMPLETED"

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATES


TERMINAL_STATES: frozenset[PipelineState] = frozenset(
    {
        PipelineState.VALIDATION_FAILED,
        PipelineState.CONFLICT,
        PipelineState.DEPENDENCY_UNAVAILABLE,
        PipelineState.FORBIDDEN,
        PipelineState.NOT_FOUND,
        PipelineState.PERSIST_FAILED,
        PipelineState.COMPLETED,
    }
)

# Delete skips validation and goes RECEIVED -> AUTHORIZING -> PERSISTING.
# Update resolves the target after authorization, hence AUTHORIZING -> NOT_FOUND.
ALLOWED_TRANSITIONS: dict[PipelineState, frozenset[PipelineState]] = {
    PipelineState.RECEIVED: frozenset(
        {PipelineState.VALIDATING, PipelineState.AUTHORIZING}
    ),
    PipelineState.VALIDATING: frozenset(
        {PipelineState.VALIDATION_FAILED, PipelineState.UNIQUENESS_CHECKING}
    ),
    PipelineState.UNIQUENESS_CHECKING: frozenset(
        {
            PipelineState.CONFLICT,
            PipelineState.DEPENDENCY_UNAVAILABLE,
            PipelineState.AUTHORIZING,
        }
    ),
    PipelineState.AUTHORIZING: frozenset(
        {
            PipelineState.FORBIDDEN,
            PipelineState.NOT_FOUND,
            PipelineState.DEPENDENCY_UNAVAILABLE,
            PipelineState.ASSEMBLING,
            PipelineState.PERSISTING,
        }
    ),
    PipelineState.ASSEMBLING: frozenset({PipelineState.PERSISTING}),
    PipelineState.PERSISTING: frozenset(
        {
            PipelineState.CONFLICT,
            PipelineState.NOT_FOUND,
            PipelineState.PERSIST_FAILED,
            PipelineState.DEPENDENCY_UNAVAILABLE,
            PipelineState.COMPLETED,
        }
    ),
}
