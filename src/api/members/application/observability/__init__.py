"""Domain-Oriented Observability for the Members application layer."""

from members.application.observability.pipeline_probe import (
    DefaultMemberPipelineProbe,
    MemberPipelineProbe,
)
from members.application.observability.uniqueness_probe import (
    DefaultUniquenessProbe,
    UniquenessProbe,
)

__all__ = [
    "DefaultMemberPipelineProbe",
    "DefaultUniquenessProbe",
    "MemberPipelineProbe",
    "UniquenessProbe",
]
