"""Observation context for domain-oriented observability.

Observation contexts collect and manage contextual metadata for instrumentation,
following the Domain Oriented Observability pattern.

See: https://martinfowler.com/articles/domain-oriented-observability.html
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class ObservationContext:
    """Immutable context containing metadata for observability.

    Attributes:
        request_id: Unique identifier for the current request/operation.
        principal: Username of the caller, or "system" for background work.
        client_ip: Remote address of the caller (if known).
        extra: Additional contextual metadata.

    Example:
        context = ObservationContext(request_id="req-123", principal="alice")
        probe = DefaultMemberPipelineProbe().with_context(context)
    """

    request_id: str | None = None
    principal: str | None = None
    client_ip: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> dict[str, Any]:
        """Convert context to a dictionary for logging.

        Only includes non-None values to keep logs clean.
        """
        result: dict[str, Any] = {}
        if self.request_id is not None:
            result["request_id"] = self.request_id
        if self.principal is not None:
            result["principal"] = self.principal
        if self.client_ip is not None:
            result["client_ip"] = self.client_ip
        result.update(self.extra)
        return result
