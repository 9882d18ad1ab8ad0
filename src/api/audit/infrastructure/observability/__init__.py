"""Domain probes for audit infrastructure."""

from audit.infrastructure.observability.emitter_probe import (
    AuditEmitterProbe,
    DefaultAuditEmitterProbe,
)
from audit.infrastructure.observability.repository_probe import (
    AuditLogRepositoryProbe,
    DefaultAuditLogRepositoryProbe,
)

__all__ = [
    "AuditEmitterProbe",
    "AuditLogRepositoryProbe",
    "DefaultAuditEmitterProbe",
    "DefaultAuditLogRepositoryProbe",
]
