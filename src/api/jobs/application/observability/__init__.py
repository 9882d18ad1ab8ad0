"""Domain-Oriented Observability for the Jobs application layer."""

from jobs.application.observability.job_service_probe import (
    DefaultJobServiceProbe,
    JobServiceProbe,
)

__all__ = ["DefaultJobServiceProbe", "JobServiceProbe"]
