"""Ports for the Jobs bounded context."""

from jobs.ports.members import MemberItemError, MemberOperations
from jobs.ports.repositories import IJobRepository

__all__ = ["IJobRepository", "MemberItemError", "MemberOperations"]
