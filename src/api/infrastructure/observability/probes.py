"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import Protocol

import structlog


class ConnectionProbe(Protocol):
    """Domain probe for database engine lifecycle events."""

    def engine_created(self, connection_string: str, pool_size: int) -> None:
        """Record that an async engine (and its pool) was created."""
        ...

    def schema_created(self, tables: list[str]) -> None:
        """Record that ORM tables were created."""
        ...

    def pool_closed(self) -> None:
        """Record that the connection pool was disposed."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog."""

    def __init__(self, logger: structlog.stdlib.BoundLogger | None = None):
        self._logger = logger or structlog.get_logger()

    def engine_created(self, connection_string: str, pool_size: int) -> None:
        self._logger.info(
            "database_engine_created",
            connection_string=connection_string,
            pool_size=pool_size,
        )

    def schema_created(self, tables: list[str]) -> None:
        self._logger.info("database_schema_created", tables=tables)

    def pool_closed(self) -> None:
        self._logger.info("database_pool_closed")
