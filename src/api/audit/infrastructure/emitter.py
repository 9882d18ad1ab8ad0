"""Bounded, non-blocking audit emitter.

Callers hand entries to ``record()``, which only touches an in-memory queue.
A single background task drains the queue into the audit store. When the
queue is full the oldest pending entry is discarded to make room, so the most
recent activity is always kept.
"""

from __future__ import annotations

import asyncio

from audit.domain import AuditLogEntry
from audit.infrastructure.observability import (
    AuditEmitterProbe,
    DefaultAuditEmitterProbe,
)
from audit.ports import IAuditLogRepository


class AuditEmitter:
    """AuditSink backed by an asyncio queue and one worker task.

    Must be created and used from a single event loop. Entries recorded
    before start() are buffered and written once the worker runs.
    """

    def __init__(
        self,
        store: IAuditLogRepository,
        max_queue_size: int = 500,
        flush_timeout_seconds: float = 5.0,
        probe: AuditEmitterProbe | None = None,
    ) -> None:
        """Initialize the emitter.

        Args:
            store: Repository the worker writes entries to
            max_queue_size: Pending entries kept before the oldest is dropped
            flush_timeout_seconds: How long stop() waits for the queue to drain
            probe: Optional domain probe for observability
        """
        if max_queue_size < 1:
            raise ValueError("max_queue_size must be at least 1")
        self._store = store
        self._max_queue_size = max_queue_size
        self._flush_timeout = flush_timeout_seconds
        self._probe = probe or DefaultAuditEmitterProbe()
        self._queue: asyncio.Queue[AuditLogEntry] = asyncio.Queue(
            maxsize=max_queue_size
        )
        self._task: asyncio.Task | None = None
        self._dropped = 0

    @property
    def dropped_count(self) -> int:
        """Entries discarded because the queue was full."""
        return self._dropped

    @property
    def pending_count(self) -> int:
        """Entries waiting to be written."""
        return self._queue.qsize()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def record(self, entry: AuditLogEntry) -> None:
        """Queue an entry without waiting.

        Never blocks and never raises. On overflow the oldest pending entry
        is dropped and the drop is logged.
        """
        if self._queue.full():
            oldest = self._queue.get_nowait()
            self._queue.task_done()
            self._dropped += 1
            self._probe.entry_dropped(
                entry_id=oldest.id.value,
                action=oldest.action.value,
                dropped_total=self._dropped,
            )
        self._queue.put_nowait(entry)

    async def start(self) -> None:
        """Start the background worker. Calling it twice is a no-op."""
        if self.is_running:
            return
        self._task = asyncio.create_task(self._run(), name="audit-emitter")
        self._probe.emitter_started(max_queue_size=self._max_queue_size)

    async def stop(self) -> None:
        """Flush pending entries (best effort, bounded by the timeout) then stop.

        Entries still pending after the timeout are abandoned.
        """
        if self._task is None:
            return

        try:
            await asyncio.wait_for(self._queue.join(), timeout=self._flush_timeout)
        except TimeoutError:
            self._probe.flush_timed_out(pending=self._queue.qsize())

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass

        self._task = None
        self._probe.emitter_stopped(dropped_total=self._dropped)

    async def _run(self) -> None:
        """Drain the queue into the store until cancelled."""
        while True:
            entry = await self._queue.get()
            try:
                await self._store.append(entry)
                self._probe.entry_stored(
                    entry_id=entry.id.value, action=entry.action.value
                )
            except Exception as e:
                # A store failure must not kill the worker; the entry is lost.
                self._probe.store_failed(
                    entry_id=entry.id.value,
                    action=entry.action.value,
                    error=str(e),
                )
            finally:
                self._queue.task_done()
