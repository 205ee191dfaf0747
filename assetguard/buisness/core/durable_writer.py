"""
Durable Writer
Runs store writes as detached background tasks.

Handles:
- One task per save/delete, submitted after the in-memory transition is applied
- A single worker thread, so writes reach the store in submission order
- The error channel: failed writes are logged and recorded, never raised to the caller
- drain() for tests and shutdown

No retry is scheduled for a failed write. The next successful write of the
same entity, or a reconcile pass, brings the persisted copy back in line.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor, wait
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional

from assetguard.logger import get_logger

logger = get_logger("assetguard.buisness.core.durable_writer")


@dataclass(frozen=True)
class WriteFailure:
    kind: str
    entity_id: str
    action: str
    error: str
    failed_at: datetime


class DurableWriter:
    """
    Fire-and-forget write path between the engine and the persistent store.

    Args:
        app: Flask application; every write runs inside its own app context
        store: PersistentStore the writes are issued against
    """

    def __init__(self, app, store):
        self._app = app
        self._store = store
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='durable-write')
        self._pending: set = set()
        self._lock = threading.Lock()
        self._failures: List[WriteFailure] = []
        self._failure_listeners: List[Callable[[WriteFailure], None]] = []
        self._closed = False

    @property
    def failures(self) -> List[WriteFailure]:
        with self._lock:
            return list(self._failures)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def clear_failures(self) -> None:
        with self._lock:
            self._failures.clear()

    def on_failure(self, listener: Callable[[WriteFailure], None]) -> None:
        """Register a callable invoked with every WriteFailure."""
        with self._lock:
            self._failure_listeners.append(listener)

    def save(self, kind: str, record) -> Future:
        return self._submit(kind, record.id, 'save', self._store.table(kind).save, record)

    def delete(self, kind: str, entity_id: str) -> Future:
        return self._submit(kind, entity_id, 'delete', self._store.table(kind).delete, entity_id)

    def _submit(self, kind: str, entity_id: str, action: str, fn: Callable[..., Any], *args) -> Future:
        if self._closed:
            raise RuntimeError("DurableWriter has been shut down")
        future = self._executor.submit(self._run, kind, entity_id, action, fn, *args)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(self._on_done)
        logger.debug(f"Queued {action} of {kind} {entity_id}")
        return future

    def _run(self, kind: str, entity_id: str, action: str, fn: Callable[..., Any], *args) -> None:
        # Failures are recorded here, before the future resolves, so drain() never returns ahead of them
        try:
            with self._app.app_context():
                fn(*args)
        except Exception as error:
            self._record_failure(kind, entity_id, action, error)
            raise

    def _on_done(self, future: Future) -> None:
        with self._lock:
            self._pending.discard(future)

    def _record_failure(self, kind: str, entity_id: str, action: str, error: Exception) -> None:
        failure = WriteFailure(kind, entity_id, action, f"{type(error).__name__}: {error}", datetime.now(timezone.utc))
        logger.error(
            f"Durable {action} of {kind} {entity_id} failed; in-memory state kept: {failure.error}",
            exc_info=True,
        )
        with self._lock:
            self._failures.append(failure)
            listeners = list(self._failure_listeners)
        for listener in listeners:
            try:
                listener(failure)
            except Exception as e:
                logger.error(f"Write failure listener {listener!r} failed: {e}", exc_info=True)

    def drain(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for every write submitted so far.

        Returns:
            bool: True if nothing is left pending
        """
        with self._lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        self._closed = True
        self._executor.shutdown(wait=wait_for_pending)
        logger.info("Durable writer stopped")
