# Rev 0.1.1

"""Write-through persistence for the entity store.

The store hands a complete snapshot to a persister after every mutation.
`BackgroundPersister` forwards those snapshots to a snapshot repository on a
single worker thread, so writes land in submission order and the caller
never waits on disk. Failures are logged and reported through `on_error`;
the in-memory state stays authoritative.
"""
from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from threading import Lock
from typing import Callable, Optional, Protocol

from worklog.models.entities import Snapshot
from worklog.utils.logging_setup import get_logger

log = get_logger(__name__)


class Persister(Protocol):
    def save(self, snapshot: Snapshot) -> None: ...


class SnapshotRepository(Protocol):
    def load_snapshot(self) -> Snapshot: ...

    def save_snapshot(self, snapshot: Snapshot) -> None: ...


class NullPersister:
    """Keeps everything in memory."""

    def save(self, snapshot: Snapshot) -> None:
        pass


class BackgroundPersister:
    def __init__(
        self,
        repo: SnapshotRepository,
        *,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self._repo = repo
        self._on_error = on_error
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="worklog-persist")
        self._lock = Lock()
        self._last: Optional[Future] = None
        self.last_error: Optional[BaseException] = None

    def save(self, snapshot: Snapshot) -> None:
        fut = self._executor.submit(self._write, snapshot)
        with self._lock:
            self._last = fut

    def flush(self, timeout: Optional[float] = None) -> None:
        """Block until every snapshot submitted so far has been handled."""
        with self._lock:
            fut = self._last
        if fut is not None:
            fut.result(timeout=timeout)

    def close(self) -> None:
        self._executor.shutdown(wait=True)

    def _write(self, snapshot: Snapshot) -> None:
        try:
            self._repo.save_snapshot(snapshot)
        except Exception as err:
            self.last_error = err
            log.exception("Failed to persist snapshot: %s", err)
            if self._on_error is not None:
                try:
                    self._on_error(err)
                except Exception:
                    log.exception("Persist error callback failed")
