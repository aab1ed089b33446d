# Rev 0.1.1
from __future__ import annotations
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal

from worklog.models.entities import TimeEntry
from worklog.repositories.entity_store import EntityStore
from worklog.services.durations import get_elapsed_ms

DisplaySink = Callable[[TimeEntry, int], None]


class DisplayTicker(QObject):
    """Periodically re-reads the running entry for display. Read-only.

    Only one loop exists per ticker; start() replaces any previous sink.
    """

    ticked = Signal(object, int)  # entry, elapsed_ms

    def __init__(self, store: EntityStore, interval_ms: int = 250, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._store = store
        self._sink: Optional[DisplaySink] = None
        self._timer = QTimer(self)
        self._timer.setInterval(interval_ms)
        self._timer.timeout.connect(self.tick)

    def start(self, sink: Optional[DisplaySink] = None) -> None:
        self.stop()
        self._sink = sink
        self._timer.start()

    def stop(self) -> None:
        if self._timer.isActive():
            self._timer.stop()
        self._sink = None

    def is_active(self) -> bool:
        return self._timer.isActive()

    def interval(self) -> int:
        return self._timer.interval()

    def tick(self) -> None:
        entry = self._store.running_entry()
        if entry is None:
            return
        elapsed = get_elapsed_ms(entry, self._store.now())
        self.ticked.emit(entry, elapsed)
        if self._sink is not None:
            self._sink(entry, elapsed)
