# Rev 0.1.3
from __future__ import annotations

from typing import Optional

from PySide6.QtCore import QObject, Signal

from worklog.models.entities import TimeEntry
from worklog.repositories.entity_store import EntityStore
from worklog.services.display_ticker import DisplayTicker
from worklog.services.timer_service import TimerService
from worklog.utils.logging_setup import get_logger

log = get_logger(__name__)


class TimerViewModel(QObject):
    """
    UI-facing timer commands. Restarts the display tick whenever something is
    running and stops it on an explicit stop.
    """

    entriesChanged = Signal()
    ticked = Signal(object, int)  # entry, elapsed_ms

    def __init__(self, store: EntityStore, *, tick_interval_ms: int = 250, parent: Optional[QObject] = None):
        super().__init__(parent)
        self._store = store
        self._timer = TimerService(store)
        self._ticker = DisplayTicker(store, tick_interval_ms, parent=self)
        self._ticker.ticked.connect(self.ticked)

    @property
    def ticker(self) -> DisplayTicker:
        return self._ticker

    def active_entry(self) -> Optional[TimeEntry]:
        return self._timer.get_active_entry()

    # ---- commands
    def start_timer(self, task_id: str) -> Optional[TimeEntry]:
        if self._store.get_task(task_id) is None:
            return None
        if self._store.is_parent(task_id):
            # parents only roll up their subtasks
            log.info("Refusing to time parent task %s", task_id)
            return None
        entry = self._timer.start_timer(task_id)
        self._refresh()
        return entry

    def start_break(self, break_type_id: Optional[str]) -> TimeEntry:
        entry = self._timer.start_break(break_type_id)
        self._refresh()
        return entry

    def pause(self, entry_id: str) -> Optional[TimeEntry]:
        entry = self._timer.pause_timer(entry_id)
        self._refresh()
        return entry

    def resume(self, entry_id: str) -> Optional[TimeEntry]:
        entry = self._timer.resume_timer(entry_id)
        self._refresh()
        return entry

    def stop(self, entry_id: str) -> Optional[TimeEntry]:
        entry = self._timer.stop_timer(entry_id)
        self._ticker.stop()
        self.entriesChanged.emit()
        return entry

    def shutdown(self) -> None:
        self._ticker.stop()

    # ---- internals
    def _refresh(self) -> None:
        if self._timer.get_active_entry() is not None:
            self._ticker.start()
        self.entriesChanged.emit()
