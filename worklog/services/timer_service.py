# Rev 0.2.1

"""Timer engine (Rev 0.2.1)
Start/pause/resume/stop for work timers and breaks.

At most one entry runs at a time: starting anything stops the running entry
first, folding an open pause into `total_paused_ms`, all within the same
call. Operations on unknown or already-stopped entries are no-ops.
"""
from __future__ import annotations
from typing import Optional

from worklog.models.entities import TimeEntry, resolve_break_type
from worklog.repositories.entity_store import EntityStore
from worklog.utils.logging_setup import get_logger

log = get_logger(__name__)


class TimerService:
    def __init__(self, store: EntityStore):
        self._store = store

    # ---- queries
    def get_active_entry(self) -> Optional[TimeEntry]:
        return self._store.running_entry()

    # ---- commands
    def start_timer(self, task_id: str) -> TimeEntry:
        now = self._store.now()
        self._stop_running(now)
        entry = self._store.make_entry(
            task_id=task_id,
            start_time=now,
            end_time=None,
            paused_at=None,
            total_paused_ms=0,
            is_running=True,
            is_paused=False,
        )
        log.debug("Timer started %s for task %s", entry.id, task_id)
        return self._store.insert_entry(entry)

    def start_break(self, break_type_id: Optional[str]) -> TimeEntry:
        now = self._store.now()
        self._stop_running(now)
        entry = self._store.make_entry(
            task_id=None,
            start_time=now,
            is_running=True,
        )
        entry.apply_break_type(resolve_break_type(break_type_id))
        log.debug("Break started %s (%s)", entry.id, entry.break_type_id)
        return self._store.insert_entry(entry)

    def pause_timer(self, entry_id: str) -> Optional[TimeEntry]:
        entry = self._store.get_entry(entry_id)
        if entry and entry.is_running and not entry.is_paused:
            entry.is_paused = True
            entry.paused_at = self._store.now()
            self._store.commit()
        return entry

    def resume_timer(self, entry_id: str) -> Optional[TimeEntry]:
        entry = self._store.get_entry(entry_id)
        if entry and entry.is_running and entry.is_paused:
            self._fold_pause(entry, self._store.now())
            self._store.commit()
        return entry

    def stop_timer(self, entry_id: str) -> Optional[TimeEntry]:
        entry = self._store.get_entry(entry_id)
        if entry and entry.is_running:
            self._stop(entry, self._store.now())
            self._store.commit()
        return entry

    # ---- internals
    def _stop_running(self, now: int) -> None:
        # the scan covers entries the cached id missed
        for entry in list(self._store.iter_running()):
            self._stop(entry, now)
            log.debug("Implicitly stopped %s", entry.id)

    @staticmethod
    def _fold_pause(entry: TimeEntry, now: int) -> None:
        if entry.is_paused and entry.paused_at is not None:
            entry.total_paused_ms += max(0, now - entry.paused_at)
        entry.is_paused = False
        entry.paused_at = None

    @classmethod
    def _stop(cls, entry: TimeEntry, now: int) -> None:
        cls._fold_pause(entry, now)
        entry.is_running = False
        entry.end_time = now
