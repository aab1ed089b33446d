# Rev 0.1.0
"""Manual entry creation and editing.

Everything is checked before anything reaches the store. An entry whose end
is not after its start raises InvalidIntervalError. A work entry without a
task, clearing the end of a stopped entry, or setting the end of a running
one raises InvalidEntryError.
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Optional, Tuple

from worklog.errors import InvalidEntryError, InvalidIntervalError
from worklog.models.entities import TimeEntry, resolve_break_type
from worklog.repositories.entity_store import EntityStore
from worklog.utils.logging_setup import get_logger

log = get_logger(__name__)

_UNSET = object()


def local_ms(date_str: str, hhmm: str) -> int:
    """Epoch ms for a local wall-clock time on a day, e.g. ("2024-06-01", "09:30")."""
    hh, mm = hhmm.split(":", 1)
    dt = datetime.combine(date.fromisoformat(date_str), datetime.min.time()).replace(
        hour=int(hh), minute=int(mm)
    )
    return int(dt.timestamp() * 1000)


def interval_from_local(date_str: str, start_hhmm: str, end_hhmm: str) -> Tuple[int, int]:
    start, end = local_ms(date_str, start_hhmm), local_ms(date_str, end_hhmm)
    check_interval(start, end)
    return start, end


def check_interval(start_time: int, end_time: Optional[int]) -> None:
    if end_time is not None and end_time <= start_time:
        raise InvalidIntervalError(start_time, end_time)


class EntryService:
    def __init__(self, store: EntityStore):
        self._store = store

    def add_manual_entry(
        self,
        *,
        start_time: int,
        end_time: int,
        task_id: Optional[str] = None,
        is_break: bool = False,
        break_type_id: Optional[str] = None,
    ) -> TimeEntry:
        check_interval(start_time, end_time)
        if not is_break and task_id is None:
            raise InvalidEntryError("A work entry needs a task")
        entry = self._store.make_entry(
            task_id=None if is_break else task_id,
            start_time=start_time,
            end_time=end_time,
        )
        if is_break:
            entry.apply_break_type(resolve_break_type(break_type_id))
        log.debug("Manual entry %s added (%s..%s)", entry.id, start_time, end_time)
        return self._store.insert_entry(entry)

    def update_entry(
        self,
        entry_id: str,
        *,
        start_time=_UNSET,
        end_time=_UNSET,
        task_id=_UNSET,
        is_break=_UNSET,
        break_type_id: Optional[str] = None,
    ) -> Optional[TimeEntry]:
        entry = self._store.get_entry(entry_id)
        if entry is None:
            return None

        new_start = entry.start_time if start_time is _UNSET else start_time
        new_end = entry.end_time if end_time is _UNSET else end_time
        if entry.is_running:
            if end_time is not _UNSET:
                raise InvalidEntryError("Stop the running entry instead of setting its end time")
        elif new_end is None:
            raise InvalidEntryError("A stopped entry keeps its end time")
        check_interval(new_start, new_end)

        # a task on a break turns it back into work
        if is_break is _UNSET:
            new_is_break = entry.is_break and (task_id is _UNSET or task_id is None)
        else:
            new_is_break = bool(is_break)
        new_task = entry.task_id if task_id is _UNSET else task_id
        if not new_is_break and new_task is None:
            raise InvalidEntryError("A work entry needs a task")

        entry.start_time = new_start
        entry.end_time = new_end
        if new_is_break:
            if is_break is not _UNSET:
                entry.apply_break_type(resolve_break_type(break_type_id))
        else:
            entry.clear_break_type()
            entry.task_id = new_task
        self._store.commit()
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        return self._store.delete_entry(entry_id)
