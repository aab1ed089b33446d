# Rev 0.1.1
"""Elapsed-time math for time entries and task rollups."""
from __future__ import annotations
from typing import Iterable, Optional

from worklog.models.entities import TimeEntry


def get_elapsed_ms(entry: Optional[TimeEntry], now: int) -> int:
    """Worked milliseconds for a live or finished entry, net of pauses.

    A running entry is measured up to `now`; a paused one also counts the
    current pause as paused time. Never negative.
    """
    if entry is None:
        return 0
    end = entry.end_time if entry.end_time is not None else now
    paused = entry.total_paused_ms or 0
    if entry.is_paused and entry.paused_at is not None:
        paused += now - entry.paused_at
    return max(0, end - entry.start_time - paused)


def sum_elapsed_ms(entries: Iterable[TimeEntry], now: int) -> int:
    return sum(get_elapsed_ms(e, now) for e in entries)


def task_total_ms(store, task_id: str, now: int) -> int:
    return sum_elapsed_ms(store.get_time_entries(task_id), now)


def parent_total_ms(store, task_id: str, now: int) -> int:
    """Rollup for a parent task: its direct children's entries only."""
    return sum(task_total_ms(store, child.id, now) for child in store.get_children(task_id))


def format_time(ms: int) -> str:
    """HH:MM:SS"""
    total_sec = max(0, int(ms)) // 1000
    h, rem = divmod(total_sec, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"


def format_duration(ms: int) -> str:
    """Short form like "2h 14m"."""
    total_min = max(0, int(ms)) // 60000
    if total_min < 1:
        return "< 1m"
    h, m = divmod(total_min, 60)
    if h == 0:
        return f"{m}m"
    if m == 0:
        return f"{h}h"
    return f"{h}h {m}m"
