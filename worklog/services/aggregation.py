# Rev 0.1.2
"""Per-day and per-project views over the entry set.

Days are local calendar days. An entry belongs to the day its start_time
falls on, even when it runs past midnight; entries are never split across
days.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Tuple

from worklog.models.entities import Project, TimeEntry
from worklog.services.durations import get_elapsed_ms, sum_elapsed_ms

DEFAULT_TARGET_HOURS = 8.5
HOUR_MS = 3_600_000


def day_bounds_ms(date_str: str) -> Tuple[int, int]:
    """[local 00:00:00.000, local 23:59:59.999] of YYYY-MM-DD, in epoch ms."""
    day = date.fromisoformat(date_str)
    start = datetime.combine(day, time.min)
    end = datetime.combine(day, time(23, 59, 59, 999000))
    return int(start.timestamp() * 1000), int(end.timestamp() * 1000)


def entries_for_date(store, date_str: str) -> List[TimeEntry]:
    day_start, day_end = day_bounds_ms(date_str)
    return [e for e in store.get_all_entries() if day_start <= e.start_time <= day_end]


def breaks_for_date(store, date_str: str) -> List[TimeEntry]:
    return [e for e in entries_for_date(store, date_str) if e.is_break]


@dataclass
class DailySummary:
    date: str
    work_entries: List[TimeEntry] = field(default_factory=list)
    break_entries: List[TimeEntry] = field(default_factory=list)
    work_ms: int = 0
    break_ms: int = 0
    target_ms: int = 0
    remaining_ms: int = 0
    percent: int = 0

    @property
    def total_ms(self) -> int:
        return self.work_ms + self.break_ms

    @property
    def target_reached(self) -> bool:
        return self.percent >= 100


def daily_summary(store, date_str: str, now: int, target_hours: float = DEFAULT_TARGET_HOURS) -> DailySummary:
    entries = sorted(entries_for_date(store, date_str), key=lambda e: e.start_time)
    work = [e for e in entries if not e.is_break]
    breaks = [e for e in entries if e.is_break]
    work_ms = sum_elapsed_ms(work, now)
    break_ms = sum_elapsed_ms(breaks, now)

    if not target_hours or target_hours <= 0:
        target_hours = DEFAULT_TARGET_HOURS
    target_ms = int(target_hours * HOUR_MS)
    percent = min(max(round(work_ms / target_ms * 100), 0), 100)

    return DailySummary(
        date=date_str,
        work_entries=work,
        break_entries=breaks,
        work_ms=work_ms,
        break_ms=break_ms,
        target_ms=target_ms,
        remaining_ms=max(0, target_ms - work_ms),
        percent=percent,
    )


@dataclass
class WorkloadItem:
    project: Project
    total_ms: int = 0


def workload_for_date(store, date_str: str, now: int) -> List[WorkloadItem]:
    """Work time per project for the day; entries whose task or project is
    gone are skipped."""
    by_project: Dict[str, WorkloadItem] = {}
    for entry in entries_for_date(store, date_str):
        if entry.is_break:
            continue
        task = store.get_task(entry.task_id)
        if task is None:
            continue
        project = store.get_project(task.project_id)
        if project is None:
            continue
        item = by_project.setdefault(project.id, WorkloadItem(project=project))
        item.total_ms += get_elapsed_ms(entry, now)
    return list(by_project.values())
