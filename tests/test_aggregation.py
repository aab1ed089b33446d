# tests/test_aggregation.py
from __future__ import annotations

from datetime import datetime

import pytest

from worklog.services.aggregation import (
    breaks_for_date,
    daily_summary,
    day_bounds_ms,
    entries_for_date,
    workload_for_date,
)
from worklog.services.entry_service import EntryService

HOUR = 3_600_000
MIN = 60_000


def local(y, m, d, hh=0, mm=0, ss=0, ms=0) -> int:
    return int(datetime(y, m, d, hh, mm, ss, ms * 1000).timestamp() * 1000)


@pytest.fixture()
def entries(store) -> EntryService:
    return EntryService(store)


def test_day_bounds_are_local_midnight_to_last_ms():
    start, end = day_bounds_ms("2024-06-01")
    assert start == local(2024, 6, 1)
    assert end == local(2024, 6, 1, 23, 59, 59, 999)


def test_entries_for_date_inclusive_bounds(store, entries, project):
    task = store.add_task(project.id, "A")
    inside_first = entries.add_manual_entry(task_id=task.id, start_time=local(2024, 6, 1), end_time=local(2024, 6, 1, 1))
    inside_last = entries.add_manual_entry(
        task_id=task.id, start_time=local(2024, 6, 1, 23, 59, 59, 999), end_time=local(2024, 6, 2, 0, 30)
    )
    entries.add_manual_entry(
        task_id=task.id, start_time=local(2024, 5, 31, 23, 59, 59, 999), end_time=local(2024, 6, 1, 0, 10)
    )
    entries.add_manual_entry(task_id=task.id, start_time=local(2024, 6, 2), end_time=local(2024, 6, 2, 1))

    got = {e.id for e in entries_for_date(store, "2024-06-01")}
    assert got == {inside_first.id, inside_last.id}


def test_cross_midnight_entry_counts_wholly_on_start_day(store, entries, project):
    task = store.add_task(project.id, "Late")
    entries.add_manual_entry(task_id=task.id, start_time=local(2024, 6, 1, 23), end_time=local(2024, 6, 2, 1))

    day1 = daily_summary(store, "2024-06-01", now=0)
    day2 = daily_summary(store, "2024-06-02", now=0)
    assert day1.work_ms == 2 * HOUR
    assert day2.work_ms == 0


def test_daily_summary_splits_work_and_breaks(store, entries, project):
    task = store.add_task(project.id, "A")
    entries.add_manual_entry(task_id=task.id, start_time=local(2024, 6, 1, 9), end_time=local(2024, 6, 1, 12))
    entries.add_manual_entry(
        is_break=True, break_type_id="lunch", start_time=local(2024, 6, 1, 12), end_time=local(2024, 6, 1, 12, 45)
    )
    entries.add_manual_entry(task_id=task.id, start_time=local(2024, 6, 1, 12, 45), end_time=local(2024, 6, 1, 14))

    s = daily_summary(store, "2024-06-01", now=0, target_hours=8.5)
    assert s.work_ms == 3 * HOUR + 75 * MIN
    assert s.break_ms == 45 * MIN
    assert s.total_ms == s.work_ms + s.break_ms
    assert s.target_ms == int(8.5 * HOUR)
    assert s.remaining_ms == int(8.5 * HOUR) - s.work_ms
    assert s.percent == round(s.work_ms / s.target_ms * 100)
    assert [e.is_break for e in s.break_entries] == [True]
    assert len(breaks_for_date(store, "2024-06-01")) == 1


def test_daily_percent_clamped_at_100(store, entries, project):
    task = store.add_task(project.id, "Crunch")
    entries.add_manual_entry(task_id=task.id, start_time=local(2024, 6, 1, 6), end_time=local(2024, 6, 1, 20))
    s = daily_summary(store, "2024-06-01", now=0, target_hours=8)
    assert s.percent == 100
    assert s.remaining_ms == 0
    assert s.target_reached


def test_daily_summary_includes_live_entry(store, timer, clock, project):
    task = store.add_task(project.id, "Live")
    clock.set(local(2024, 6, 1, 10))
    timer.start_timer(task.id)
    clock.advance(30 * MIN)
    s = daily_summary(store, "2024-06-01", now=clock.now_ms())
    assert s.work_ms == 30 * MIN


def test_workload_groups_by_project(store, entries, project):
    other = store.add_project("Internal", "#22c55e")
    a = store.add_task(project.id, "A")
    b = store.add_task(other.id, "B")
    entries.add_manual_entry(task_id=a.id, start_time=local(2024, 6, 1, 9), end_time=local(2024, 6, 1, 10))
    entries.add_manual_entry(task_id=a.id, start_time=local(2024, 6, 1, 11), end_time=local(2024, 6, 1, 11, 30))
    entries.add_manual_entry(task_id=b.id, start_time=local(2024, 6, 1, 13), end_time=local(2024, 6, 1, 15))
    entries.add_manual_entry(is_break=True, start_time=local(2024, 6, 1, 10), end_time=local(2024, 6, 1, 11))

    items = workload_for_date(store, "2024-06-01", now=0)
    totals = {it.project.id: it.total_ms for it in items}
    assert totals == {project.id: 90 * MIN, other.id: 2 * HOUR}
    assert len(items) == 2


def test_workload_skips_unresolvable_tasks(store, entries, project):
    a = store.add_task(project.id, "A")
    entries.add_manual_entry(task_id=a.id, start_time=local(2024, 6, 1, 9), end_time=local(2024, 6, 1, 10))
    entries.add_manual_entry(task_id="ghost", start_time=local(2024, 6, 1, 10), end_time=local(2024, 6, 1, 11))

    items = workload_for_date(store, "2024-06-01", now=0)
    assert [(it.project.id, it.total_ms) for it in items] == [(project.id, HOUR)]
