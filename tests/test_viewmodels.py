# tests/test_viewmodels.py
from __future__ import annotations

from datetime import datetime

import pytest

from worklog.services.entry_service import EntryService
from worklog.viewmodels.daily_viewmodel import DailyViewModel
from worklog.viewmodels.tasks_viewmodel import TasksViewModel
from worklog.viewmodels.timer_viewmodel import TimerViewModel


def local(y, m, d, hh=0, mm=0) -> int:
    return int(datetime(y, m, d, hh, mm).timestamp() * 1000)


@pytest.fixture()
def timer_vm(qapp, store):
    vm = TimerViewModel(store, tick_interval_ms=250)
    yield vm
    vm.shutdown()


def test_parent_task_cannot_be_timed(timer_vm, store, project):
    parent = store.add_task(project.id, "P")
    store.add_task(project.id, "C", parent_id=parent.id)
    assert timer_vm.start_timer(parent.id) is None
    assert timer_vm.active_entry() is None


def test_start_runs_ticker_and_stop_cancels_it(timer_vm, store, project):
    task = store.add_task(project.id, "A")
    changed = []
    timer_vm.entriesChanged.connect(lambda: changed.append(True))

    entry = timer_vm.start_timer(task.id)
    assert timer_vm.ticker.is_active()
    assert timer_vm.active_entry() is entry

    timer_vm.stop(entry.id)
    assert not timer_vm.ticker.is_active()
    assert timer_vm.active_entry() is None
    assert len(changed) == 2


def test_break_then_pause_resume(timer_vm, clock):
    brk = timer_vm.start_break("tea")
    clock.set(100)
    timer_vm.pause(brk.id)
    clock.set(400)
    timer_vm.resume(brk.id)
    assert brk.total_paused_ms == 300
    assert timer_vm.ticker.is_active()


def test_tasks_rows_group_children_under_parents(qapp, store, clock, project):
    entries = EntryService(store)
    solo = store.add_task(project.id, "Solo")
    parent = store.add_task(project.id, "Parent")
    child = store.add_task(project.id, "Child", parent_id=parent.id)
    entries.add_manual_entry(task_id=child.id, start_time=0, end_time=90_000)
    entries.add_manual_entry(task_id=solo.id, start_time=0, end_time=30_000)

    vm = TasksViewModel(store)
    vm.set_project(project.id)
    rows = vm.rows()

    assert [(r["title"], r["depth"]) for r in rows] == [("Solo", 0), ("Parent", 0), ("Child", 1)]
    by_title = {r["title"]: r for r in rows}
    assert by_title["Parent"]["is_parent"] and not by_title["Parent"]["timeable"]
    assert by_title["Parent"]["total_ms"] == 90_000
    assert by_title["Solo"]["total_ms"] == 30_000


def test_set_parent_denied_emits_reason(qapp, store, project):
    b = store.add_task(project.id, "B")
    c = store.add_task(project.id, "C", parent_id=b.id)
    vm = TasksViewModel(store)
    vm.set_project(project.id)
    denied = []
    vm.parentChangeDenied.connect(lambda tid, reason: denied.append((tid, reason)))

    decision = vm.set_parent(b.id, c.id)

    assert not decision.ok
    assert denied and denied[0][0] == b.id
    assert b.parent_id is None


def test_create_and_rename_reject_blank_titles(qapp, store, project):
    vm = TasksViewModel(store)
    vm.set_project(project.id)
    assert vm.create_task("   ") is None
    tid = vm.create_task(" Write report ")
    assert store.get_task(tid).title == "Write report"
    assert vm.rename_task(tid, "") is False
    assert vm.rename_task(tid, "Final report") is True


def test_daily_and_workload_payloads(qapp, store, project):
    entries = EntryService(store)
    other = store.add_project("Other")
    a = store.add_task(project.id, "A")
    b = store.add_task(other.id, "B")
    entries.add_manual_entry(task_id=a.id, start_time=local(2024, 6, 1, 9), end_time=local(2024, 6, 1, 10))
    entries.add_manual_entry(task_id=b.id, start_time=local(2024, 6, 1, 10), end_time=local(2024, 6, 1, 13))
    entries.add_manual_entry(is_break=True, start_time=local(2024, 6, 1, 13), end_time=local(2024, 6, 1, 13, 30))

    vm = DailyViewModel(store, target_hours=8)
    daily = vm.load_daily("2024-06-01")
    assert daily["work_ms"] == 4 * 3_600_000
    assert daily["break_ms"] == 30 * 60_000
    assert daily["percent"] == 50
    assert daily["work_label"] == "4h"

    rows = vm.load_workload("2024-06-01")
    assert [(r["project_name"], r["label"]) for r in rows] == [("Other", "3h"), ("Client A", "1h")]
