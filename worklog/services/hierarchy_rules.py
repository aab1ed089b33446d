# worklog/services/hierarchy_rules.py
# Rev 0.1.0
"""Allow/deny checks for assigning a parent task.

Tasks nest at most one level deep: a parent must be top-level, a task that
already has children stays top-level, and no task may become its own
ancestor.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class ParentDecision:
    ok: bool
    code: str
    reason: str = ""

    def __bool__(self) -> bool:
        return self.ok


def _deny(code: str, reason: str) -> ParentDecision:
    return ParentDecision(False, code, reason)


def _creates_cycle(store, task_id: str, parent_id: str) -> bool:
    seen = set()
    cur = store.get_task(parent_id)
    while cur is not None and cur.id not in seen:
        if cur.id == task_id:
            return True
        seen.add(cur.id)
        cur = store.get_task(cur.parent_id) if cur.parent_id else None
    return False


def validate_parent(store, task_id: str, parent_id: Optional[str]) -> ParentDecision:
    """Decide whether `parent_id` may become the parent of `task_id`.

    `store` needs `get_task(id)` and `is_parent(id)`. Passing None for
    `parent_id` detaches the task and is always allowed.
    """
    task = store.get_task(task_id)
    if task is None:
        return _deny("task_not_found", f"task {task_id} does not exist")
    if parent_id is None:
        return ParentDecision(True, "ok", "detach")
    if parent_id == task_id:
        return _deny("self_parent", "a task cannot be its own parent")
    parent = store.get_task(parent_id)
    if parent is None:
        return _deny("parent_not_found", f"task {parent_id} does not exist")
    if parent.project_id != task.project_id:
        return _deny("cross_project", "parent must belong to the same project")
    if _creates_cycle(store, task_id, parent_id):
        return _deny("cycle", "parent is a descendant of the task")
    if store.is_parent(task_id):
        return _deny("has_children", "a task with subtasks cannot be nested")
    if parent.parent_id is not None:
        return _deny("parent_is_child", "subtasks cannot have subtasks")
    return ParentDecision(True, "ok")
