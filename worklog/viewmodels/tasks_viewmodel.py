# Rev 0.1.2 — parent/child ordering + rollup totals
from __future__ import annotations

from typing import Any, Dict, List, Optional

from PySide6.QtCore import QObject, Signal

from worklog.repositories.entity_store import EntityStore
from worklog.services.durations import parent_total_ms, task_total_ms
from worklog.services.hierarchy_rules import ParentDecision


class TasksViewModel(QObject):
    tasksReloaded = Signal(str, list)       # project_id, rows
    parentChangeDenied = Signal(str, str)   # task_id, reason

    def __init__(self, store: EntityStore):
        super().__init__()
        self._store = store
        self._project_id: Optional[str] = None

    def set_project(self, project_id: Optional[str]) -> None:
        self._project_id = project_id

    # ---- queries
    def rows(self) -> List[Dict[str, Any]]:
        """Top-level tasks each followed by their subtasks, with logged totals.

        Parents report the rollup of their children and cannot be timed.
        """
        if self._project_id is None:
            return []
        store = self._store
        now = store.now()
        tasks = store.get_tasks(self._project_id)
        ids = {t.id for t in tasks}
        top = [t for t in tasks if t.parent_id is None or t.parent_id not in ids]

        out: List[Dict[str, Any]] = []
        for t in top:
            children = store.get_children(t.id)
            is_parent = bool(children)
            out.append({
                "id": t.id,
                "title": t.title,
                "depth": 0,
                "is_parent": is_parent,
                "child_count": len(children),
                "total_ms": parent_total_ms(store, t.id, now) if is_parent else task_total_ms(store, t.id, now),
                "timeable": not is_parent,
            })
            for c in children:
                out.append({
                    "id": c.id,
                    "title": c.title,
                    "depth": 1,
                    "is_parent": False,
                    "child_count": 0,
                    "total_ms": task_total_ms(store, c.id, now),
                    "timeable": True,
                })
        return out

    def reload(self) -> None:
        self.tasksReloaded.emit(self._project_id or "", self.rows())

    def eligible_parents(self, task_id: str) -> List[Dict[str, Any]]:
        return [{"id": t.id, "title": t.title} for t in self._store.get_eligible_parents(task_id)]

    # ---- commands
    def create_task(self, title: str, parent_id: Optional[str] = None) -> Optional[str]:
        if self._project_id is None or not title.strip():
            return None
        task = self._store.add_task(self._project_id, title.strip(), parent_id)
        self.reload()
        return task.id if task else None

    def rename_task(self, task_id: str, title: str) -> bool:
        if not title.strip():
            return False
        ok = self._store.rename_task(task_id, title.strip()) is not None
        if ok: self.reload()
        return ok

    def delete_task(self, task_id: str) -> bool:
        ok = self._store.delete_task(task_id)
        if ok: self.reload()
        return ok

    def set_parent(self, task_id: str, parent_id: Optional[str]) -> ParentDecision:
        decision = self._store.set_task_parent(task_id, parent_id)
        if decision.ok:
            self.reload()
        else:
            self.parentChangeDenied.emit(task_id, decision.reason)
        return decision
