# Rev 0.1.1
from __future__ import annotations

from typing import Any, Dict, List

from PySide6.QtCore import QObject, Signal

from worklog.repositories.entity_store import EntityStore
from worklog.services.aggregation import DEFAULT_TARGET_HOURS, daily_summary, workload_for_date
from worklog.services.durations import format_duration


class DailyViewModel(QObject):
    """
    Read-side for the daily log and the workload view. Emits plain dicts so
    the view never touches the store.
    """

    dailyLoaded = Signal(str, dict)
    workloadLoaded = Signal(str, list)

    def __init__(self, store: EntityStore, *, target_hours: float = DEFAULT_TARGET_HOURS):
        super().__init__()
        self._store = store
        self._target_hours = target_hours

    def set_target_hours(self, hours: float) -> None:
        self._target_hours = hours if hours and hours > 0 else DEFAULT_TARGET_HOURS

    def load_daily(self, date_str: str) -> Dict[str, Any]:
        s = daily_summary(self._store, date_str, self._store.now(), self._target_hours)
        payload = {
            "work_ms": s.work_ms,
            "break_ms": s.break_ms,
            "total_ms": s.total_ms,
            "target_ms": s.target_ms,
            "remaining_ms": s.remaining_ms,
            "percent": s.percent,
            "target_reached": s.target_reached,
            "work_label": format_duration(s.work_ms),
            "break_label": format_duration(s.break_ms),
            "work_entry_ids": [e.id for e in s.work_entries],
            "break_entry_ids": [e.id for e in s.break_entries],
        }
        self.dailyLoaded.emit(date_str, payload)
        return payload

    def load_workload(self, date_str: str) -> List[Dict[str, Any]]:
        items = workload_for_date(self._store, date_str, self._store.now())
        rows = [
            {
                "project_id": it.project.id,
                "project_name": it.project.name,
                "color": it.project.color,
                "total_ms": it.total_ms,
                "label": format_duration(it.total_ms),
            }
            for it in sorted(items, key=lambda i: i.total_ms, reverse=True)
        ]
        self.workloadLoaded.emit(date_str, rows)
        return rows
