# Rev 0.1.2
"""Lightweight entities for the worklog store.

Timestamps are integer milliseconds since the epoch. Every entity converts
to and from a plain dict so a whole store can travel as one snapshot.
"""
from __future__ import annotations
from dataclasses import dataclass, field, asdict, fields
from typing import Any, Dict, List, Optional

from .types import BreakTypeId, TaskStatus


PROJECT_COLORS = (
    "#8b5cf6", "#06b6d4", "#22c55e", "#f59e0b",
    "#ef4444", "#ec4899", "#3b82f6", "#14b8a6",
    "#f97316", "#a855f7",
)


@dataclass(frozen=True)
class BreakType:
    id: BreakTypeId
    label: str
    color: str


BREAK_TYPES = (
    BreakType("lunch", "Lunch", "#f59e0b"),
    BreakType("tea", "Tea", "#06b6d4"),
    BreakType("other", "Break", "#8b8da3"),
)


def resolve_break_type(break_type_id: Optional[str]) -> BreakType:
    """Unknown or missing ids fall back to the generic break."""
    for bt in BREAK_TYPES:
        if bt.id == break_type_id:
            return bt
    return BREAK_TYPES[-1]


def _pick(cls, data: Dict[str, Any]) -> Dict[str, Any]:
    # ignore keys the dataclass doesn't know (older/newer snapshots)
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Project:
    id: str
    name: str
    color: str = PROJECT_COLORS[0]
    created_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        return cls(**_pick(cls, data))


@dataclass
class Task:
    id: str
    project_id: str
    title: str
    status: TaskStatus = "todo"
    parent_id: Optional[str] = None
    bucket_id: Optional[str] = None    # board view only
    created_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Task":
        return cls(**_pick(cls, data))


@dataclass
class TimeEntry:
    id: str
    task_id: Optional[str]             # None for breaks
    start_time: int
    end_time: Optional[int] = None
    paused_at: Optional[int] = None
    total_paused_ms: int = 0
    is_running: bool = False
    is_paused: bool = False
    is_break: bool = False
    break_type_id: Optional[str] = None
    break_label: Optional[str] = None
    break_color: Optional[str] = None

    def apply_break_type(self, break_type: BreakType) -> None:
        self.is_break = True
        self.task_id = None
        self.break_type_id = break_type.id
        self.break_label = break_type.label
        self.break_color = break_type.color

    def clear_break_type(self) -> None:
        self.is_break = False
        self.break_type_id = None
        self.break_label = None
        self.break_color = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TimeEntry":
        rec = _pick(cls, data)
        # sqlite hands back 0/1 for flags
        for flag in ("is_running", "is_paused", "is_break"):
            rec[flag] = bool(rec.get(flag))
        rec["total_paused_ms"] = int(rec.get("total_paused_ms") or 0)
        return cls(**rec)


@dataclass
class Comment:
    id: str
    task_id: str
    text: str
    created_at: int = 0
    edited_at: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Comment":
        return cls(**_pick(cls, data))


@dataclass
class Attachment:
    id: str
    task_id: str
    file_name: str
    original_name: str
    mime_type: Optional[str] = None
    size: Optional[int] = None
    created_at: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Attachment":
        return cls(**_pick(cls, data))


@dataclass
class Snapshot:
    """Whole-store payload exchanged with the persistent store."""
    projects: List[Dict[str, Any]] = field(default_factory=list)
    tasks: List[Dict[str, Any]] = field(default_factory=list)
    time_entries: List[Dict[str, Any]] = field(default_factory=list)
    comments: List[Dict[str, Any]] = field(default_factory=list)
    attachments: List[Dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None) -> "Snapshot":
        data = data or {}
        return cls(
            projects=list(data.get("projects") or []),
            tasks=list(data.get("tasks") or []),
            time_entries=list(data.get("time_entries") or []),
            comments=list(data.get("comments") or []),
            attachments=list(data.get("attachments") or []),
        )

    def is_empty(self) -> bool:
        return not (self.projects or self.tasks or self.time_entries)
