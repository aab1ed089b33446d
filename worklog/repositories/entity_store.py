# Rev 0.2.0
# worklog – EntityStore
"""In-memory relational store for projects, tasks, time entries, comments
and attachments.

One instance is built at startup from a snapshot and handed to every
service. Each mutation ends with `commit()`, which passes a full snapshot to
the injected persister; the persister is fire-and-forget and never rolls
back what is already in memory. Unknown ids are no-ops.
"""
from __future__ import annotations
import uuid
from typing import Callable, Dict, Iterator, List, Optional

from worklog.models.entities import (
    PROJECT_COLORS,
    Attachment,
    Comment,
    Project,
    Snapshot,
    Task,
    TimeEntry,
)
from worklog.services.clock import Clock, SystemClock
from worklog.services.hierarchy_rules import ParentDecision, validate_parent
from worklog.services.persistence import NullPersister, Persister
from worklog.utils.logging_setup import get_logger

log = get_logger(__name__)


def new_id() -> str:
    return uuid.uuid4().hex[:16]


class EntityStore:
    def __init__(
        self,
        *,
        clock: Optional[Clock] = None,
        persister: Optional[Persister] = None,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self.clock: Clock = clock or SystemClock()
        self._persister: Persister = persister or NullPersister()
        self._new_id = id_factory

        self._projects: Dict[str, Project] = {}
        self._tasks: Dict[str, Task] = {}
        self._entries: Dict[str, TimeEntry] = {}
        self._comments: Dict[str, Comment] = {}
        self._attachments: Dict[str, Attachment] = {}

        self._active_id: Optional[str] = None

    # ---------- lifecycle ----------

    @classmethod
    def from_snapshot(cls, snapshot: Snapshot, **kwargs) -> "EntityStore":
        store = cls(**kwargs)
        for rec in snapshot.projects:
            p = Project.from_dict(rec)
            store._projects[p.id] = p
        for rec in snapshot.tasks:
            t = Task.from_dict(rec)
            store._tasks[t.id] = t
        for rec in snapshot.time_entries:
            e = TimeEntry.from_dict(rec)
            store._entries[e.id] = e
        for rec in snapshot.comments:
            c = Comment.from_dict(rec)
            store._comments[c.id] = c
        for rec in snapshot.attachments:
            a = Attachment.from_dict(rec)
            store._attachments[a.id] = a

        running = [e.id for e in store.iter_running()]
        if len(running) > 1:
            log.warning("Snapshot holds %d running entries: %s", len(running), running)
        store._active_id = running[-1] if running else None
        log.info(
            "Store loaded: %d projects, %d tasks, %d entries",
            len(store._projects), len(store._tasks), len(store._entries),
        )
        return store

    def snapshot(self) -> Snapshot:
        return Snapshot(
            projects=[p.to_dict() for p in self._projects.values()],
            tasks=[t.to_dict() for t in self._tasks.values()],
            time_entries=[e.to_dict() for e in self._entries.values()],
            comments=[c.to_dict() for c in self._comments.values()],
            attachments=[a.to_dict() for a in self._attachments.values()],
        )

    def commit(self) -> None:
        """Hand the current state to the persister; failures are only logged."""
        try:
            self._persister.save(self.snapshot())
        except Exception:
            log.exception("Persist failed; keeping in-memory state")

    def now(self) -> int:
        return self.clock.now_ms()

    # ---------- projects ----------

    def get_projects(self) -> List[Project]:
        return list(self._projects.values())

    def get_project(self, project_id: Optional[str]) -> Optional[Project]:
        if project_id is None:
            return None
        return self._projects.get(project_id)

    def add_project(self, name: str, color: Optional[str] = None) -> Project:
        project = Project(
            id=self._new_id(),
            name=name,
            color=color or PROJECT_COLORS[0],
            created_at=self.now(),
        )
        self._projects[project.id] = project
        self.commit()
        return project

    def rename_project(self, project_id: str, name: str) -> Optional[Project]:
        project = self._projects.get(project_id)
        if project is not None:
            project.name = name
            self.commit()
        return project

    def delete_project(self, project_id: str) -> bool:
        if project_id not in self._projects:
            return False
        task_ids = {t.id for t in self._tasks.values() if t.project_id == project_id}
        self._drop_task_dependents(task_ids)
        del self._projects[project_id]
        log.info("Deleted project %s with %d tasks", project_id, len(task_ids))
        self.commit()
        return True

    # ---------- tasks ----------

    def get_tasks(self, project_id: str) -> List[Task]:
        return [t for t in self._tasks.values() if t.project_id == project_id]

    def get_all_tasks(self) -> List[Task]:
        return list(self._tasks.values())

    def get_task(self, task_id: Optional[str]) -> Optional[Task]:
        if task_id is None:
            return None
        return self._tasks.get(task_id)

    def add_task(self, project_id: str, title: str, parent_id: Optional[str] = None) -> Optional[Task]:
        if project_id not in self._projects:
            log.warning("add_task: unknown project %s", project_id)
            return None
        if parent_id is not None:
            parent = self._tasks.get(parent_id)
            if parent is None or parent.project_id != project_id or parent.parent_id is not None:
                log.warning("add_task: %s cannot be a parent here", parent_id)
                return None
        task = Task(
            id=self._new_id(),
            project_id=project_id,
            title=title,
            parent_id=parent_id,
            created_at=self.now(),
        )
        self._tasks[task.id] = task
        self.commit()
        return task

    def rename_task(self, task_id: str, title: str) -> Optional[Task]:
        task = self._tasks.get(task_id)
        if task is not None:
            task.title = title
            self.commit()
        return task

    def delete_task(self, task_id: str) -> bool:
        if task_id not in self._tasks:
            return False
        ids = {task_id} | {c.id for c in self.get_children(task_id)}
        self._drop_task_dependents(ids)
        log.info("Deleted task %s (cascade %d)", task_id, len(ids))
        self.commit()
        return True

    def get_children(self, task_id: str) -> List[Task]:
        return [t for t in self._tasks.values() if t.parent_id == task_id]

    def is_parent(self, task_id: str) -> bool:
        return any(t.parent_id == task_id for t in self._tasks.values())

    def get_eligible_parents(self, task_id: str) -> List[Task]:
        task = self._tasks.get(task_id)
        if task is None:
            return []
        return [
            t for t in self.get_tasks(task.project_id)
            if t.id != task_id and validate_parent(self, task_id, t.id).ok
        ]

    def set_task_parent(self, task_id: str, parent_id: Optional[str]) -> ParentDecision:
        decision = validate_parent(self, task_id, parent_id)
        if not decision.ok:
            log.info("Parent change %s -> %s denied: %s", task_id, parent_id, decision.code)
            return decision
        task = self._tasks[task_id]
        if task.parent_id != parent_id:
            task.parent_id = parent_id
            self.commit()
        return decision

    def _drop_task_dependents(self, task_ids: set) -> None:
        self._entries = {k: e for k, e in self._entries.items() if e.task_id not in task_ids}
        self._comments = {k: c for k, c in self._comments.items() if c.task_id not in task_ids}
        self._attachments = {k: a for k, a in self._attachments.items() if a.task_id not in task_ids}
        self._tasks = {k: t for k, t in self._tasks.items() if k not in task_ids}
        if self._active_id is not None and self._active_id not in self._entries:
            self._active_id = None

    # ---------- time entries ----------

    def get_time_entries(self, task_id: str) -> List[TimeEntry]:
        return [e for e in self._entries.values() if e.task_id == task_id]

    def get_all_entries(self) -> List[TimeEntry]:
        return list(self._entries.values())

    def get_entry(self, entry_id: Optional[str]) -> Optional[TimeEntry]:
        if entry_id is None:
            return None
        return self._entries.get(entry_id)

    def make_entry(self, **fields) -> TimeEntry:
        return TimeEntry(id=self._new_id(), **fields)

    def insert_entry(self, entry: TimeEntry) -> TimeEntry:
        self._entries[entry.id] = entry
        if entry.is_running:
            self._active_id = entry.id
        self.commit()
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        if self._entries.pop(entry_id, None) is None:
            return False
        if self._active_id == entry_id:
            self._active_id = None
        self.commit()
        return True

    def iter_running(self) -> Iterator[TimeEntry]:
        return (e for e in self._entries.values() if e.is_running)

    def running_entry(self) -> Optional[TimeEntry]:
        """The single running entry, via the cached id with a scan fallback."""
        cached = self._entries.get(self._active_id) if self._active_id else None
        if cached is not None and cached.is_running:
            return cached
        self._active_id = next((e.id for e in self.iter_running()), None)
        return self._entries.get(self._active_id) if self._active_id else None

    # ---------- comments ----------

    def get_comments(self, task_id: str) -> List[Comment]:
        rows = [c for c in self._comments.values() if c.task_id == task_id]
        return sorted(rows, key=lambda c: c.created_at, reverse=True)

    def add_comment(self, task_id: str, text: str) -> Optional[Comment]:
        if task_id not in self._tasks:
            return None
        comment = Comment(id=self._new_id(), task_id=task_id, text=text, created_at=self.now())
        self._comments[comment.id] = comment
        self.commit()
        return comment

    def update_comment(self, comment_id: str, text: str) -> Optional[Comment]:
        comment = self._comments.get(comment_id)
        if comment is not None:
            comment.text = text
            comment.edited_at = self.now()
            self.commit()
        return comment

    def delete_comment(self, comment_id: str) -> bool:
        if self._comments.pop(comment_id, None) is None:
            return False
        self.commit()
        return True

    # ---------- attachments ----------

    def get_attachments(self, task_id: str) -> List[Attachment]:
        rows = [a for a in self._attachments.values() if a.task_id == task_id]
        return sorted(rows, key=lambda a: a.created_at, reverse=True)

    def add_attachment(
        self,
        task_id: str,
        *,
        file_name: str,
        original_name: str,
        mime_type: Optional[str] = None,
        size: Optional[int] = None,
    ) -> Optional[Attachment]:
        if task_id not in self._tasks:
            return None
        attachment = Attachment(
            id=self._new_id(),
            task_id=task_id,
            file_name=file_name,
            original_name=original_name,
            mime_type=mime_type,
            size=size,
            created_at=self.now(),
        )
        self._attachments[attachment.id] = attachment
        self.commit()
        return attachment

    def delete_attachment(self, attachment_id: str) -> Optional[Attachment]:
        """Remove the record and return it so the caller can drop the stored file."""
        attachment = self._attachments.pop(attachment_id, None)
        if attachment is not None:
            self.commit()
        return attachment
