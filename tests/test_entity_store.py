# tests/test_entity_store.py
from __future__ import annotations

from worklog.models.entities import PROJECT_COLORS
from worklog.repositories.entity_store import EntityStore
from worklog.services.entry_service import EntryService


def _seed_task_with_dependents(store, project_id, title="T", parent_id=None):
    task = store.add_task(project_id, title, parent_id)
    EntryService(store).add_manual_entry(task_id=task.id, start_time=0, end_time=1000)
    store.add_comment(task.id, f"note on {title}")
    store.add_attachment(task.id, file_name=f"{title}.bin", original_name=f"{title}.pdf", size=10)
    return task


def test_add_project_defaults(store, clock):
    clock.set(1234)
    p = store.add_project("Home")
    assert p.color == PROJECT_COLORS[0]
    assert p.created_at == 1234
    assert store.get_project(p.id) is p


def test_add_task_requires_existing_project(store, persister):
    assert store.add_task("missing", "T") is None
    assert persister.saved == []


def test_rename_missing_ids_are_noops(store, persister):
    assert store.rename_task("nope", "x") is None
    assert store.rename_project("nope", "x") is None
    assert store.delete_task("nope") is False
    assert store.delete_project("nope") is False
    assert persister.saved == []


def test_delete_task_cascades_to_children_and_dependents(store, project):
    parent = _seed_task_with_dependents(store, project.id, "P")
    child = _seed_task_with_dependents(store, project.id, "C", parent_id=parent.id)
    keep = _seed_task_with_dependents(store, project.id, "K")

    assert store.delete_task(parent.id) is True

    assert store.get_task(parent.id) is None
    assert store.get_task(child.id) is None
    assert [t.id for t in store.get_all_tasks()] == [keep.id]
    assert {e.task_id for e in store.get_all_entries()} == {keep.id}
    assert store.get_comments(child.id) == []
    assert store.get_attachments(child.id) == []
    assert len(store.get_comments(keep.id)) == 1


def test_delete_child_leaves_parent(store, project):
    parent = store.add_task(project.id, "P")
    child = _seed_task_with_dependents(store, project.id, "C", parent_id=parent.id)
    store.delete_task(child.id)
    assert store.get_task(parent.id) is not None
    assert store.is_parent(parent.id) is False


def test_delete_project_cascades_everything(store, project):
    other = store.add_project("Other")
    _seed_task_with_dependents(store, project.id, "A")
    survivor = _seed_task_with_dependents(store, other.id, "B")

    store.delete_project(project.id)

    assert store.get_projects() == [other]
    assert store.get_all_tasks() == [survivor]
    assert all(e.task_id == survivor.id for e in store.get_all_entries())
    snap = store.snapshot()
    assert {c["task_id"] for c in snap.comments} == {survivor.id}
    assert {a["task_id"] for a in snap.attachments} == {survivor.id}


def test_deleting_running_task_clears_active_entry(store, timer, project):
    task = store.add_task(project.id, "A")
    timer.start_timer(task.id)
    store.delete_task(task.id)
    assert store.running_entry() is None


def test_comments_newest_first_and_edit_stamps(store, clock, project):
    task = store.add_task(project.id, "A")
    clock.set(10)
    first = store.add_comment(task.id, "first")
    clock.set(20)
    second = store.add_comment(task.id, "second")
    assert [c.id for c in store.get_comments(task.id)] == [second.id, first.id]

    clock.set(30)
    store.update_comment(first.id, "edited")
    assert first.text == "edited"
    assert first.edited_at == 30
    assert store.update_comment("nope", "x") is None

    assert store.delete_comment(second.id) is True
    assert store.delete_comment(second.id) is False


def test_attachments_delete_returns_record(store, clock, project):
    task = store.add_task(project.id, "A")
    clock.set(5)
    att = store.add_attachment(task.id, file_name="abc123.png", original_name="shot.png", mime_type="image/png", size=2048)
    assert store.get_attachments(task.id) == [att]
    removed = store.delete_attachment(att.id)
    assert removed is att
    assert store.get_attachments(task.id) == []
    assert store.delete_attachment(att.id) is None


def test_every_mutation_persists_full_snapshot(store, persister, project):
    task = store.add_task(project.id, "A")
    store.rename_task(task.id, "B")
    last = persister.saved[-1]
    assert [t["title"] for t in last.tasks] == ["B"]
    assert [p["id"] for p in last.projects] == [project.id]


def test_snapshot_round_trip_keeps_running_entry(store, timer, clock, project):
    task = store.add_task(project.id, "A")
    entry = timer.start_timer(task.id)
    clock.set(500)
    timer.pause_timer(entry.id)

    again = EntityStore.from_snapshot(store.snapshot(), clock=clock)
    active = again.running_entry()
    assert active is not None
    assert active.id == entry.id
    assert active.is_paused and active.paused_at == 500
    assert again.get_task(task.id).title == "A"


def test_persist_failure_does_not_revert(clock):
    class Boom:
        def save(self, snapshot):
            raise OSError("disk full")

    store = EntityStore(clock=clock, persister=Boom())
    p = store.add_project("X")
    assert store.get_project(p.id) is p
