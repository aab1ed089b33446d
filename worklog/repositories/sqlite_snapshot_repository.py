# Rev 0.1.2
# worklog – SQLiteSnapshotRepository
from __future__ import annotations
import sqlite3
from dataclasses import fields
from threading import Lock
from typing import Any, Dict, List, Union

from worklog.models.entities import Attachment, Comment, Project, Snapshot, Task, TimeEntry
from worklog.utils.logging_setup import get_logger
from worklog.repositories.db import Database, transaction

log = get_logger(__name__)

# snapshot attribute -> (table, entity, ORDER BY)
_TABLES = (
    ("projects", "projects", Project, "created_at"),
    ("tasks", "tasks", Task, "created_at"),
    ("time_entries", "time_entries", TimeEntry, "start_time"),
    ("comments", "comments", Comment, "created_at DESC"),
    ("attachments", "attachments", Attachment, "created_at DESC"),
)


class SQLiteSnapshotRepository:
    """
    Whole-store load/save against SQLite.
    save_snapshot() replaces every table's contents in one transaction; there
    are no partial updates.
    """

    def __init__(self, db_or_conn: Union[Database, sqlite3.Connection]):
        self._db_or_conn = db_or_conn
        self._lock = Lock()

    # -------------------------
    # Connection handling
    # -------------------------
    def _conn(self) -> sqlite3.Connection:
        if isinstance(self._db_or_conn, sqlite3.Connection):
            return self._db_or_conn
        if isinstance(getattr(self._db_or_conn, "conn", None), sqlite3.Connection):
            return self._db_or_conn.conn
        raise RuntimeError(
            "SQLiteSnapshotRepository: could not obtain sqlite3.Connection "
            "(expected .conn on wrapper, or a raw Connection)."
        )

    # -------------------------
    # Public API
    # -------------------------
    def load_snapshot(self) -> Snapshot:
        out: Dict[str, List[Dict[str, Any]]] = {}
        with self._lock:
            con = self._conn()
            for attr, table, entity, order_by in _TABLES:
                cols = [f.name for f in fields(entity)]
                cur = con.execute(f"SELECT {', '.join(cols)} FROM {table} ORDER BY {order_by}")
                out[attr] = [
                    entity.from_dict(dict(zip(cols, row))).to_dict() for row in cur.fetchall()
                ]
        return Snapshot.from_dict(out)

    def save_snapshot(self, snapshot: Snapshot) -> None:
        with self._lock:
            with transaction(self._conn()) as con:
                for attr, table, entity, _ in _TABLES:
                    cols = [f.name for f in fields(entity)]
                    con.execute(f"DELETE FROM {table}")
                    rows = [
                        tuple(self._to_sql(rec.get(c)) for c in cols)
                        for rec in getattr(snapshot, attr)
                    ]
                    if rows:
                        con.executemany(
                            f"INSERT INTO {table}({', '.join(cols)}) "
                            f"VALUES ({', '.join('?' * len(cols))})",
                            rows,
                        )
        log.debug(
            "Saved snapshot: %d projects, %d tasks, %d entries",
            len(snapshot.projects), len(snapshot.tasks), len(snapshot.time_entries),
        )

    @staticmethod
    def _to_sql(value: Any) -> Any:
        if isinstance(value, bool):
            return int(value)
        return value
