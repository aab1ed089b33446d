# File: worklog/tools/migrate.py
# Usage examples:
#   python -m worklog.tools.migrate up
#   python -m worklog.tools.migrate status
#   python -m worklog.tools.migrate verify --db /path/to/worklog.db
#   python -m worklog.tools.migrate export --out snapshot.json
#
# Notes:
# - DB path defaults to env WORKLOG_DB or the configured storage.db_path
# - Applies worklog/data/migrations/*.sql in lexicographic order
# - export writes the whole store as one JSON snapshot

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from worklog.repositories.db import Database
from worklog.repositories.sqlite_snapshot_repository import SQLiteSnapshotRepository
from worklog.utils.config import load_settings
from worklog.utils.paths import MIGRATIONS_DIR

REQUIRED_TABLES = (
    "projects",
    "tasks",
    "time_entries",
    "comments",
    "attachments",
    "schema_migrations",
)


def default_db() -> Path:
    return Path(load_settings()["storage"]["db_path"])


def cmd_status(db_path: Path, migrations_dir: Path) -> int:
    db = Database(db_path)
    try:
        applied = sorted(db.applied())
        pending = db.pending(migrations_dir)
        print(f"DB: {db_path}")
        print(f"Migrations dir: {migrations_dir}")
        print(f"Applied count: {len(applied)}")
        for name in applied:
            print(f"  ✔ {name}")
        print(f"Pending count: {len(pending)}")
        for name in pending:
            print(f"  ⧗ {name}")
        return 0
    finally:
        db.close()


def cmd_up(db_path: Path, migrations_dir: Path) -> int:
    db = Database(db_path)
    try:
        applied_now = db.run_migrations(migrations_dir)
        if applied_now:
            for name in applied_now:
                print(f"→ Applied migration: {name}")
            print("✓ Database is up to date.")
        else:
            print("✓ No changes. Database already up to date.")
        return 0
    finally:
        db.close()


def cmd_verify(db_path: Path) -> int:
    db = Database(db_path)
    try:
        cur = db.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%';"
        )
        names = {r[0] for r in cur.fetchall()}
        missing = [t for t in REQUIRED_TABLES if t not in names]
        if missing:
            print("❌ Missing tables:", ", ".join(missing))
            return 2

        running = db.conn.execute("SELECT COUNT(*) FROM time_entries WHERE is_running = 1").fetchone()[0]
        if running > 1:
            print(f"❌ {running} entries are marked running (expected at most 1)")
            return 3

        bad = db.conn.execute(
            "SELECT COUNT(*) FROM time_entries WHERE is_paused = 1 AND is_running = 0"
        ).fetchone()[0]
        if bad:
            print(f"❌ {bad} entries are paused but not running")
            return 4

        print("✓ Verification passed.")
        return 0
    finally:
        db.close()


def cmd_export(db_path: Path, out: Optional[Path]) -> int:
    db = Database(db_path)
    try:
        db.run_migrations()
        snapshot = SQLiteSnapshotRepository(db).load_snapshot()
        text = json.dumps(snapshot.to_dict(), indent=2)
        if out is None:
            print(text)
        else:
            out.write_text(text, encoding="utf-8")
            print(f"✓ Exported {len(snapshot.time_entries)} entries to {out}")
        return 0
    finally:
        db.close()


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="worklog-migrate", description="SQLite migration runner for worklog")
    sub = p.add_subparsers(dest="cmd", required=True)

    def add_db(sp: argparse.ArgumentParser):
        sp.add_argument("--db", type=Path, default=None, help="Path to SQLite DB (default: configured storage.db_path)")

    s_up = sub.add_parser("up", help="Run pending migrations")
    add_db(s_up)
    s_up.add_argument("--migrations-dir", type=Path, default=MIGRATIONS_DIR)

    s_status = sub.add_parser("status", help="Show applied and pending migrations")
    add_db(s_status)
    s_status.add_argument("--migrations-dir", type=Path, default=MIGRATIONS_DIR)

    s_verify = sub.add_parser("verify", help="Structural and timer-state checks")
    add_db(s_verify)

    s_export = sub.add_parser("export", help="Dump the whole store as JSON")
    add_db(s_export)
    s_export.add_argument("--out", type=Path, default=None, help="Output file (default: stdout)")

    return p.parse_args(argv)


def main(argv: Optional[list[str]] = None) -> int:
    ns = parse_args(sys.argv[1:] if argv is None else argv)
    db_path = ns.db or default_db()
    if ns.cmd == "status":
        return cmd_status(db_path, ns.migrations_dir)
    if ns.cmd == "up":
        return cmd_up(db_path, ns.migrations_dir)
    if ns.cmd == "verify":
        return cmd_verify(db_path)
    if ns.cmd == "export":
        return cmd_export(db_path, ns.out)
    raise SystemExit(1)


if __name__ == "__main__":
    raise SystemExit(main())
