# Rev 0.1.0

"""Paths and XDG helpers
- Config lives under the XDG config dir (logs: see logging_setup)
- The default DB lives under the XDG data dir
- SQL migrations ship inside the package (worklog/data/migrations)
"""
from __future__ import annotations
import os
from pathlib import Path


APP_NAME = "worklog"


XDG_DATA_HOME = Path(os.environ.get("XDG_DATA_HOME", Path.home() / ".local" / "share"))
XDG_CONFIG_HOME = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


DATA_DIR = XDG_DATA_HOME / APP_NAME
CONFIG_DIR = XDG_CONFIG_HOME / APP_NAME


PACKAGE_ROOT = Path(__file__).resolve().parents[1]
MIGRATIONS_DIR = (PACKAGE_ROOT / "data" / "migrations").resolve()


DB_PATH = DATA_DIR / "worklog.db"


def config_dir() -> Path:
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    return CONFIG_DIR
