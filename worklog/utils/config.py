# worklog/utils/config.py
import copy
import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .paths import DB_PATH, config_dir
from .logging_setup import get_logger

log = get_logger(__name__)

SETTINGS_NAME = "settings.json"

_DEFAULTS: Dict[str, Any] = {
    "timer": {
        "tick_interval_ms": 250,
    },
    "daily": {
        "target_hours": 8.5,
    },
    "storage": {
        "db_path": str(DB_PATH),
    },
}


def settings_file() -> Path:
    return config_dir() / SETTINGS_NAME


def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for key, val in over.items():
        if isinstance(val, dict) and isinstance(out.get(key), dict):
            out[key] = _merge(out[key], val)
        else:
            out[key] = val
    return out


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    path = path or settings_file()
    data = copy.deepcopy(_DEFAULTS)
    if path.exists():
        try:
            data = _merge(_DEFAULTS, json.loads(path.read_text(encoding="utf-8")))
        except (OSError, ValueError):
            log.warning("Ignoring unreadable settings file %s", path)
    env_db = os.environ.get("WORKLOG_DB")
    if env_db:
        data["storage"]["db_path"] = env_db
    return data


def save_settings(data: Dict[str, Any], path: Optional[Path] = None) -> None:
    path = path or settings_file()
    path.write_text(json.dumps(data, indent=2), encoding="utf-8")


def target_hours(settings: Dict[str, Any]) -> float:
    try:
        value = float(settings["daily"]["target_hours"])
    except (KeyError, TypeError, ValueError):
        return _DEFAULTS["daily"]["target_hours"]
    return value if value > 0 else _DEFAULTS["daily"]["target_hours"]


def tick_interval_ms(settings: Dict[str, Any]) -> int:
    try:
        return max(1, int(settings["timer"]["tick_interval_ms"]))
    except (KeyError, TypeError, ValueError):
        return _DEFAULTS["timer"]["tick_interval_ms"]
