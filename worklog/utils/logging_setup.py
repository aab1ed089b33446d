# Rev 0.1.1

# worklog – logging setup
from __future__ import annotations
import logging, os, sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

try:
    # Optional: pipe Qt messages into Python logging if Qt exists
    from PySide6.QtCore import qInstallMessageHandler, QtMsgType
    def _qt_handler(msg_type, context, message):
        lvl = {
            QtMsgType.QtDebugMsg: logging.DEBUG,
            QtMsgType.QtInfoMsg: logging.INFO,
            QtMsgType.QtWarningMsg: logging.WARNING,
            QtMsgType.QtCriticalMsg: logging.ERROR,
            QtMsgType.QtFatalMsg: logging.CRITICAL,
        }.get(msg_type, logging.INFO)
        logging.getLogger("qt").log(lvl, message)
except ImportError:
    qInstallMessageHandler = None  # PySide6 not available at import time

APP_NAME = "worklog"
FMT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
DATEFMT = "%Y-%m-%d %H:%M:%S"


def _state_dir(app: str = APP_NAME) -> Path:
    base = os.environ.get("XDG_STATE_HOME", os.path.expanduser("~/.local/state"))
    d = Path(base) / app / "logs"
    d.mkdir(parents=True, exist_ok=True)
    return d


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def setup_logging(app_name: str = APP_NAME, *, log_dir: Path | None = None) -> Path:
    # Level via env (DEBUG/INFO/WARNING/ERROR), default INFO
    level_name = os.environ.get("WORKLOG_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)

    log_dir = log_dir or _state_dir(app_name)
    log_dir.mkdir(parents=True, exist_ok=True)
    logfile = log_dir / f"{app_name}.log"

    root = logging.getLogger()
    root.setLevel(level)

    # File: rotate at 5MB, keep 7 backups
    fh = RotatingFileHandler(logfile, maxBytes=5_000_000, backupCount=7, encoding="utf-8")
    fh.setFormatter(logging.Formatter(FMT, DATEFMT))
    fh.setLevel(level)
    root.addHandler(fh)

    ch = logging.StreamHandler(sys.stdout)
    ch.setFormatter(logging.Formatter(FMT, DATEFMT))
    ch.setLevel(level)
    root.addHandler(ch)

    # Uncaught exceptions → log as ERROR
    def _excepthook(exctype, value, tb):
        logging.getLogger("unhandled").error("Uncaught exception", exc_info=(exctype, value, tb))
        sys.__excepthook__(exctype, value, tb)
    sys.excepthook = _excepthook

    if qInstallMessageHandler is not None:
        qInstallMessageHandler(_qt_handler)

    logging.getLogger(__name__).info("Logging initialized at %s; file: %s", level_name, logfile)
    return logfile
