# Rev 0.1.1

"""Pytest fixtures for worklog"""
from __future__ import annotations
import os
from pathlib import Path
from typing import List

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from worklog.models.entities import Snapshot
from worklog.repositories.db import Database
from worklog.repositories.entity_store import EntityStore
from worklog.services.timer_service import TimerService


class FakeClock:
    """Controllable clock; tests move time by hand."""

    def __init__(self, start: int = 0):
        self.now = start

    def now_ms(self) -> int:
        return self.now

    def advance(self, ms: int) -> int:
        self.now += ms
        return self.now

    def set(self, ms: int) -> None:
        self.now = ms


class RecordingPersister:
    def __init__(self):
        self.saved: List[Snapshot] = []

    def save(self, snapshot: Snapshot) -> None:
        self.saved.append(snapshot)


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def persister() -> RecordingPersister:
    return RecordingPersister()


@pytest.fixture()
def store(clock, persister) -> EntityStore:
    return EntityStore(clock=clock, persister=persister)


@pytest.fixture()
def timer(store) -> TimerService:
    return TimerService(store)


@pytest.fixture()
def project(store):
    return store.add_project("Client A")


@pytest.fixture()
def db(tmp_path: Path):
    database = Database(path=str(tmp_path / "test.db"))
    try:
        database.run_migrations()
        yield database
    finally:
        database.close()


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtCore import QCoreApplication
    app = QCoreApplication.instance() or QCoreApplication([])
    yield app
