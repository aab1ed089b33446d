# worklog application context
# Rev 0.1.1

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .utils.config import load_settings, target_hours, tick_interval_ms
from .utils.logging_setup import get_logger
from .repositories.db import Database
from .repositories.entity_store import EntityStore
from .repositories.sqlite_snapshot_repository import SQLiteSnapshotRepository
from .services.clock import Clock
from .services.entry_service import EntryService
from .services.persistence import BackgroundPersister
from .services.timer_service import TimerService
from .viewmodels.daily_viewmodel import DailyViewModel
from .viewmodels.timer_viewmodel import TimerViewModel


@dataclass
class AppContext:
    """Central container for shared app resources."""
    db_path: Path
    db: Database
    snapshots: SQLiteSnapshotRepository
    persister: BackgroundPersister
    store: EntityStore
    timer: TimerService
    entries: EntryService
    settings: Dict[str, Any]

    @classmethod
    def create(
        cls,
        db_path: Optional[Path] = None,
        *,
        clock: Optional[Clock] = None,
        settings: Optional[Dict[str, Any]] = None,
    ) -> "AppContext":
        """Open the DB, load the snapshot into a store, and wire services."""
        log = get_logger("AppContext")
        settings = settings or load_settings()
        db_path = Path(db_path or settings["storage"]["db_path"])
        db = Database(db_path)
        db.run_migrations()
        snapshots = SQLiteSnapshotRepository(db)
        persister = BackgroundPersister(snapshots)
        store = EntityStore.from_snapshot(snapshots.load_snapshot(), clock=clock, persister=persister)
        log.info("AppContext initialized with DB=%s", db_path)
        return cls(
            db_path=db_path,
            db=db,
            snapshots=snapshots,
            persister=persister,
            store=store,
            timer=TimerService(store),
            entries=EntryService(store),
            settings=settings,
        )

    @property
    def target_hours(self) -> float:
        return target_hours(self.settings)

    @property
    def tick_interval_ms(self) -> int:
        return tick_interval_ms(self.settings)

    def timer_viewmodel(self) -> TimerViewModel:
        return TimerViewModel(self.store, tick_interval_ms=self.tick_interval_ms)

    def daily_viewmodel(self) -> DailyViewModel:
        return DailyViewModel(self.store, target_hours=self.target_hours)

    def close(self) -> None:
        self.persister.close()
        self.db.close()
