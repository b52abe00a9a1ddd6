"""
Explicitly constructed application context.

``AppContext`` wires the entity store, data manager, snapshot repository and
demo scheduler together. Lifecycle: ``create`` -> ``load_initial`` ->
(``tick`` on every UI run) -> ``dispose``.
"""

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any, List, Optional, Tuple

from crm_dashboard.config import Settings, load_settings
from crm_dashboard.data.entities import Activity
from crm_dashboard.data.manager import DataManager, Notifier
from crm_dashboard.data.persistence import JsonFileStorage, KeyValueStorage, SnapshotRepository, load_fixtures
from crm_dashboard.data.simulation import Clock, DemoScheduler, SystemClock, schedule_demo_updates
from crm_dashboard.data.store import EntityStore
from crm_dashboard.errors import FixtureLoadError, SnapshotFormatError

logger = logging.getLogger(__name__)

SOURCE_FIXTURES = "fixtures"
SOURCE_SNAPSHOT = "snapshot"
SOURCE_EMPTY = "empty"


def seed_activities() -> List[Activity]:
    return [
        Activity(1, "Project Completed", "Retail Mall Renovation marked as completed", "2 days ago", "check-circle"),
        Activity(2, "New Client Added", "Global Design Co. added to client database", "1 week ago", "user-plus"),
        Activity(3, "Feedback Submitted", "Tech Innovate Inc. submitted project feedback", "1 week ago", "message-square"),
        Activity(4, "Project Delayed", "Tech Campus Phase 1 timeline extended by 2 weeks", "2 weeks ago", "alert-circle"),
    ]


class AppContext:
    def __init__(
        self,
        settings: Settings,
        manager: DataManager,
        repository: SnapshotRepository,
        scheduler: DemoScheduler,
    ) -> None:
        self.settings = settings
        self.manager = manager
        self.repository = repository
        self.scheduler = scheduler
        self.data_source: Optional[str] = None
        self.disposed = False

    @classmethod
    def create(
        cls,
        settings: Optional[Settings] = None,
        storage: Optional[KeyValueStorage] = None,
        notifier: Optional[Notifier] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> "AppContext":
        settings = settings or load_settings()
        if storage is None:
            storage = JsonFileStorage(settings.storage_dir)
        clock = clock or SystemClock()
        rng = rng or random.Random(settings.random_seed)
        repository = SnapshotRepository(storage)
        manager = DataManager(repository=repository, notifier=notifier, clock=clock, rng=rng)
        scheduler = DemoScheduler(clock)
        if settings.demo_updates:
            schedule_demo_updates(
                scheduler,
                manager,
                rng,
                progress_interval=settings.progress_interval_seconds,
                lead_min=settings.lead_min_seconds,
                lead_max=settings.lead_max_seconds,
                lead_probability=settings.lead_probability,
            )
        return cls(settings, manager, repository, scheduler)

    @property
    def store(self) -> EntityStore:
        return self.manager.store

    async def _load_fixture_store(self) -> EntityStore:
        fixtures = await load_fixtures(self.settings.fixtures_dir)
        store = EntityStore.from_snapshot(fixtures)
        store.activities = seed_activities()
        store.sync_counters()
        return store

    async def aload_initial(self) -> str:
        """Populate the store: fixtures first, persisted snapshot as fallback, else empty."""
        if self.settings.restore_first:
            snapshot = self.repository.load()
            if snapshot is not None:
                return self._use(snapshot, SOURCE_SNAPSHOT)

        try:
            store = await self._load_fixture_store()
        except (FixtureLoadError, SnapshotFormatError) as exc:
            logger.warning("Error loading data: %s", exc)
            self.manager.notifier.error("Failed to load data")
        else:
            return self._use(store, SOURCE_FIXTURES)

        snapshot = self.repository.load()
        if snapshot is not None:
            return self._use(snapshot, SOURCE_SNAPSHOT)
        logger.info("No persisted snapshot found; starting with an empty store")
        return self._use(EntityStore.default(), SOURCE_EMPTY)

    def load_initial(self) -> str:
        return asyncio.run(self.aload_initial())

    def _use(self, store: EntityStore, source: str) -> str:
        self.manager.replace_store(store)
        self.data_source = source
        if self.settings.demo_updates and not self.scheduler.running:
            self.scheduler.start()
        logger.info(
            "Data loaded from %s: %d clients, %d projects, %d feedback",
            source,
            len(store.clients),
            len(store.projects),
            len(store.feedback),
        )
        return source

    def tick(self) -> List[Tuple[str, Any]]:
        """Run whichever simulated timers are due."""
        if self.disposed:
            return []
        return self.scheduler.run_pending()

    def reset_demo_data(self) -> str:
        """Drop the persisted snapshot and reload the bundled fixtures."""
        self.repository.clear()
        self.manager.replace_store(EntityStore.default())
        source = self.load_initial()
        self.manager.notifier.success("Demo data reset")
        return source

    def dispose(self) -> None:
        if self.disposed:
            return
        self.scheduler.stop()
        self.manager.save()
        self.disposed = True
