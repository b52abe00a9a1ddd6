"""
Shared pytest fixtures for the data layer.
"""
import datetime as dt
import random

import pytest

from crm_dashboard.data.manager import DataManager
from crm_dashboard.data.persistence import MemoryStorage, SnapshotRepository
from crm_dashboard.data.simulation import ManualClock
from crm_dashboard.data.store import EntityStore


class RecordingNotifier:
    """Collects toasts instead of displaying them."""

    def __init__(self):
        self.messages = []

    def success(self, message):
        self.messages.append(("success", message))

    def error(self, message):
        self.messages.append(("error", message))

    def clear(self):
        self.messages.clear()


@pytest.fixture
def clock():
    return ManualClock(today=dt.date(2024, 6, 1))


@pytest.fixture
def storage():
    return MemoryStorage()


@pytest.fixture
def repository(storage):
    return SnapshotRepository(storage)


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def manager(repository, notifier, clock):
    return DataManager(
        store=EntityStore.default(),
        repository=repository,
        notifier=notifier,
        clock=clock,
        rng=random.Random(1234),
    )


@pytest.fixture
def client(manager, notifier):
    created = manager.add_client(
        {"name": "Ada Lovelace", "email": "ada@example.com", "company": "Analytical Engines", "status": "active"}
    )
    notifier.clear()
    return created


@pytest.fixture
def project(manager, client, notifier):
    created = manager.add_project(
        {"name": "Engine House", "client_id": client.id, "progress": "10", "budget": "50000", "status": "in-progress"}
    )
    notifier.clear()
    return created
