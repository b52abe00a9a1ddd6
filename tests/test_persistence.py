"""
Snapshot round trips, storage backends and the fixture loader.
"""
import json

import pytest

from crm_dashboard.data.persistence import (
    DATA_KEY,
    NEXT_ID_KEY,
    JsonFileStorage,
    MemoryStorage,
    SnapshotRepository,
    load_fixtures,
)
from crm_dashboard.data.store import EntityStore
from crm_dashboard.errors import FixtureLoadError, SnapshotFormatError


def test_snapshot_round_trip_reproduces_store(manager, client, project, repository):
    manager.add_feedback({"client_id": client.id, "project_id": project.id, "rating": 5, "comments": "ok"})
    manager.mark_all_notifications_as_read()

    restored = repository.load()

    assert restored == manager.store
    assert restored is not manager.store


def test_snapshot_uses_camel_case_keys(manager, project, storage):
    data = json.loads(storage.get(DATA_KEY))
    next_id = json.loads(storage.get(NEXT_ID_KEY))

    assert set(data) == {"clients", "projects", "feedback", "notifications", "activities"}
    assert data["projects"][0]["clientId"] == project.client_id
    assert data["projects"][0]["clientName"] == project.client_name
    assert next_id["projects"] == project.id + 1


def test_json_file_storage_round_trip(tmp_path, manager, client):
    repository = SnapshotRepository(JsonFileStorage(tmp_path / "store"))

    assert repository.save(manager.store) is True
    assert (tmp_path / "store" / "crm_data.json").exists()
    assert repository.load() == manager.store

    repository.clear()
    assert repository.load() is None


def test_load_without_snapshot_returns_none():
    assert SnapshotRepository(MemoryStorage()).load() is None


def test_corrupt_snapshot_is_ignored():
    storage = MemoryStorage({DATA_KEY: "{not json", NEXT_ID_KEY: "{}"})
    assert SnapshotRepository(storage).load() is None

    storage = MemoryStorage({DATA_KEY: json.dumps({"clients": [{"name": "no id"}]})})
    assert SnapshotRepository(storage).load() is None


class BrokenStorage(MemoryStorage):
    def set(self, key, value):
        raise OSError("disk full")


def test_save_failure_is_swallowed(manager, client, caplog):
    manager.repository = SnapshotRepository(BrokenStorage())

    created = manager.add_client({"name": "Still works"})

    assert created in manager.store.clients
    assert "Error saving data snapshot" in caplog.text


def test_loaded_counters_never_reuse_ids():
    data = {"clients": [{"id": 40, "name": "High"}]}
    store = EntityStore.from_snapshot(data, {"clients": 3})
    assert store.next_id["clients"] == 41
    assert store.allocate_id("clients") == 41


@pytest.mark.asyncio
async def test_load_bundled_fixtures():
    fixtures = await load_fixtures()

    assert set(fixtures) == {"clients", "projects", "feedback", "notifications"}
    store = EntityStore.from_snapshot(fixtures)
    for c in store.clients:
        assert c.projects == sum(1 for p in store.projects if p.client_id == c.id)
    assert store.next_id["clients"] == 6
    assert store.next_id["projects"] == 7


@pytest.mark.asyncio
async def test_fixture_batch_fails_as_a_unit(tmp_path):
    for name in ("clients", "projects", "feedback"):
        (tmp_path / f"{name}.json").write_text("[]", encoding="utf-8")
    # notifications.json missing

    with pytest.raises(FixtureLoadError):
        await load_fixtures(tmp_path)


@pytest.mark.asyncio
async def test_fixture_must_be_a_list(tmp_path):
    for name in ("clients", "projects", "feedback", "notifications"):
        (tmp_path / f"{name}.json").write_text("[]", encoding="utf-8")
    (tmp_path / "projects.json").write_text('{"id": 1}', encoding="utf-8")

    with pytest.raises(FixtureLoadError):
        await load_fixtures(tmp_path)


def test_snapshot_file_with_invalid_utf8_is_ignored(tmp_path):
    (tmp_path / "crm_data.json").write_bytes(b"{\xff}")

    assert SnapshotRepository(JsonFileStorage(tmp_path)).load() is None


@pytest.mark.asyncio
async def test_fixture_with_invalid_utf8_fails_as_a_unit(tmp_path):
    for name in ("projects", "feedback", "notifications"):
        (tmp_path / f"{name}.json").write_text("[]", encoding="utf-8")
    (tmp_path / "clients.json").write_bytes(b"[\xff]")

    with pytest.raises(FixtureLoadError):
        await load_fixtures(tmp_path)


def test_loaded_fields_are_converted_to_declared_types():
    data = {
        "clients": [{"id": "1", "name": "A", "projects": "1"}],
        "projects": [{"id": 1, "name": "P", "clientId": "1", "budget": "1000", "progress": "5"}],
        "feedback": [{"id": 1, "clientId": 1, "projectId": 1, "rating": 4.0}],
        "notifications": [{"id": 1, "title": "T", "message": "M", "read": 0}],
    }

    store = EntityStore.from_snapshot(data)

    project = store.projects[0]
    assert (project.client_id, project.budget, project.progress) == (1, 1000, 5)
    assert store.clients[0].projects == 1
    assert store.feedback[0].rating == 4
    assert store.notifications[0].read is False


@pytest.mark.parametrize(
    "project",
    [
        {"id": 1, "name": "P", "budget": "lots"},
        {"id": 1, "name": "P", "budget": "nan"},
        {"id": 1, "name": "P", "progress": 12.5},
        {"id": 1, "name": "P", "clientId": True},
        {"id": 1, "name": ["P"]},
        {"id": 1},
    ],
)
def test_mistyped_fields_are_rejected(project):
    with pytest.raises(SnapshotFormatError):
        EntityStore.from_snapshot({"projects": [project]})


def test_duplicate_ids_are_rejected():
    with pytest.raises(SnapshotFormatError):
        EntityStore.from_snapshot({"clients": [{"id": 1, "name": "A"}, {"id": 1, "name": "B"}]})
