"""
Simulated demo activity driven by a manual clock and seeded randomness.
"""
import random

import pytest

from crm_dashboard.data.manager import DEMO_LEAD_COMPANIES, DEMO_LEAD_PROJECTS
from crm_dashboard.data.simulation import (
    LEAD_TASK,
    PROGRESS_TASK,
    DemoScheduler,
    ManualClock,
    schedule_demo_updates,
)


def test_progress_never_decreases_and_caps_at_100(manager, client):
    projects = [
        manager.add_project({"name": f"P{i}", "client_id": client.id, "status": "in-progress", "progress": p})
        for i, p in enumerate([0, 50, 97, 99])
    ]
    idle = manager.add_project({"name": "Idle", "client_id": client.id, "status": "planning", "progress": 10})

    for _ in range(200):
        before = {p.id: p.progress for p in projects}
        manager.update_project_progress()
        for p in projects:
            assert before[p.id] <= p.progress <= 100

    assert all(p.progress == 100 and p.status == "completed" for p in projects)
    assert idle.progress == 10


def test_completion_emits_exactly_one_notification(manager, client):
    project = manager.add_project(
        {"name": "Nearly", "client_id": client.id, "status": "in-progress", "progress": 99}
    )

    assert manager.update_project_progress() is True
    assert project.progress == 100
    assert project.status == "completed"
    completions = [n for n in manager.store.notifications if n.title == "Project Completed"]
    assert len(completions) == 1
    assert manager.store.activities[0].action == "Project Completed"

    assert manager.update_project_progress() is False
    completions = [n for n in manager.store.notifications if n.title == "Project Completed"]
    assert len(completions) == 1


def test_progress_step_is_between_one_and_five(manager, client):
    project = manager.add_project({"name": "Step", "client_id": client.id, "status": "in-progress"})
    for _ in range(10):
        before = project.progress
        manager.update_project_progress()
        assert 1 <= project.progress - before <= 5


def test_no_in_progress_projects_means_no_change(manager, client, storage):
    manager.add_project({"name": "Plan", "client_id": client.id, "status": "planning"})
    storage.items.clear()
    assert manager.update_project_progress() is False
    assert storage.items == {}


def test_generate_demo_lead_creates_no_entities(manager, client, notifier):
    clients_before = list(manager.store.clients)

    notification = manager.generate_demo_lead()

    assert manager.store.clients == clients_before
    assert notification.type == "lead"
    assert notification.title == "New Lead"
    assert any(company in notification.message for company in DEMO_LEAD_COMPANIES)
    assert any(kind in notification.message for kind in DEMO_LEAD_PROJECTS)
    assert notifier.messages[-1][0] == "success"


def test_scheduler_fires_when_due():
    clock = ManualClock()
    scheduler = DemoScheduler(clock)
    calls = []
    scheduler.every("tick", 30, lambda: calls.append(clock.now()))
    scheduler.start()

    assert scheduler.run_pending() == []
    clock.advance(29)
    assert scheduler.run_pending() == []
    clock.advance(1)
    assert [name for name, _ in scheduler.run_pending()] == ["tick"]
    clock.advance(65)
    assert len(scheduler.run_pending()) == 2
    assert calls == [30, 95, 95]


def test_scheduler_caps_catch_up():
    clock = ManualClock()
    scheduler = DemoScheduler(clock, max_catch_up=3)
    scheduler.every("tick", 10, lambda: True)
    scheduler.start()

    clock.advance(1000)
    assert len(scheduler.run_pending()) == 3
    assert scheduler.tasks[0].next_due == 1010
    assert scheduler.run_pending() == []


def test_scheduler_does_nothing_until_started_or_after_stop():
    clock = ManualClock()
    scheduler = DemoScheduler(clock)
    scheduler.every("tick", 1, lambda: True)
    clock.advance(5)
    assert scheduler.run_pending() == []

    scheduler.start()
    scheduler.stop()
    clock.advance(5)
    assert scheduler.run_pending() == []


def test_variable_period_stays_within_bounds():
    clock = ManualClock()
    scheduler = DemoScheduler(clock)
    task = scheduler.every_between("lead", 45, 90, lambda: None, random.Random(7))
    scheduler.start()
    assert 45 <= task.next_due - clock.now() <= 90
    for _ in range(20):
        previous_due = task.next_due
        clock.advance(previous_due - clock.now() + 0.001)
        assert len(scheduler.run_pending()) == 1
        assert 45 <= task.next_due - previous_due <= 90


def test_duplicate_task_names_rejected():
    scheduler = DemoScheduler(ManualClock())
    scheduler.every("tick", 1, lambda: None)
    with pytest.raises(ValueError):
        scheduler.every("tick", 2, lambda: None)


def test_demo_updates_drive_manager(manager, client, clock):
    project = manager.add_project({"name": "Live", "client_id": client.id, "status": "in-progress"})
    scheduler = DemoScheduler(clock)
    schedule_demo_updates(scheduler, manager, random.Random(3), lead_probability=1.0)
    scheduler.start()

    clock.advance(90)
    fired = [name for name, _ in scheduler.run_pending()]

    assert fired.count(PROGRESS_TASK) == 3
    assert fired.count(LEAD_TASK) >= 1
    assert project.progress >= 3
    assert any(n.title == "New Lead" for n in manager.store.notifications)


def test_lead_probability_zero_never_generates(manager, clock):
    scheduler = DemoScheduler(clock)
    schedule_demo_updates(scheduler, manager, random.Random(3), lead_probability=0.0)
    scheduler.start()
    clock.advance(600)
    scheduler.run_pending()
    assert not any(n.title == "New Lead" for n in manager.store.notifications)
