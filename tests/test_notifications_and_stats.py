from crm_dashboard.data.entities import DashboardStats
from crm_dashboard.data.store import MAX_ACTIVITIES


def test_notifications_are_prepended_and_unread(manager):
    first = manager.add_notification("One", "first")
    second = manager.add_notification("Two", "second", "financial")

    assert manager.store.notifications == [second, first]
    assert first.type == "info"
    assert first.time == "Just now"
    assert manager.get_unread_notification_count() == 2


def test_mark_notification_as_read(manager):
    notification = manager.add_notification("One", "first")

    assert manager.mark_notification_as_read(notification.id) is True
    assert notification.read is True
    assert manager.get_unread_notification_count() == 0
    assert manager.mark_notification_as_read(999) is False


def test_mark_all_and_delete(manager):
    for i in range(3):
        manager.add_notification(f"N{i}", "msg")
    target = manager.store.notifications[1]

    assert manager.mark_all_notifications_as_read() == 3
    assert manager.get_unread_notification_count() == 0
    assert manager.delete_notification(target.id) is True
    assert target not in manager.store.notifications
    assert manager.delete_notification(target.id) is False


def test_activity_log_is_bounded(manager):
    for i in range(MAX_ACTIVITIES):
        manager.add_activity(f"A{i}", "details", "info")
    oldest = manager.store.activities[-1]
    assert len(manager.store.activities) == MAX_ACTIVITIES

    newest = manager.add_activity("Eleventh", "details", "info")

    assert len(manager.store.activities) == MAX_ACTIVITIES
    assert manager.store.activities[0] is newest
    assert oldest not in manager.store.activities


def test_activity_bound_holds_across_commands(manager):
    for i in range(15):
        manager.add_client({"name": f"Client {i}"})
    assert len(manager.store.activities) == MAX_ACTIVITIES


def test_stats_on_empty_store(manager):
    assert manager.get_stats() == DashboardStats(0, 0, 0, 0, 0, 0, 0)


def test_stats_aggregate_current_state(manager, client):
    p1 = manager.add_project({"name": "A", "client_id": client.id, "budget": 1000, "status": "completed"})
    p2 = manager.add_project({"name": "B", "client_id": client.id, "budget": "2500", "status": "in-progress"})
    manager.add_project({"name": "C", "client_id": client.id, "status": "delayed"})
    manager.add_feedback({"client_id": client.id, "project_id": p1.id, "rating": 5})
    manager.add_feedback({"client_id": client.id, "project_id": p1.id, "rating": 4})

    stats = manager.get_stats()

    assert stats.total_clients == 1
    assert stats.total_projects == 3
    assert stats.pending_feedback == 2
    assert stats.total_revenue == 3500
    assert stats.completed_projects == 1
    assert stats.in_progress_projects == 1
    assert stats.delayed_projects == 1

    manager.delete_project(p2.id)
    assert manager.get_stats().total_revenue == 1000


def test_lookups(manager, client, project):
    assert manager.get_client_by_id(client.id) is client
    assert manager.get_project_by_id(project.id) is project
    assert manager.get_projects_by_client(client.id) == [project]
    assert manager.get_projects_by_client(999) == []
    assert manager.get_feedback_by_project(project.id) == []
    assert manager.get_feedback_by_id(1) is None
