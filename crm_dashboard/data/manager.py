"""
Command/query layer over the entity store.

``DataManager`` is the only writer of the store. It keeps the referential
bookkeeping (client project counters, cascading client deletes), records
notifications and activity entries as side effects, persists a full snapshot
after every mutation and reports the outcome of each user command through a
``Notifier`` (the toast channel of the front-end).
"""

from __future__ import annotations

import json
import logging
import random
from typing import Any, List, Mapping, Optional, Protocol, Union

from crm_dashboard.data.entities import (
    Activity,
    Client,
    DashboardStats,
    Feedback,
    Notification,
    Project,
)
from crm_dashboard.data.persistence import SnapshotRepository
from crm_dashboard.data.simulation import Clock, SystemClock
from crm_dashboard.data.store import COLLECTIONS, MAX_ACTIVITIES, EntityStore
from crm_dashboard.data.validation import (
    ClientInput,
    FeedbackInput,
    ProjectInput,
    parse_client_input,
    parse_client_patch,
    parse_feedback_input,
    parse_project_input,
    parse_project_patch,
)
from crm_dashboard.errors import SnapshotFormatError

logger = logging.getLogger(__name__)

DEMO_LEAD_COMPANIES = (
    "GreenTech Solutions",
    "Urban Design Collective",
    "Modern Living Inc.",
    "Sustainable Builders",
    "Future Spaces LLC",
    "Eco Architecture Group",
)

DEMO_LEAD_PROJECTS = (
    "commercial building design",
    "residential complex planning",
    "office renovation",
    "hotel design",
    "hospital extension",
    "retail space planning",
)

MAX_PROGRESS_STEP = 5


class Notifier(Protocol):
    def success(self, message: str) -> None:
        ...

    def error(self, message: str) -> None:
        ...


class LoggingNotifier:
    """Notifier used outside the UI: toasts only end up in the log."""

    def success(self, message: str) -> None:
        logger.info(message)

    def error(self, message: str) -> None:
        logger.warning(message)


class DataManager:
    def __init__(
        self,
        store: Optional[EntityStore] = None,
        repository: Optional[SnapshotRepository] = None,
        notifier: Optional[Notifier] = None,
        clock: Optional[Clock] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.store = store if store is not None else EntityStore.default()
        self.repository = repository
        self.notifier: Notifier = notifier or LoggingNotifier()
        self.clock: Clock = clock or SystemClock()
        self.rng = rng or random.Random()

    # ------------------------------------------------------------------ state

    def save(self) -> None:
        if self.repository is not None:
            self.repository.save(self.store)

    def replace_store(self, store: EntityStore) -> None:
        self.store = store

    def _today(self) -> str:
        return self.clock.today().isoformat()

    def _record_notification(self, title: str, message: str, type: str = "info") -> Notification:
        notification = Notification(
            id=self.store.allocate_id("notifications"),
            title=title,
            message=message,
            type=type,
        )
        self.store.notifications.insert(0, notification)
        return notification

    def _record_activity(self, action: str, details: str, icon: str) -> Activity:
        activity = Activity(
            id=self.store.allocate_id("activities"),
            action=action,
            details=details,
            icon=icon,
        )
        self.store.activities.insert(0, activity)
        del self.store.activities[MAX_ACTIVITIES:]
        return activity

    # ---------------------------------------------------------------- clients

    def add_client(self, data: Union[ClientInput, Mapping[str, Any]]) -> Client:
        if not isinstance(data, ClientInput):
            data = parse_client_input(data)
        client = Client(
            id=self.store.allocate_id("clients"),
            name=data.name,
            email=data.email,
            company=data.company,
            phone=data.phone,
            status=data.status,
            join_date=self._today(),
            projects=0,
        )
        self.store.clients.append(client)
        self._record_notification("New Client", f"{client.name} has been added as a new client", "lead")
        self._record_activity("Client Added", f"{client.name} added to database", "user-plus")
        self.save()
        logger.info("Client %s added (id=%s)", client.name, client.id)
        self.notifier.success(f"Client {client.name} added successfully!")
        return client

    def update_client(self, client_id: int, patch: Mapping[str, Any]) -> Optional[Client]:
        changes = parse_client_patch(patch)
        client = self.get_client_by_id(client_id)
        if client is None:
            self.notifier.error("Client not found")
            return None
        for key, value in changes.items():
            setattr(client, key, value)
        self.save()
        self.notifier.success("Client updated successfully!")
        return client

    def delete_client(self, client_id: int) -> bool:
        client = self.get_client_by_id(client_id)
        if client is None:
            self.notifier.error("Client not found")
            return False
        self.store.clients.remove(client)
        # Feedback on the removed projects is intentionally left in place.
        self.store.projects = [p for p in self.store.projects if p.client_id != client_id]
        self._record_notification("Client Removed", f"{client.name} has been removed from the system", "project")
        self._record_activity("Client Deleted", f"{client.name} removed from database", "user-minus")
        self.save()
        logger.info("Client %s deleted (id=%s)", client.name, client.id)
        self.notifier.success(f"Client {client.name} deleted successfully!")
        return True

    # --------------------------------------------------------------- projects

    def add_project(self, data: Union[ProjectInput, Mapping[str, Any]]) -> Optional[Project]:
        if not isinstance(data, ProjectInput):
            data = parse_project_input(data)
        client = self.get_client_by_id(data.client_id)
        if client is None:
            self.notifier.error("Client not found")
            return None
        project = Project(
            id=self.store.allocate_id("projects"),
            name=data.name,
            client_id=client.id,
            client_name=client.name,
            due_date=data.due_date,
            status=data.status,
            progress=data.progress,
            budget=data.budget,
            description=data.description,
        )
        self.store.projects.append(project)
        client.projects += 1
        self._record_notification("New Project", f"{project.name} has been added", "project")
        self._record_activity("Project Created", f"{project.name} added to portfolio", "folder-plus")
        self.save()
        logger.info("Project %s added for client %s", project.name, client.id)
        self.notifier.success(f"Project {project.name} added successfully!")
        return project

    def update_project(self, project_id: int, patch: Mapping[str, Any]) -> Optional[Project]:
        changes = parse_project_patch(patch)
        project = self.get_project_by_id(project_id)
        if project is None:
            self.notifier.error("Project not found")
            return None
        old_status = project.status
        for key, value in changes.items():
            setattr(project, key, value)
        if old_status != "completed" and project.status == "completed":
            self._record_notification("Project Completed", f"{project.name} has been completed", "project")
        self.save()
        self.notifier.success("Project updated successfully!")
        return project

    def delete_project(self, project_id: int) -> bool:
        project = self.get_project_by_id(project_id)
        if project is None:
            self.notifier.error("Project not found")
            return False
        self.store.projects.remove(project)
        client = self.get_client_by_id(project.client_id)
        if client is not None and client.projects > 0:
            client.projects -= 1
        self._record_notification("Project Removed", f"{project.name} has been deleted", "project")
        self._record_activity("Project Deleted", f"{project.name} removed from portfolio", "folder-minus")
        self.save()
        logger.info("Project %s deleted (id=%s)", project.name, project.id)
        self.notifier.success(f"Project {project.name} deleted successfully!")
        return True

    # --------------------------------------------------------------- feedback

    def add_feedback(self, data: Union[FeedbackInput, Mapping[str, Any]]) -> Optional[Feedback]:
        if not isinstance(data, FeedbackInput):
            data = parse_feedback_input(data)
        client = self.get_client_by_id(data.client_id)
        project = self.get_project_by_id(data.project_id)
        if client is None or project is None:
            self.notifier.error("Client or project not found")
            return None
        feedback = Feedback(
            id=self.store.allocate_id("feedback"),
            client_id=client.id,
            project_id=project.id,
            client_name=client.name,
            project_name=project.name,
            rating=data.rating,
            comments=data.comments,
            date=self._today(),
        )
        self.store.feedback.append(feedback)
        self._record_notification("New Feedback", f"{client.name} submitted feedback for {project.name}", "feedback")
        self._record_activity("Feedback Submitted", f"{client.name} rated {project.name}", "message-square")
        self.save()
        self.notifier.success("Feedback submitted successfully!")
        return feedback

    def delete_feedback(self, feedback_id: int) -> bool:
        feedback = self.get_feedback_by_id(feedback_id)
        if feedback is None:
            self.notifier.error("Feedback not found")
            return False
        # No notification or activity entry for feedback removal.
        self.store.feedback.remove(feedback)
        self.save()
        self.notifier.success("Feedback deleted successfully!")
        return True

    # ---------------------------------------------------------- notifications

    def add_notification(self, title: str, message: str, type: str = "info") -> Notification:
        notification = self._record_notification(title, message, type)
        self.save()
        return notification

    def mark_notification_as_read(self, notification_id: int) -> bool:
        notification = next((n for n in self.store.notifications if n.id == notification_id), None)
        if notification is None:
            return False
        notification.read = True
        self.save()
        return True

    def mark_all_notifications_as_read(self) -> int:
        changed = 0
        for notification in self.store.notifications:
            if not notification.read:
                notification.read = True
                changed += 1
        self.save()
        return changed

    def delete_notification(self, notification_id: int) -> bool:
        notification = next((n for n in self.store.notifications if n.id == notification_id), None)
        if notification is None:
            return False
        self.store.notifications.remove(notification)
        self.save()
        return True

    def get_unread_notification_count(self) -> int:
        return sum(1 for n in self.store.notifications if not n.read)

    # ------------------------------------------------------------- activities

    def add_activity(self, action: str, details: str, icon: str) -> Activity:
        activity = self._record_activity(action, details, icon)
        self.save()
        return activity

    # ----------------------------------------------------------------- queries

    def get_stats(self) -> DashboardStats:
        projects = self.store.projects
        projects_with_feedback = {f.project_id for f in self.store.feedback}
        return DashboardStats(
            total_clients=len(self.store.clients),
            total_projects=len(projects),
            pending_feedback=sum(1 for p in projects if p.id not in projects_with_feedback),
            total_revenue=sum(p.budget or 0 for p in projects),
            completed_projects=sum(1 for p in projects if p.status == "completed"),
            in_progress_projects=sum(1 for p in projects if p.status == "in-progress"),
            delayed_projects=sum(1 for p in projects if p.status == "delayed"),
        )

    def get_client_by_id(self, client_id: int) -> Optional[Client]:
        return next((c for c in self.store.clients if c.id == client_id), None)

    def get_project_by_id(self, project_id: int) -> Optional[Project]:
        return next((p for p in self.store.projects if p.id == project_id), None)

    def get_feedback_by_id(self, feedback_id: int) -> Optional[Feedback]:
        return next((f for f in self.store.feedback if f.id == feedback_id), None)

    def get_projects_by_client(self, client_id: int) -> List[Project]:
        return [p for p in self.store.projects if p.client_id == client_id]

    def get_feedback_by_project(self, project_id: int) -> List[Feedback]:
        return [f for f in self.store.feedback if f.project_id == project_id]

    # -------------------------------------------------------------- simulation

    def update_project_progress(self) -> bool:
        """Advance every in-progress project by 1-5 points; returns True if any changed."""
        changed = False
        for project in self.store.projects:
            if project.status != "in-progress" or project.progress >= 100:
                continue
            step = self.rng.randint(1, MAX_PROGRESS_STEP)
            project.progress = min(100, project.progress + step)
            changed = True
            if project.progress == 100:
                project.status = "completed"
                self._record_notification(
                    "Project Completed", f"{project.name} has been marked as completed", "project"
                )
                self._record_activity("Project Completed", f"{project.name} finished successfully", "check-circle")
                logger.info("Project %s reached 100%% and was completed", project.name)
        if changed:
            self.save()
        return changed

    def generate_demo_lead(self) -> Notification:
        company = self.rng.choice(DEMO_LEAD_COMPANIES)
        project_type = self.rng.choice(DEMO_LEAD_PROJECTS)
        notification = self._record_notification(
            "New Lead", f"New inquiry from {company} about {project_type}", "lead"
        )
        self.save()
        self.notifier.success(f"New lead from {company}!")
        return notification

    # ---------------------------------------------------------- import/export

    def export_json(self) -> str:
        data, _ = self.store.to_snapshot()
        return json.dumps(data, indent=2)

    def import_json(self, text: str) -> EntityStore:
        """Replace all collections with an exported data set; counters only move forward."""
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            self.notifier.error("Failed to import data. Invalid file format.")
            raise SnapshotFormatError(f"Invalid JSON: {exc}") from exc
        if not isinstance(payload, dict) or not any(name in payload for name in COLLECTIONS):
            self.notifier.error("Failed to import data. Invalid file format.")
            raise SnapshotFormatError("Imported data must be an object with CRM collections")
        try:
            store = EntityStore.from_snapshot(payload, self.store.next_id)
        except SnapshotFormatError:
            self.notifier.error("Failed to import data. Invalid file format.")
            raise
        self.store = store
        self.save()
        logger.info("Imported data set with %d clients and %d projects", len(store.clients), len(store.projects))
        self.notifier.success("Data imported successfully!")
        return store
