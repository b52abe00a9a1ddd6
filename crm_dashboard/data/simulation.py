"""
Clock and cooperative scheduler driving the simulated demo activity.

Nothing here runs in the background: the owner calls
``DemoScheduler.run_pending()`` (the Streamlit app does so on every rerun)
and every task whose due time has passed fires on the caller's thread.
Tests substitute ``ManualClock`` and a seeded ``random.Random``.
"""

from __future__ import annotations

import datetime as dt
import logging
import random
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Protocol, Tuple

if TYPE_CHECKING:
    from crm_dashboard.data.manager import DataManager

logger = logging.getLogger(__name__)

PROGRESS_TASK = "project_progress"
LEAD_TASK = "demo_lead"


class Clock(Protocol):
    def now(self) -> float:
        """Monotonic seconds."""
        ...

    def today(self) -> dt.date:
        ...


class SystemClock:
    def now(self) -> float:
        return time.monotonic()

    def today(self) -> dt.date:
        return dt.date.today()


class ManualClock:
    def __init__(self, start: float = 0.0, today: Optional[dt.date] = None) -> None:
        self._now = float(start)
        self._today = today or dt.date(2024, 1, 15)

    def now(self) -> float:
        return self._now

    def today(self) -> dt.date:
        return self._today

    def advance(self, seconds: float) -> None:
        self._now += seconds

    def set_today(self, value: dt.date) -> None:
        self._today = value


@dataclass
class PeriodicTask:
    name: str
    action: Callable[[], Any]
    interval: Callable[[], float]
    next_due: float = 0.0
    runs: int = 0


class DemoScheduler:
    def __init__(self, clock: Clock, max_catch_up: int = 5) -> None:
        self.clock = clock
        self.max_catch_up = max(1, max_catch_up)
        self.tasks: List[PeriodicTask] = []
        self.running = False

    def every(self, name: str, seconds: float, action: Callable[[], Any]) -> PeriodicTask:
        if seconds <= 0:
            raise ValueError("Task interval must be positive")
        return self._add(PeriodicTask(name=name, action=action, interval=lambda: seconds))

    def every_between(
        self,
        name: str,
        low: float,
        high: float,
        action: Callable[[], Any],
        rng: random.Random,
    ) -> PeriodicTask:
        """Schedule with a period redrawn uniformly from [low, high] after every run."""
        if low <= 0 or high < low:
            raise ValueError("Task interval bounds must satisfy 0 < low <= high")
        return self._add(PeriodicTask(name=name, action=action, interval=lambda: rng.uniform(low, high)))

    def _add(self, task: PeriodicTask) -> PeriodicTask:
        if any(existing.name == task.name for existing in self.tasks):
            raise ValueError(f"Task {task.name!r} already scheduled")
        if self.running:
            task.next_due = self.clock.now() + task.interval()
        self.tasks.append(task)
        return task

    def start(self) -> None:
        now = self.clock.now()
        for task in self.tasks:
            task.next_due = now + task.interval()
        self.running = True

    def stop(self) -> None:
        self.running = False

    def run_pending(self) -> List[Tuple[str, Any]]:
        """Fire every due task; a task that fell far behind is re-anchored to now."""
        if not self.running:
            return []
        now = self.clock.now()
        fired: List[Tuple[str, Any]] = []
        for task in self.tasks:
            runs = 0
            while task.next_due <= now and runs < self.max_catch_up:
                result = task.action()
                fired.append((task.name, result))
                task.runs += 1
                runs += 1
                task.next_due += task.interval()
            if task.next_due <= now:
                task.next_due = now + task.interval()
        return fired


def schedule_demo_updates(
    scheduler: DemoScheduler,
    manager: "DataManager",
    rng: random.Random,
    progress_interval: float = 30.0,
    lead_min: float = 45.0,
    lead_max: float = 90.0,
    lead_probability: float = 0.7,
) -> None:
    """Register the progress ticker and the random lead generator."""

    def maybe_generate_lead() -> bool:
        if rng.random() < lead_probability:
            manager.generate_demo_lead()
            return True
        return False

    scheduler.every(PROGRESS_TASK, progress_interval, manager.update_project_progress)
    scheduler.every_between(LEAD_TASK, lead_min, lead_max, maybe_generate_lead, rng)
    logger.debug(
        "Demo updates scheduled: progress every %ss, leads every %s-%ss",
        progress_interval,
        lead_min,
        lead_max,
    )
