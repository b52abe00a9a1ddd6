from __future__ import annotations

from dataclasses import dataclass

from crm_dashboard.context import AppContext
from crm_dashboard.data.manager import DataManager
from crm_dashboard.data.store import EntityStore


@dataclass
class PageContext:
    app: AppContext

    @property
    def manager(self) -> DataManager:
        return self.app.manager

    @property
    def store(self) -> EntityStore:
        return self.app.manager.store
