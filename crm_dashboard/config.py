"""
Application-wide configuration constants and helper utilities.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass(frozen=True)
class TabConfig:
    key: str
    label: str


# Ordered tab definitions for the dashboard
TABS: List[TabConfig] = [
    TabConfig("dashboard", "Dashboard"),
    TabConfig("clients", "Clients"),
    TabConfig("projects", "Projects"),
    TabConfig("feedback", "Feedback"),
    TabConfig("analytics", "Analytics"),
    TabConfig("notifications", "Notifications"),
]


@dataclass(frozen=True)
class Settings:
    fixtures_dir: Optional[Path] = None
    storage_dir: Path = Path(".crm_storage")
    progress_interval_seconds: float = 30.0
    lead_min_seconds: float = 45.0
    lead_max_seconds: float = 90.0
    lead_probability: float = 0.7
    random_seed: Optional[int] = None
    demo_updates: bool = True
    restore_first: bool = False
    log_level: str = "INFO"


DEFAULT_SETTINGS = Settings()


def _env_float(name: str, default: float, minimum: float = 0.0) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s", name, raw, default)
        return default
    if value < minimum:
        logger.warning("Ignoring %s=%r: below %s, using %s", name, raw, minimum, default)
        return default
    return value


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return None


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def load_settings() -> Settings:
    """Build settings from CRM_* environment variables (after bootstrap_env has run)."""
    fixtures_dir = os.getenv("CRM_FIXTURES_DIR")
    lead_min = _env_float("CRM_LEAD_MIN_SECONDS", DEFAULT_SETTINGS.lead_min_seconds, minimum=1.0)
    lead_max = _env_float("CRM_LEAD_MAX_SECONDS", DEFAULT_SETTINGS.lead_max_seconds, minimum=1.0)
    if lead_max < lead_min:
        logger.warning("CRM_LEAD_MAX_SECONDS below CRM_LEAD_MIN_SECONDS; using %s for both", lead_min)
        lead_max = lead_min
    probability = _env_float("CRM_LEAD_PROBABILITY", DEFAULT_SETTINGS.lead_probability)
    if probability > 1:
        logger.warning("CRM_LEAD_PROBABILITY above 1; clamping")
        probability = 1.0
    return Settings(
        fixtures_dir=Path(fixtures_dir) if fixtures_dir else None,
        storage_dir=Path(os.getenv("CRM_STORAGE_DIR") or DEFAULT_SETTINGS.storage_dir),
        progress_interval_seconds=_env_float(
            "CRM_PROGRESS_INTERVAL_SECONDS", DEFAULT_SETTINGS.progress_interval_seconds, minimum=1.0
        ),
        lead_min_seconds=lead_min,
        lead_max_seconds=lead_max,
        lead_probability=probability,
        random_seed=_env_int("CRM_RANDOM_SEED"),
        demo_updates=_env_bool("CRM_DEMO_UPDATES", DEFAULT_SETTINGS.demo_updates),
        restore_first=_env_bool("CRM_RESTORE_FIRST", DEFAULT_SETTINGS.restore_first),
        log_level=(os.getenv("CRM_LOG_LEVEL") or DEFAULT_SETTINGS.log_level).upper(),
    )


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stream handler to the package logger (idempotent)."""
    package_logger = logging.getLogger("crm_dashboard")
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if not any(getattr(h, "_crm_handler", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._crm_handler = True  # type: ignore[attr-defined]
        package_logger.addHandler(handler)
