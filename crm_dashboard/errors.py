"""
Exception types shared by the data layer and the Streamlit front-end.
"""

from __future__ import annotations

from typing import Dict, Optional


class CrmError(Exception):
    """Base class for errors raised by the CRM dashboard package."""


class ValidationError(CrmError, ValueError):
    """Raised when raw form input cannot be parsed into a typed command input."""

    def __init__(self, errors: Dict[str, str], message: Optional[str] = None) -> None:
        self.errors = dict(errors)
        if message is None:
            message = "; ".join(f"{field}: {reason}" for field, reason in self.errors.items())
        super().__init__(message)


class FixtureLoadError(CrmError):
    """Raised when the initial fixture batch cannot be loaded as a whole."""


class SnapshotFormatError(CrmError, ValueError):
    """Raised when an imported or persisted snapshot does not have the expected shape."""
