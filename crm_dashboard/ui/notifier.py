from __future__ import annotations

import logging
from typing import List, Tuple

import streamlit as st

logger = logging.getLogger(__name__)

TOAST_ICONS = {"success": "✅", "error": "⚠️"}


class StreamlitNotifier:
    """Queues command outcomes and shows them as toasts on the next flush.

    Commands usually end with ``st.rerun()``, so messages are kept until the
    following script run renders them.
    """

    def __init__(self) -> None:
        self.pending: List[Tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.pending.append(("success", message))

    def error(self, message: str) -> None:
        logger.warning(message)
        self.pending.append(("error", message))

    def flush(self) -> None:
        pending, self.pending = self.pending, []
        for kind, message in pending:
            st.toast(message, icon=TOAST_ICONS.get(kind))
