"""
Bootstrap environment for Streamlit Cloud & local dev:
- Flatten st.secrets into uppercase os.environ keys (nested -> PREFIX_CHILD)
- Finally, load .env (without overriding existing env vars)
"""

from __future__ import annotations

import logging
import os
import re
from typing import Iterator, Mapping, Tuple

import streamlit as st
from dotenv import load_dotenv

logger = logging.getLogger(__name__)


def _sanitize_key(key: str) -> str:
    # Uppercase and replace non-alphanumeric with underscores
    return re.sub(r"[^A-Za-z0-9_]", "_", key.upper())


def _flatten_secrets(prefix: str, val) -> Iterator[Tuple[str, str]]:
    if isinstance(val, Mapping):
        for k, v in val.items():
            yield from _flatten_secrets(f"{prefix}_{k}", v)
    else:
        yield _sanitize_key(prefix), str(val)


def _bridge_secrets_to_env() -> None:
    # st.secrets raises when no secrets.toml exists outside Streamlit Cloud
    try:
        secrets = st.secrets.to_dict()
    except (FileNotFoundError, AttributeError):
        return
    except Exception as exc:  # streamlit raises its own StreamlitSecretNotFoundError
        logger.debug("No Streamlit secrets available: %s", exc)
        return

    for key, value in secrets.items():
        for flat_k, flat_v in _flatten_secrets(key, value):
            os.environ.setdefault(flat_k, flat_v)


def ensure_env() -> None:
    """Idempotent: make sure env vars are available.
    Safe to call multiple times, both inside and outside Streamlit runtime.
    """
    _bridge_secrets_to_env()
    # load_dotenv will not override existing env vars by default
    load_dotenv()


# Execute on import for Streamlit main process, but also allow explicit calls elsewhere.
ensure_env()
