"""
Utility helpers for formatting numeric values, currency strings, and percentages.
"""

from __future__ import annotations

from typing import Optional

SCALE_FACTORS = [
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
]

PLACEHOLDER = "–"


def format_number(value: Optional[float], decimals: int = 0) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        return f"{value:,.{decimals}f}"
    except (TypeError, ValueError):
        return PLACEHOLDER


def _scale_value(value: float):
    for factor, suffix in SCALE_FACTORS:
        if abs(value) >= factor:
            return value / factor, suffix
    return value, ""


def format_currency(
    value: Optional[float],
    symbol: str = "$",
    decimals: int = 0,
    compact: bool = False,
) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        numeric = float(value)
    except (TypeError, ValueError):
        return PLACEHOLDER

    suffix = ""
    display_value = numeric
    if compact:
        display_value, suffix = _scale_value(numeric)
        if suffix and decimals == 0:
            decimals = 1
    sign = "-" if display_value < 0 else ""
    formatted = f"{abs(display_value):,.{decimals}f}"
    return f"{sign}{symbol}{formatted}{suffix}"


def format_percent(value: Optional[float], decimals: int = 1) -> str:
    if value is None:
        return PLACEHOLDER
    try:
        return f"{value:.{decimals}f}%"
    except (TypeError, ValueError):
        return PLACEHOLDER


def format_rating(value: Optional[float]) -> str:
    """Render a 1-5 rating as filled/empty stars, e.g. ``★★★★☆``."""
    if value is None:
        return PLACEHOLDER
    try:
        stars = max(0, min(5, int(round(float(value)))))
    except (TypeError, ValueError):
        return PLACEHOLDER
    return "★" * stars + "☆" * (5 - stars)
