"""
Reusable helpers for rendering data tables with consistent configuration.
"""

from __future__ import annotations

from typing import Dict, Optional

import pandas as pd
import streamlit as st

from crm_dashboard.ui.components.formatting import (
    format_currency,
    format_number,
    format_percent,
    format_rating,
)

STATUS_BADGE_COLORS = {
    "active": "#10b981",
    "completed": "#10b981",
    "pending": "#f59e0b",
    "in-progress": "#3b82f6",
    "delayed": "#ef4444",
    "inactive": "#6b7280",
    "planning": "#6b7280",
    "on-hold": "#f59e0b",
}


def _status_style(val) -> str:
    color = STATUS_BADGE_COLORS.get(str(val).lower())
    return f"color: {color}; font-weight: 600;" if color else ""


def render_table(
    df: pd.DataFrame,
    column_config: Optional[Dict[str, Dict[str, str]]] = None,
    height: int = 400,
    show_index: bool = False,
    export_file_name: Optional[str] = "export.csv",
    status_col: Optional[str] = None,
    key: Optional[str] = None,
) -> None:
    if df.empty:
        st.info("No records to display.")
        return

    formatted_df = df.copy()
    if column_config:
        for column, config in column_config.items():
            if column not in formatted_df.columns:
                continue
            fmt_type = config.get("type")
            decimals = int(config.get("decimals", 0))
            if fmt_type == "currency":
                formatted_df[column] = formatted_df[column].apply(
                    lambda v: format_currency(v, decimals=decimals)
                )
            elif fmt_type == "percent":
                formatted_df[column] = formatted_df[column].apply(
                    lambda v: format_percent(v, decimals=decimals)
                )
            elif fmt_type == "number":
                formatted_df[column] = formatted_df[column].apply(
                    lambda v: format_number(v, decimals=decimals)
                )
            elif fmt_type == "rating":
                formatted_df[column] = formatted_df[column].apply(format_rating)

    dataframe_obj = formatted_df
    if status_col and status_col in formatted_df.columns:
        dataframe_obj = formatted_df.style.map(_status_style, subset=[status_col])

    st.dataframe(
        dataframe_obj,
        use_container_width=True,
        height=height,
        hide_index=not show_index,
    )

    if export_file_name:
        csv_bytes = df.to_csv(index=show_index).encode("utf-8")
        st.download_button(
            "Download CSV",
            data=csv_bytes,
            file_name=export_file_name,
            mime="text/csv",
            key=key,
        )
