"""
Plotly chart factory functions with consistent styling for the dashboard.
"""

from __future__ import annotations

from typing import Dict, List, Optional

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go
import streamlit as st


DEFAULT_TEMPLATE = "plotly_white"
DEFAULT_COLOR_SEQUENCE = [
    "#3b82f6",  # blue
    "#10b981",  # green
    "#f59e0b",  # amber
    "#ef4444",  # red
    "#8b5cf6",
    "#6b7280",
]
STATUS_COLORS = {
    "Completed": "#10b981",
    "In Progress": "#3b82f6",
    "Delayed": "#ef4444",
    "Planning": "#6b7280",
    "On Hold": "#f59e0b",
}


def _configure_layout(
    fig: go.Figure,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    yaxis_tickformat: Optional[str] = None,
    legend_title: Optional[str] = None,
) -> go.Figure:
    fig.update_layout(
        template=DEFAULT_TEMPLATE,
        colorway=DEFAULT_COLOR_SEQUENCE,
        title=title,
        legend_title=legend_title,
        margin=dict(l=40, r=20, t=60, b=40),
    )
    if yaxis_title:
        fig.update_yaxes(title=yaxis_title)
    if yaxis_tickformat:
        fig.update_yaxes(tickformat=yaxis_tickformat)
    fig.update_xaxes(showgrid=False)
    fig.update_yaxes(showgrid=True, zeroline=True)
    return fig


def render_plotly(fig: go.Figure, key: Optional[str] = None) -> None:
    st.plotly_chart(fig, use_container_width=True, config={"displayModeBar": False}, key=key)


def line_chart(
    df: pd.DataFrame,
    x: str,
    y: str,
    color: Optional[str] = None,
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    yaxis_tickformat: Optional[str] = None,
    markers: bool = True,
) -> go.Figure:
    fig = px.line(df, x=x, y=y, color=color, markers=markers)
    fig = _configure_layout(fig, title, yaxis_title, yaxis_tickformat)
    fig.update_layout(hovermode="x unified")
    return fig


def bar_chart(
    df: pd.DataFrame,
    x: str,
    y: str,
    color: Optional[str] = None,
    orientation: str = "v",
    title: Optional[str] = None,
    yaxis_title: Optional[str] = None,
    yaxis_tickformat: Optional[str] = None,
    color_discrete_map: Optional[Dict[str, str]] = None,
    range_x: Optional[List[float]] = None,
    text_auto: bool = False,
) -> go.Figure:
    fig = px.bar(
        df,
        x=x,
        y=y,
        color=color,
        orientation=orientation,
        color_discrete_map=color_discrete_map,
        range_x=range_x,
        text_auto=text_auto,
    )
    fig = _configure_layout(fig, title, yaxis_title, yaxis_tickformat)
    if text_auto:
        fig.update_traces(textposition="outside", cliponaxis=False)
    return fig


def donut_chart(
    df: pd.DataFrame,
    names: str,
    values: str,
    title: Optional[str] = None,
    color_discrete_map: Optional[Dict[str, str]] = None,
) -> go.Figure:
    fig = px.pie(
        df,
        names=names,
        values=values,
        hole=0.6,
        color=names,
        color_discrete_map=color_discrete_map or {},
    )
    fig = _configure_layout(fig, title)
    total = int(df[values].sum()) if not df.empty else 0
    fig.update_layout(annotations=[dict(text=f"Total<br>{total}", showarrow=False, font_size=16)])
    return fig


def timeline_chart(
    df: pd.DataFrame,
    start: str,
    end: str,
    y: str,
    color: Optional[str] = None,
    title: Optional[str] = None,
) -> go.Figure:
    fig = px.timeline(
        df,
        x_start=start,
        x_end=end,
        y=y,
        color=color,
        color_discrete_map=STATUS_COLORS,
        hover_data=[c for c in ("Progress",) if c in df.columns],
    )
    fig.update_yaxes(autorange="reversed")
    return _configure_layout(fig, title)
