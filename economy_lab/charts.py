"""Plotly figure builders used by the dashboard."""

from typing import Dict, Optional, Sequence

import pandas as pd
import plotly.express as px
import plotly.graph_objects as go

COLORS = px.colors.qualitative.Set2

# Common layout for all charts
CHART_THEME = dict(
    template="simple_white",
    paper_bgcolor="rgba(0,0,0,0)",
    plot_bgcolor="rgba(0,0,0,0)",
    font=dict(color="#262730"),
)

STABILITY_COLORS = {
    "Stable": "#22c55e",
    "Strained": "#eab308",
    "Unstable": "#f97316",
    "Critical": "#ef4444",
}


def line_chart(x, y, title, yaxis, color="#1f77b4", fmt=None, marker_index: Optional[int] = None):
    fig = go.Figure()
    hover = "%{y:.1f}" if fmt is None else fmt
    fig.add_trace(
        go.Scatter(
            x=x, y=y, mode="lines", line=dict(color=color, width=2.5),
            hovertemplate=hover + "<extra></extra>",
        )
    )
    if marker_index is not None and 0 <= marker_index < len(y):
        # Highlight the year the timeline is scrubbed to
        fig.add_trace(
            go.Scatter(
                x=[x[marker_index]], y=[y[marker_index]], mode="markers",
                marker=dict(size=9, color="red", symbol="diamond",
                            line=dict(width=1, color="#333")),
                hoverinfo="skip",
                showlegend=False,
            )
        )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text=title, font=dict(size=14)),
        yaxis_title=yaxis, height=320,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
    )
    return fig


def multi_line(x, series_dict: Dict[str, Sequence[float]], title, yaxis, height=340):
    fig = go.Figure()
    for i, (name, vals) in enumerate(series_dict.items()):
        fig.add_trace(
            go.Scatter(
                x=x, y=list(vals), name=name, mode="lines",
                line=dict(color=COLORS[i % len(COLORS)], width=2),
            )
        )
    fig.update_layout(
        **CHART_THEME,
        title=dict(text=title, font=dict(size=14)),
        yaxis_title=yaxis, height=height,
        margin=dict(l=50, r=20, t=35, b=30),
        hovermode="x unified",
        legend=dict(orientation="h", yanchor="bottom", y=-0.35, font=dict(size=10)),
    )
    return fig


def employment_change_chart(employment: pd.DataFrame, title="Employment Change from Baseline (%)"):
    """Percent change of each occupation's employment against its first-year value."""
    base = employment.iloc[0].where(employment.iloc[0] > 0)
    pct = (employment / base - 1) * 100
    series = {name: pct[name].fillna(0.0).tolist() for name in pct.columns}
    return multi_line(list(employment.index), series, title, "% Change", height=420)


def stability_breakdown_chart(stability: pd.DataFrame):
    """Stacked bars of the points each component deducts from 100."""
    fig = go.Figure()
    parts = [
        ("unemployment_penalty", "Unemployment", "#d62728"),
        ("disruption_penalty", "Disruption", "#ff7f0e"),
        ("inequality_penalty", "Inequality", "#9467bd"),
    ]
    for col, name, color in parts:
        fig.add_trace(go.Bar(x=list(stability.index), y=stability[col], name=name, marker_color=color))
    fig.update_layout(
        **CHART_THEME,
        title=dict(text="Stability Penalties (points below 100)", font=dict(size=14)),
        barmode="stack", height=320,
        margin=dict(l=50, r=20, t=35, b=30),
        legend=dict(orientation="h", yanchor="bottom", y=-0.3),
    )
    return fig
