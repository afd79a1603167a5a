from typing import List

import plotly.graph_objects as go

from .models import TechnicianPerformance, TrendPoint

CHART_COLORS = ["#2563eb", "#16a34a", "#f59e0b", "#9333ea", "#e11d48"]
CHART_HEIGHT = 300


def _base_layout(fig: go.Figure) -> go.Figure:
    fig.update_layout(
        height=CHART_HEIGHT,
        margin=dict(l=40, r=20, t=20, b=40),
        paper_bgcolor="rgba(0,0,0,0)",
        plot_bgcolor="rgba(0,0,0,0)",
        legend=dict(orientation="h", y=-0.2),
    )
    return fig


def trend_figure(trends: List[TrendPoint]) -> go.Figure:
    """Total vs completed jobs per day."""
    dates = [point.date for point in trends]
    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=dates, y=[point.total_jobs for point in trends],
        mode="lines+markers", name="Total Jobs", line=dict(color=CHART_COLORS[0]),
    ))
    fig.add_trace(go.Scatter(
        x=dates, y=[point.completed_jobs for point in trends],
        mode="lines+markers", name="Completed Jobs", line=dict(color=CHART_COLORS[1]),
    ))
    return _base_layout(fig)


def performance_figure(performance: List[TechnicianPerformance]) -> go.Figure:
    fig = go.Figure(go.Bar(
        x=[p.technician_name for p in performance],
        y=[p.jobs_completed for p in performance],
        name="Jobs Completed",
        marker_color=CHART_COLORS[0],
    ))
    return _base_layout(fig)


def average_time_figure(performance: List[TechnicianPerformance]) -> go.Figure:
    """Average hours per job for each technician, one slice per technician."""
    fig = go.Figure(go.Pie(
        labels=[f"{p.technician_name}: {p.average_time:.1f}h" for p in performance],
        values=[p.average_time for p in performance],
        marker=dict(colors=[CHART_COLORS[i % len(CHART_COLORS)] for i in range(len(performance))]),
        textinfo="label",
        sort=False,
    ))
    return _base_layout(fig)


def to_fragment(fig: go.Figure) -> str:
    """Renders a figure as an embeddable <div>; plotly.js is loaded once by the page."""
    return fig.to_html(full_html=False, include_plotlyjs=False)
