"""Plotly chart builders for the statistics dashboard."""

import plotly.express as px
import plotly.graph_objects as go
import pandas as pd
from typing import Sequence, Tuple


def occupancy_donut(occupied: int, capacity: int, title: str = "Bed Occupancy") -> go.Figure:
    """Donut chart of occupied vs available places. Overbooking shows as a full ring."""
    available = max(0, capacity - occupied)
    fig = go.Figure(data=[go.Pie(
        labels=["Occupied", "Available"],
        values=[occupied, available],
        hole=0.6,
        marker_colors=["#E8734A", "#4A90D9"],
        textinfo="percent+label",
    )])
    fig.update_layout(
        title=title,
        height=350,
        showlegend=True,
        annotations=[dict(text=f"{occupied}/{capacity}", x=0.5, y=0.5, font_size=16, showarrow=False)],
    )
    return fig


def histogram_bar(
    pairs: Sequence[Tuple[str, int]],
    label: str,
    title: str,
    color: str = "#4A90D9",
) -> go.Figure:
    """Bar chart of a (label, count) histogram, kept in the given order."""
    df = pd.DataFrame(list(pairs), columns=[label, "Workers"])
    fig = px.bar(df, x=label, y="Workers", title=title, color_discrete_sequence=[color])
    fig.update_layout(height=350, xaxis={"categoryorder": "array", "categoryarray": df[label].tolist()})
    return fig


def gender_split_bar(male: int, female: int, title: str = "Active Workers by Sex") -> go.Figure:
    fig = go.Figure(data=[go.Bar(
        x=["Male", "Female"],
        y=[male, female],
        marker_color=["#4A90D9", "#D94A8C"],
        text=[male, female],
        textposition="outside",
    )])
    fig.update_layout(title=title, height=350, yaxis_title="Workers")
    return fig
