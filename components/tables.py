"""Dataframe builders and display helpers."""

import streamlit as st
import pandas as pd
from typing import List, Optional
from models.metrics import MetricsSnapshot
from models.occupancy import RoomInconsistency, RoomWriteFailure


def snapshot_table(snapshot: MetricsSnapshot) -> pd.DataFrame:
    """The snapshot as a two-column Metric/Value table, in field order."""
    flat = snapshot.to_flat_dict()
    return pd.DataFrame({"Metric": list(flat.keys()), "Value": [str(v) for v in flat.values()]})


def inconsistencies_table(items: List[RoomInconsistency]) -> pd.DataFrame:
    return pd.DataFrame([{
        "Farm": i.farm_id,
        "Room": i.room_number,
        "Gender": i.gender_restriction,
        "Stored": i.old_occupants,
        "Actual": i.new_occupants,
        "Change": i.delta,
        "Workers": ", ".join(i.worker_names),
    } for i in items], columns=["Farm", "Room", "Gender", "Stored", "Actual", "Change", "Workers"])


def failures_table(failures: List[RoomWriteFailure]) -> pd.DataFrame:
    return pd.DataFrame([{
        "Room ID": f.room_id,
        "Room": f.inconsistency.room_number,
        "Target": f.inconsistency.new_occupants,
        "Error": f.error,
    } for f in failures], columns=["Room ID", "Room", "Target", "Error"])


def render_styled_table(
    df: pd.DataFrame,
    title: Optional[str] = None,
    height: Optional[int] = None,
    use_container_width: bool = True,
):
    """Render a styled, non-editable dataframe."""
    if title:
        st.subheader(title)
    st.dataframe(df, height=height, use_container_width=use_container_width)


def render_change_table(df: pd.DataFrame, change_column: str = "Change"):
    """Render a table with positive/negative highlighting."""
    def color_change(val):
        try:
            v = float(val)
            if v > 0:
                return "color: #155724; font-weight: bold"
            elif v < 0:
                return "color: #cc0000; font-weight: bold"
        except (ValueError, TypeError):
            pass
        return ""

    if change_column in df.columns:
        styled = df.style.map(color_change, subset=[change_column])
        st.dataframe(styled, use_container_width=True)
    else:
        st.dataframe(df, use_container_width=True)
