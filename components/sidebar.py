"""Global sidebar controls for farm and time range selection."""

import streamlit as st
from dataclasses import dataclass
from typing import Optional
from data.session_store import get_record_store, is_data_loaded
from config.defaults import TIME_RANGE_DAYS, TIME_RANGE_LABELS, DEFAULT_TIME_RANGE

ALL_FARMS = "__all__"


@dataclass
class SidebarState:
    farm_id: Optional[str]   # None = every farm
    time_range: str


def render_sidebar() -> SidebarState:
    """Render the global sidebar controls and return current state."""
    with st.sidebar:
        st.title("Farm Housing")
        st.divider()

        farms = get_record_store().fetch_farms()
        farm_names = {ALL_FARMS: "All farms"}
        farm_names.update({f.farm_id: f.name for f in farms})
        farm_ids = list(farm_names.keys())

        selected_farm = st.selectbox(
            "Farm",
            options=farm_ids,
            format_func=lambda x: farm_names.get(x, x),
            key="sidebar_farm",
        )

        ranges = list(TIME_RANGE_DAYS.keys())
        time_range = st.selectbox(
            "Period",
            options=ranges,
            format_func=lambda x: TIME_RANGE_LABELS.get(x, x),
            index=ranges.index(DEFAULT_TIME_RANGE),
            key="sidebar_time_range",
        )

        st.divider()

        if is_data_loaded():
            st.success("Data loaded")
        else:
            st.warning("No data loaded — go to the Data tab")

    farm_id = None if selected_farm == ALL_FARMS else selected_farm
    return SidebarState(farm_id=farm_id, time_range=time_range)
