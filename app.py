"""Farm Housing dashboard — Streamlit entry point."""

import logging
import streamlit as st
import sys
import os

# Add project root to path for imports
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from components.sidebar import render_sidebar
from data.session_store import initialize_session_state
from tabs import (
    tab_statistics,
    tab_occupancy_sync,
    tab_data_admin,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)


def main():
    st.set_page_config(
        page_title="Farm Housing",
        page_icon="🏠",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    initialize_session_state()
    sidebar_state = render_sidebar()

    tab1, tab2, tab3 = st.tabs([
        "📊 Statistics",
        "🛏️ Occupancy Sync",
        "⚙️ Data",
    ])

    with tab1:
        tab_statistics.render(sidebar_state)
    with tab2:
        tab_occupancy_sync.render(sidebar_state)
    with tab3:
        tab_data_admin.render(sidebar_state)


if __name__ == "__main__":
    main()
