"""Tab 1: Statistics — workforce and housing metrics for the selected farm and period."""

import streamlit as st
from datetime import datetime

from data.session_store import get_record_store, is_data_loaded
from components.metrics_cards import render_metric_row, render_alert_card
from components.charts import occupancy_donut, histogram_bar, gender_split_bar
from components.tables import snapshot_table, render_styled_table
from engine.statistics import aggregate
from config.defaults import TIME_RANGE_LABELS


def render(sidebar_state):
    """Render the Statistics tab."""
    st.header("Statistics")

    if not is_data_loaded():
        st.info("No data loaded. Please upload data in the Data tab.")
        return

    store = get_record_store()
    workers = store.fetch_workers(sidebar_state.farm_id)
    rooms = store.fetch_rooms(sidebar_state.farm_id)
    stats = aggregate(workers, rooms, sidebar_state.time_range)
    period = TIME_RANGE_LABELS.get(stats.time_range, stats.time_range)

    render_metric_row([
        {"label": "Active Workers", "value": f"{stats.total_workers:,}",
         "delta": f"{stats.net_change:+,} ({period.lower()})",
         "delta_color": "normal" if stats.net_change >= 0 else "inverse"},
        {"label": "Occupancy Rate", "value": f"{stats.occupancy_rate:.2f}%"},
        {"label": "Available Places", "value": f"{stats.available_places:,}",
         "help": "Negative when more workers are assigned than there are beds."},
        {"label": "Retention Rate", "value": f"{stats.retention_rate:.2f}%"},
    ])

    render_metric_row([
        {"label": "Rooms", "value": f"{stats.total_rooms:,}",
         "delta": f"{stats.occupied_rooms} occupied / {stats.empty_rooms} empty", "delta_color": "off"},
        {"label": "Full Rooms", "value": f"{stats.full_rooms:,}"},
        {"label": "Average Age", "value": f"{stats.average_age}",
         "delta": f"{stats.min_age}–{stats.max_age}", "delta_color": "off"},
        {"label": "Average Stay (days)", "value": f"{stats.average_stay_days:,}"},
    ])

    if stats.is_high_occupancy:
        render_alert_card(f"High occupancy: {stats.occupancy_rate:.2f}% of places are taken.", "error")
    elif stats.is_low_occupancy:
        render_alert_card(f"Low occupancy: only {stats.occupancy_rate:.2f}% of places are taken.", "info")
    if stats.available_places < 0:
        render_alert_card(f"Overbooked by {-stats.available_places} place(s).", "error")
    if not stats.is_gender_balanced:
        render_alert_card(
            f"Workforce is unbalanced: {stats.male_workers} men / {stats.female_workers} women.", "warning"
        )
    if stats.has_recent_growth:
        render_alert_card(
            f"Growing: {stats.recent_arrivals} arrivals vs {stats.recent_exits} exits ({period.lower()}).",
            "success",
        )

    col1, col2 = st.columns(2)
    with col1:
        st.plotly_chart(occupancy_donut(stats.occupied_places, stats.total_capacity), use_container_width=True)
    with col2:
        st.plotly_chart(gender_split_bar(stats.male_workers, stats.female_workers), use_container_width=True)

    col3, col4 = st.columns(2)
    with col3:
        st.plotly_chart(histogram_bar(stats.age_distribution, "Age", "Age Distribution"),
                        use_container_width=True)
        if stats.under_age_workers:
            st.caption(f"{stats.under_age_workers} active worker(s) under 18 are not shown.")
    with col4:
        if stats.exit_reasons:
            st.plotly_chart(histogram_bar(stats.exit_reasons, "Reason", "Exit Reasons", "#E8734A"),
                            use_container_width=True)
            st.caption(f"Top reason: {stats.top_exit_reason} ({stats.top_exit_reason_count})")
        else:
            st.info("No recorded exits.")

    st.divider()
    table = snapshot_table(stats)
    render_styled_table(table, title="All Metrics", height=400)
    st.download_button(
        "Download metrics (CSV)",
        data=table.to_csv(index=False).encode("utf-8"),
        file_name=f"statistics_{datetime.now().strftime('%Y-%m-%d')}.csv",
        mime="text/csv",
    )
