"""Tab 2: Occupancy Sync — compare room counters with worker assignments and repair them."""

import streamlit as st

from data.session_store import (
    get_record_store, is_data_loaded,
    get_last_sync_result, get_last_sync_failures, set_sync_outcome,
)
from components.metrics_cards import render_metric_row, render_alert_card
from components.tables import inconsistencies_table, failures_table, render_change_table
from engine.reconciler import compute_summary, find_inconsistencies, reconcile, retry_failures, RoomSyncError
from config.defaults import MAX_CORRECTIONS_SHOWN


def _run(action):
    try:
        result = action()
        set_sync_outcome(result)
    except RoomSyncError as e:
        set_sync_outcome(e.result, e.failures)


def render(sidebar_state):
    """Render the Occupancy Sync tab. Always system-wide, regardless of the farm filter."""
    st.header("Occupancy Sync")

    if not is_data_loaded():
        st.info("No data loaded. Please upload data in the Data tab.")
        return

    store = get_record_store()
    workers = store.fetch_workers()
    rooms = store.fetch_rooms()
    summary = compute_summary(workers, rooms)

    render_metric_row([
        {"label": "Active Workers", "value": f"{summary.total_active_workers:,}"},
        {"label": "Total Capacity", "value": f"{summary.total_capacity:,}"},
        {"label": "Occupancy (room counters)", "value": f"{summary.total_stored_occupied:,}"},
        {"label": "Occupancy (worker assignments)", "value": f"{summary.total_derived_occupied:,}"},
    ])

    if summary.workers_without_rooms:
        render_alert_card(f"{summary.workers_without_rooms} active worker(s) have no room assigned.", "warning")
    if summary.unmatched_assignments:
        render_alert_card(
            f"{summary.unmatched_assignments} worker(s) are assigned to a room number that does not exist "
            "for their farm and sex.", "warning",
        )

    if summary.has_discrepancy:
        render_alert_card(
            f"{summary.inconsistent_rooms} room counter(s) disagree with worker assignments.", "error"
        )
        render_change_table(inconsistencies_table(find_inconsistencies(workers, rooms)))
        if st.button("Sync occupancy", type="primary", key="btn_sync"):
            _run(lambda: reconcile(workers, rooms, store))
            st.rerun()
    else:
        render_alert_card("All room counters match worker assignments.", "success")

    result = get_last_sync_result()
    failures = get_last_sync_failures()
    if result is None and not failures:
        return

    st.divider()
    st.subheader("Last Sync")
    if result is not None:
        render_metric_row([
            {"label": "Rooms Checked", "value": f"{result.total_rooms_checked:,}"},
            {"label": "Rooms Updated", "value": f"{result.rooms_updated:,}"},
            {"label": "Corrections", "value": f"{len(result.inconsistencies_found):,}"},
        ])
        for item in result.inconsistencies_found[:MAX_CORRECTIONS_SHOWN]:
            names = f" ({', '.join(item.worker_names)})" if item.worker_names else ""
            st.write(f"Room {item.room_number}: {item.old_occupants} → {item.new_occupants} occupants{names}")
        remaining = len(result.inconsistencies_found) - MAX_CORRECTIONS_SHOWN
        if remaining > 0:
            st.caption(f"... and {remaining} more")

    if failures:
        render_alert_card(f"{len(failures)} room(s) could not be updated.", "error")
        st.dataframe(failures_table(failures), use_container_width=True)
        if st.button("Retry failed rooms", key="btn_retry"):
            _run(lambda: retry_failures(failures, store))
            st.rerun()
