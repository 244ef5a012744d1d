"""Tab 3: Data — upload worker, room and farm records or load the sample dataset."""

import streamlit as st
import pandas as pd

from data.loader import load_file, load_multi_sheet_excel, parse_workers, parse_rooms, parse_farms
from data.validator import validate_workers, validate_rooms, validate_farms, validate_cross_file
from data.sample_data import generate_sample_dataset
from data.session_store import get_record_store, set_data_loaded, set_sync_outcome


def _load_and_validate(workers_df: pd.DataFrame, rooms_df: pd.DataFrame, farms_df: pd.DataFrame):
    """Validate and store uploaded data."""
    errors = []
    warnings = []

    for r in [validate_workers(workers_df), validate_rooms(rooms_df), validate_farms(farms_df)]:
        errors.extend(r.errors)
        warnings.extend(r.warnings)

    if not errors:
        warnings.extend(validate_cross_file(workers_df, rooms_df, farms_df).warnings)

    if errors:
        for e in errors:
            st.error(e)
        return False

    for w in warnings:
        st.warning(w)

    workers = parse_workers(workers_df)
    rooms = parse_rooms(rooms_df)
    farms = parse_farms(farms_df)

    get_record_store().replace_all(workers, rooms, farms)
    set_data_loaded(True)
    set_sync_outcome(None)

    st.success(f"Data loaded: {len(workers)} workers, {len(rooms)} rooms, {len(farms)} farms")
    return True


def render(sidebar_state):
    """Render the Data tab."""
    st.header("Data")

    upload_mode = st.radio(
        "Upload mode",
        ["Single Excel file (3 tabs)", "Three separate files"],
        horizontal=True,
        key="upload_mode",
    )

    if upload_mode == "Single Excel file (3 tabs)":
        st.caption(
            "Upload one `.xlsx` file with three sheets named: "
            "**Workers**, **Rooms**, **Farms** (French names such as 'Ouvriers', 'Chambres', 'Fermes' also work)"
        )
        single_file = st.file_uploader("Excel workbook with 3 tabs", type=["xlsx"], key="upload_single")
        if st.button("Upload & Validate", type="primary", key="btn_upload_single"):
            if single_file:
                try:
                    _load_and_validate(*load_multi_sheet_excel(single_file))
                except ValueError as e:
                    st.error(f"Error loading file: {e}")
            else:
                st.warning("Please upload an Excel file.")
    else:
        col1, col2, col3 = st.columns(3)
        with col1:
            workers_file = st.file_uploader("Workers", type=["csv", "xlsx"], key="upload_workers")
        with col2:
            rooms_file = st.file_uploader("Rooms", type=["csv", "xlsx"], key="upload_rooms")
        with col3:
            farms_file = st.file_uploader("Farms", type=["csv", "xlsx"], key="upload_farms")

        if st.button("Upload & Validate", type="primary", key="btn_upload_multi"):
            if workers_file and rooms_file and farms_file:
                try:
                    _load_and_validate(load_file(workers_file), load_file(rooms_file), load_file(farms_file))
                except ValueError as e:
                    st.error(f"Error loading files: {e}")
            else:
                st.warning("Please upload all three files.")

    st.divider()
    if st.button("Load Sample Data", key="btn_sample"):
        _load_and_validate(*generate_sample_dataset())
