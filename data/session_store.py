"""Typed wrapper around st.session_state for application data."""

import streamlit as st
from typing import List, Optional
from data.record_store import InMemoryRecordStore
from models.occupancy import RoomWriteFailure, SyncResult


def initialize_session_state():
    """Initialize all session state keys with defaults."""
    defaults = {
        "record_store": InMemoryRecordStore(),
        "data_loaded": False,
        "last_sync_result": None,
        "last_sync_failures": [],
    }
    for key, default in defaults.items():
        if key not in st.session_state:
            st.session_state[key] = default


# --- Getters ---

def get_record_store() -> InMemoryRecordStore:
    return st.session_state["record_store"]


def is_data_loaded() -> bool:
    return st.session_state.get("data_loaded", False)


def get_last_sync_result() -> Optional[SyncResult]:
    return st.session_state.get("last_sync_result")


def get_last_sync_failures() -> List[RoomWriteFailure]:
    return st.session_state.get("last_sync_failures", [])


# --- Setters ---

def set_data_loaded(loaded: bool):
    st.session_state["data_loaded"] = loaded


def set_sync_outcome(result: Optional[SyncResult], failures: Optional[List[RoomWriteFailure]] = None):
    st.session_state["last_sync_result"] = result
    st.session_state["last_sync_failures"] = failures or []

