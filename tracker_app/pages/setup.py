"""Data source setup page: point the dashboard at a directory of CSV exports."""

from __future__ import annotations

from pathlib import Path

import streamlit as st

from tracker_app.app import register_page
from tracker_app.core.config import SETTINGS, SOURCE_FILES
from tracker_app.core.service import DashboardService
from tracker_app.core.store import CsvTrackerStore


@register_page("Setup / Data Source")
def setup_page():
    st.title("Data Source Setup")
    st.caption("Directory holding the tracker CSV exports.")

    data_dir = st.text_input(
        "Data directory",
        value=st.session_state.get("data_dir") or SETTINGS.data_dir,
    )
    st.caption("Expected files: " + ", ".join(SOURCE_FILES.values()))
    init_btn = st.button("Use this directory", type="primary")

    if init_btn:
        path = Path(data_dir).expanduser()
        if not path.is_dir():
            st.error(f"Not a directory: {path}")
            return
        missing = [name for name in SOURCE_FILES.values() if not (path / name).exists()]
        if missing:
            st.warning("Missing files: " + ", ".join(missing))
        st.session_state["data_dir"] = str(path)
        st.session_state["dashboard_service"] = DashboardService(CsvTrackerStore(path))
        st.success("Data source configured.")

    if "dashboard_service" in st.session_state:
        st.info("DashboardService ready.")
