"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``tracker_app/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from tracker_app.app import main

st.set_page_config(layout="wide")
logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger("run_dashboard")


def _auto_init_service():
    """Initialize the dashboard service from TRACKER_DATA_DIR / defaults when present."""
    if "dashboard_service" in st.session_state:
        return

    from tracker_app.core.config import SETTINGS
    from tracker_app.core.service import DashboardService
    from tracker_app.core.store import CsvTrackerStore

    data_dir = Path(SETTINGS.data_dir).expanduser()
    if data_dir.is_dir():
        st.session_state["data_dir"] = str(data_dir)
        st.session_state["dashboard_service"] = DashboardService(CsvTrackerStore(data_dir))
        st.sidebar.success(f"Using data from {data_dir}")
    else:
        st.sidebar.warning("No data directory found. Please use the Setup page.")


_auto_init_service()

PAGES_DIR = Path(__file__).parent / "tracker_app" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"tracker_app.pages.{py.stem}"
    try:
        import_module(mod_name)
    except ImportError as e:  # pragma: no cover
        logger.error("Failed importing page %s: %s", mod_name, e)

if __name__ == "__main__":
    main()
