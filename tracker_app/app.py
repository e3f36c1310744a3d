"""Application entry point: page registry and router."""

from __future__ import annotations

import streamlit as st

PAGES = {}

PREFERRED_ORDER = [
    "Issue Dashboard",
    "Workload Heatmap",
    "Setup / Data Source",
]


def register_page(label):
    def decorator(func):
        PAGES[label] = func
        return func

    return decorator


def ordered_pages(registered) -> list[str]:
    ordered = [name for name in PREFERRED_ORDER if name in registered]
    trailing = sorted(name for name in registered if name not in PREFERRED_ORDER)
    return ordered + trailing


def main():
    st.sidebar.title("Project Tracking Dashboard")
    pages = ordered_pages(PAGES)
    if not pages:
        st.write("No pages registered yet.")
        return
    # Until a data source is configured, land on the setup page
    if "Setup / Data Source" in pages and "dashboard_service" not in st.session_state:
        default = pages.index("Setup / Data Source")
    else:
        default = 0
    page = st.sidebar.selectbox("Page", pages, index=default)
    PAGES[page]()


if __name__ == "__main__":
    main()
