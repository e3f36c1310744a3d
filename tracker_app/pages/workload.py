"""Workload heatmap page: distinct projects per person per week."""

from __future__ import annotations

import logging

import streamlit as st

from tracker_app.analytics.workload import pivot_weekly_load
from tracker_app.app import register_page
from tracker_app.core.service import DashboardService
from tracker_app.core.store import DataSourceError
from tracker_app.visual.charts import workload_heatmap

logger = logging.getLogger(__name__)


@register_page("Workload Heatmap")
def workload_page():
    st.title("Workload Heatmap")
    st.caption("Projects each person is assigned to, week by week.")
    service: DashboardService | None = st.session_state.get("dashboard_service")
    if service is None:
        st.warning("Configure the data source on the Setup page first.")
        return

    year = int(st.number_input("Year", min_value=2000, max_value=2100, value=service.now().year, step=1))
    try:
        weekly = service.weekly_workload(year)
    except DataSourceError as exc:
        logger.error("Workload data could not be loaded: %s", exc)
        st.error(f"Failed to load tracker data: {exc}")
        return

    chart = workload_heatmap(weekly, title=f"Projects per week, {year}")
    if chart is None:
        st.info("No assignments with plan dates in this year.")
        return
    st.altair_chart(chart, use_container_width=True)

    with st.expander("Matrix"):
        st.dataframe(pivot_weekly_load(weekly, year))
    csv = weekly.to_csv(index=False).encode("utf-8")
    st.download_button(
        "Download CSV",
        data=csv,
        file_name=f"workload_{year}.csv",
        mime="text/csv",
    )
