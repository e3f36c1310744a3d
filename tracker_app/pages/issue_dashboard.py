"""Issue dashboard page.

Headline issue and phase counts with deltas against the end of yesterday,
status / priority donuts, and the open-issue and workload-overlap rankings.
"""

from __future__ import annotations

import logging

import streamlit as st

from tracker_app.app import register_page
from tracker_app.core.config import SETTINGS
from tracker_app.core.service import DashboardService
from tracker_app.core.store import DataSourceError
from tracker_app.features.issue_dashboard.context import IssueDashboardContext
from tracker_app.visual.charts import distribution_donut, overlap_bar, ranking_bar
from tracker_app.visual.progress import ProgressReporter

logger = logging.getLogger(__name__)


def render_issue_metrics(ctx: IssueDashboardContext) -> None:
    today, diff = ctx.today, ctx.issue_diff
    cols = st.columns(6)
    cols[0].metric("Total", today.total, delta=diff.total)
    cols[1].metric("Open", today.open, delta=diff.open, delta_color="inverse")
    cols[2].metric("WIP", today.wip, delta=diff.wip, delta_color="off")
    cols[3].metric("Fixed", today.fixed, delta=diff.fixed)
    cols[4].metric("Reopen total", today.reopen_total, delta=diff.reopen_total, delta_color="inverse")
    cols[5].metric("Reopen rate", f"{today.reopen_rate:.1f}%", delta=f"{diff.reopen_rate:+.1f}", delta_color="inverse")


def render_phase_metrics(ctx: IssueDashboardContext) -> None:
    today, diff = ctx.phase_today, ctx.phase_diff
    cols = st.columns(5)
    cols[0].metric("Phases", today.total, delta=diff.total)
    cols[1].metric("Planned", today.planned, delta=diff.planned, delta_color="off")
    cols[2].metric("Doing", today.doing, delta=diff.doing, delta_color="off")
    cols[3].metric("Done", today.done, delta=diff.done)
    cols[4].metric("Overdue", today.overdue, delta=diff.overdue, delta_color="inverse")


@register_page("Issue Dashboard")
def issue_dashboard_page():
    st.title("Issue Dashboard")
    service: DashboardService | None = st.session_state.get("dashboard_service")
    if service is None:
        st.warning("Configure the data source on the Setup page first.")
        return

    top_n = st.sidebar.number_input("Top N owners", min_value=1, max_value=200, value=SETTINGS.top_n)
    include_idle = st.sidebar.checkbox("Show owners without overlap", value=SETTINGS.include_idle_in_overlap)
    refresh = st.button("Refresh", type="primary")

    if refresh or "dashboard_ctx" not in st.session_state:
        reporter = ProgressReporter("Building dashboard")
        try:
            ctx = service.build_dashboard(top_n=int(top_n), include_idle=include_idle, progress=reporter.callback)
        except DataSourceError as exc:
            logger.error("Dashboard data could not be loaded: %s", exc)
            reporter.error(f"Failed to load tracker data: {exc}")
            return
        st.session_state["dashboard_ctx"] = ctx
        reporter.complete(f"Computed as of {ctx.as_of:%Y-%m-%d %H:%M}.")

    ctx: IssueDashboardContext = st.session_state["dashboard_ctx"]
    st.caption(
        f"Compared with {ctx.cutoff:%Y-%m-%d %H:%M}. "
        f"Workload period {ctx.period.start.isoformat()} to {ctx.period.end.isoformat()}."
    )

    st.markdown("#### Issues")
    render_issue_metrics(ctx)
    left, right = st.columns(2)
    status_chart = distribution_donut(ctx.status_today, title="Status")
    priority_chart = distribution_donut(ctx.priority_today, title="Priority")
    if status_chart is not None:
        left.altair_chart(status_chart, use_container_width=True)
    else:
        left.info("No issues yet.")
    if priority_chart is not None:
        right.altair_chart(priority_chart, use_container_width=True)

    left, right = st.columns(2)
    left.altair_chart(ranking_bar(ctx.open_by_owner, title="Open issues by owner"), use_container_width=True)
    right.altair_chart(overlap_bar(ctx.overlap_by_owner), use_container_width=True)

    st.markdown("#### Phases")
    render_phase_metrics(ctx)

    with st.expander("Raw figures"):
        st.json(ctx.to_dict())
