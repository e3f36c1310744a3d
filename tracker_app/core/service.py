"""DashboardService: fetches every needed row up front, then aggregates."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime

import pandas as pd
import pytz

from tracker_app.analytics.workload import weekly_project_load
from tracker_app.core.people import build_name_lookup
from tracker_app.features.issue_dashboard.context import (
    IssueDashboardContext,
    build_dashboard_context,
    yesterday_cutoff,
)

from .config import SETTINGS
from .mappers import to_local_naive
from .models import Period
from .store import TrackerStore

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class DashboardService:
    def __init__(self, store: TrackerStore, tz: str | None = None):
        self.store = store
        self._tz = pytz.timezone(tz or SETTINGS.timezone)

    def now(self) -> datetime:
        """Current wall-clock time in the dashboard timezone (naive)."""
        return datetime.now(self._tz).replace(tzinfo=None)

    def build_dashboard(
        self,
        as_of: datetime | None = None,
        period: Period | None = None,
        *,
        top_n: int | None = None,
        include_idle: bool | None = None,
        progress: ProgressCallback | None = None,
    ) -> IssueDashboardContext:
        """Read issues, history, assignments, phases and people, then aggregate.

        Store errors propagate unchanged; nothing is computed from a partial
        read.
        """
        as_of = to_local_naive(as_of, self._tz) if as_of is not None else self.now()
        period = period or Period.calendar_year(as_of.year)
        cutoff = yesterday_cutoff(as_of)
        if include_idle is None:
            include_idle = SETTINGS.include_idle_in_overlap

        if progress:
            progress("Loading issues", 0, 5)
        issues = self.store.fetch_issues()
        existed_ids = [i.issue_id for i in issues if i.created_at <= cutoff]

        if progress:
            progress("Loading status history", 1, 5)
        events = self.store.fetch_status_events(existed_ids, cutoff)

        if progress:
            progress("Loading assignments", 2, 5)
        assignments = self.store.fetch_assignments(period)

        if progress:
            progress("Loading phases", 3, 5)
        phases = self.store.fetch_phases()

        if progress:
            progress("Loading people", 4, 5)
        people = self.store.fetch_people()

        logger.info(
            "Dashboard as of %s: %d issues, %d history events, %d assignments, %d phases",
            as_of.isoformat(timespec="seconds"),
            len(issues),
            len(events),
            len(assignments),
            len(phases),
        )
        ctx = build_dashboard_context(
            issues,
            events,
            assignments,
            people,
            as_of=as_of,
            phases=phases,
            period=period,
            top_n=top_n,
            include_idle=include_idle,
        )
        if progress:
            progress("Dashboard ready", 5, 5)
        return ctx

    def weekly_workload(self, year: int, *, progress: ProgressCallback | None = None) -> pd.DataFrame:
        if progress:
            progress(f"Loading assignments for {year}", None, None)
        assignments = self.store.fetch_assignments(Period.calendar_year(year))
        names = build_name_lookup(self.store.fetch_people())
        projects = self.store.fetch_projects()
        logger.info("Weekly workload %d: %d assignments, %d people", year, len(assignments), len(names))
        return weekly_project_load(assignments, year, names, projects)
