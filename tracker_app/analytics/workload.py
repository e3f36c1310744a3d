"""Weekly workload heatmap: distinct projects per person per week."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, timedelta

import pandas as pd

from tracker_app.core.config import PROJECT_NAME_SEPARATOR, WEEKS_PER_YEAR
from tracker_app.core.models import AssignmentModel
from tracker_app.core.people import display_name

WEEKLY_COLUMNS = [
    "person_id",
    "person",
    "week_no",
    "week_start",
    "week_end",
    "project_count",
    "project_names",
]


def week_buckets(year: int) -> list[tuple[int, date, date]]:
    """Seven-day weeks counted from Jan 1.

    At most 52 weeks; a week is only added while it starts on or before
    Dec 31, so the last one or two days of the year fall outside every week.
    """
    year_end = date(year, 12, 31)
    weeks: list[tuple[int, date, date]] = []
    start = date(year, 1, 1)
    week_no = 1
    while week_no <= WEEKS_PER_YEAR and start <= year_end:
        weeks.append((week_no, start, start + timedelta(days=6)))
        start += timedelta(days=7)
        week_no += 1
    return weeks


def weekly_project_load(
    assignments: Iterable[AssignmentModel],
    year: int,
    names: Mapping[int, str],
    projects: Mapping[int, str] | None = None,
) -> pd.DataFrame:
    """Long-form (person, week) rows with the projects active that week.

    Only weeks where the person has at least one project appear. Assignments
    without dates or a project, and people absent from ``names``, are skipped.
    """
    projects = projects or {}
    rows = [
        {
            "person_id": a.person_id,
            "project_id": a.group_key,
            "start": a.interval_start,
            "end": a.interval_end,
        }
        for a in assignments
        if a.person_id is not None
        and a.person_id in names
        and a.group_key is not None
        and a.interval_start is not None
        and a.interval_end is not None
    ]
    if not rows:
        return pd.DataFrame(columns=WEEKLY_COLUMNS)

    work = pd.DataFrame(rows)
    weeks = pd.DataFrame(week_buckets(year), columns=["week_no", "week_start", "week_end"])
    joined = work.merge(weeks, how="cross")
    joined = joined[(joined["start"] <= joined["week_end"]) & (joined["end"] >= joined["week_start"])]
    if joined.empty:
        return pd.DataFrame(columns=WEEKLY_COLUMNS)

    def _names(ids: pd.Series) -> str:
        labels = sorted({projects.get(int(pid), f"#{int(pid)}") for pid in ids})
        return PROJECT_NAME_SEPARATOR.join(labels)

    agg = (
        joined.groupby(["person_id", "week_no", "week_start", "week_end"])
        .agg(
            project_count=("project_id", "nunique"),
            project_names=("project_id", _names),
        )
        .reset_index()
    )
    agg["person"] = agg["person_id"].apply(lambda pid: display_name(int(pid), names))
    agg["project_count"] = agg["project_count"].astype(int)
    return agg.sort_values(["person", "week_no"]).reset_index(drop=True)[WEEKLY_COLUMNS]


def pivot_weekly_load(df: pd.DataFrame, year: int) -> pd.DataFrame:
    """Person x week_no matrix of project counts, zero-filled for every week."""
    week_numbers = [w[0] for w in week_buckets(year)]
    if df.empty:
        return pd.DataFrame(columns=week_numbers)
    matrix = df.pivot_table(
        index="person",
        columns="week_no",
        values="project_count",
        aggfunc="max",
        fill_value=0,
    )
    return matrix.reindex(columns=week_numbers, fill_value=0).astype(int)
