"""Chart builders (Altair) for the issue and workload dashboards."""

from __future__ import annotations

import altair as alt
import pandas as pd

from tracker_app.features.issue_dashboard.context import LabeledSeries, OverlapRanking, OwnerRanking


def series_frame(series: LabeledSeries) -> pd.DataFrame:
    return pd.DataFrame({"label": series.labels, "count": series.counts})


def distribution_donut(series: LabeledSeries, *, title: str) -> alt.Chart | None:
    df = series_frame(series)
    if df.empty or int(df["count"].sum()) == 0:
        return None
    order = list(series.labels)
    return (
        alt.Chart(df)
        .mark_arc(innerRadius=60)
        .encode(
            theta=alt.Theta("count:Q"),
            color=alt.Color("label:N", sort=order, legend=alt.Legend(title=None)),
            tooltip=[
                alt.Tooltip("label:N", title=title),
                alt.Tooltip("count:Q", title="Count"),
            ],
        )
        .properties(title=title, height=260)
    )


def ranking_bar(ranking: OwnerRanking, *, title: str, value_title: str = "Open issues") -> alt.Chart:
    df = pd.DataFrame(
        {
            "person": ranking.labels,
            "person_id": ranking.person_ids,
            "count": ranking.counts,
        }
    )
    return (
        alt.Chart(df)
        .mark_bar(color="#1f77b4")
        .encode(
            x=alt.X("count:Q", title=value_title),
            y=alt.Y("person:N", sort=None, title=None),
            tooltip=[
                alt.Tooltip("person:N", title="Owner"),
                alt.Tooltip("person_id:Q", title="Emp ID"),
                alt.Tooltip("count:Q", title=value_title),
            ],
        )
        .properties(title=title, height=max(120, 24 * len(df)))
    )


def overlap_frame(ranking: OverlapRanking) -> pd.DataFrame:
    df = pd.DataFrame(
        {
            "person": ranking.labels,
            "person_id": ranking.person_ids,
            "overlap": ranking.overlap_counts,
            "doing": ranking.doing_counts,
        }
    )
    df["detail"] = [f"Doing={d} → Overlap={o}" for d, o in zip(df["doing"], df["overlap"], strict=True)]
    return df


def overlap_bar(ranking: OverlapRanking, *, title: str = "Workload overlap by owner") -> alt.Chart:
    df = overlap_frame(ranking)
    return (
        alt.Chart(df)
        .mark_bar(color="#d62728")
        .encode(
            x=alt.X("overlap:Q", title="Overlapping projects"),
            y=alt.Y("person:N", sort=None, title=None),
            tooltip=[
                alt.Tooltip("person:N", title="Owner"),
                alt.Tooltip("detail:N", title="Load"),
            ],
        )
        .properties(title=title, height=max(120, 24 * len(df)))
    )


def workload_heatmap(df: pd.DataFrame, *, title: str = "Projects per week") -> alt.Chart | None:
    """Heatmap from ``weekly_project_load`` rows (person x week_no)."""
    if df is None or df.empty:
        return None
    data = df.copy()
    for col in ("week_start", "week_end"):
        data[col] = data[col].astype(str)
    return (
        alt.Chart(data)
        .mark_rect()
        .encode(
            x=alt.X("week_no:O", title="Week"),
            y=alt.Y("person:N", title=None),
            color=alt.Color("project_count:Q", title="Projects", scale=alt.Scale(scheme="orangered")),
            tooltip=[
                alt.Tooltip("person:N", title="Owner"),
                alt.Tooltip("week_no:O", title="Week"),
                alt.Tooltip("week_start:N", title="From"),
                alt.Tooltip("week_end:N", title="To"),
                alt.Tooltip("project_count:Q", title="Projects"),
                alt.Tooltip("project_names:N", title="Names"),
            ],
        )
        .properties(title=title, height=max(160, 22 * data["person"].nunique()))
    )
