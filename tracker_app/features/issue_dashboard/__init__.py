"""Issue dashboard feature module: today vs. yesterday summaries and rankings."""

from tracker_app.features.issue_dashboard.context import (
    IssueDashboardContext,
    IssueSummary,
    LabeledSeries,
    OverlapRanking,
    OwnerRanking,
    build_dashboard_context,
    reopen_rate,
    yesterday_cutoff,
)

__all__ = [
    "IssueDashboardContext",
    "IssueSummary",
    "LabeledSeries",
    "OverlapRanking",
    "OwnerRanking",
    "build_dashboard_context",
    "reopen_rate",
    "yesterday_cutoff",
]
