"""Pure helpers to build the issue dashboard context (no Streamlit)."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import asdict, dataclass, field
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

import pandas as pd

from tracker_app.analytics.overlap import WorkloadOverlap, compute_workload_overlap
from tracker_app.analytics.phases import PhaseSummary, summarize_phases
from tracker_app.analytics.snapshot import ReopenState, build_history_lookup, reopen_as_of, status_as_of
from tracker_app.core.config import (
    NO_OPEN_ISSUES_LABEL,
    NO_OVERLAP_LABEL,
    NO_OVERLAP_PLACEHOLDER_COUNT,
    STATUS_FIXED,
    STATUS_OPEN,
    STATUS_WIP,
)
from tracker_app.core.label_config import get_labels
from tracker_app.core.mappers import issues_to_dataframe, to_local_naive
from tracker_app.core.models import AssignmentModel, IssueModel, Period, PersonModel, PhaseModel, StatusChangeEvent
from tracker_app.core.people import build_name_lookup, display_name
from tracker_app.core.status import normalize_priority, normalize_status, ordered_labels

logger = logging.getLogger(__name__)

ONE_DECIMAL = Decimal("0.1")


def round_one_decimal(value: Decimal) -> float:
    """Round half away from zero (ROUND_HALF_UP on Decimal), one decimal place."""
    return float(value.quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP))


def reopen_rate(reopened: int, population: int) -> float:
    """Percent of ``population`` reopened at least once; 0 for an empty population."""
    if population <= 0:
        return 0.0
    return round_one_decimal(Decimal(reopened) * 100 / Decimal(population))


def yesterday_cutoff(as_of: datetime) -> datetime:
    """Last instant of the day before ``as_of``."""
    return datetime.combine(as_of.date(), time.min) - timedelta(microseconds=1)


@dataclass(slots=True)
class IssueSummary:
    total: int = 0
    open: int = 0
    wip: int = 0
    fixed: int = 0
    reopen_total: int = 0
    reopen_rate: float = 0.0

    def minus(self, other: IssueSummary) -> IssueSummary:
        rate = Decimal(str(self.reopen_rate)) - Decimal(str(other.reopen_rate))
        return IssueSummary(
            total=self.total - other.total,
            open=self.open - other.open,
            wip=self.wip - other.wip,
            fixed=self.fixed - other.fixed,
            reopen_total=self.reopen_total - other.reopen_total,
            reopen_rate=round_one_decimal(rate),
        )


@dataclass(slots=True)
class LabeledSeries:
    labels: list[str] = field(default_factory=list)
    counts: list[int] = field(default_factory=list)


@dataclass(slots=True)
class OwnerRanking:
    labels: list[str] = field(default_factory=list)
    counts: list[int] = field(default_factory=list)
    person_ids: list[int] = field(default_factory=list)


@dataclass(slots=True)
class OverlapRanking:
    labels: list[str] = field(default_factory=list)
    overlap_counts: list[int] = field(default_factory=list)
    doing_counts: list[int] = field(default_factory=list)
    person_ids: list[int] = field(default_factory=list)


@dataclass(slots=True)
class IssueDashboardContext:
    """Everything the issue dashboard page renders, as plain values."""

    as_of: datetime
    cutoff: datetime
    period: Period
    today: IssueSummary
    yesterday: IssueSummary
    status_today: LabeledSeries
    status_yesterday: LabeledSeries
    priority_today: LabeledSeries
    priority_yesterday: LabeledSeries
    open_by_owner: OwnerRanking
    overlap_by_owner: OverlapRanking
    phase_today: PhaseSummary = field(default_factory=PhaseSummary)
    phase_yesterday: PhaseSummary = field(default_factory=PhaseSummary)
    phase_series: LabeledSeries = field(default_factory=LabeledSeries)

    @property
    def issue_diff(self) -> IssueSummary:
        return self.today.minus(self.yesterday)

    @property
    def phase_diff(self) -> PhaseSummary:
        return self.phase_today.minus(self.phase_yesterday)

    def to_dict(self) -> dict[str, object]:
        """Flat, JSON-friendly rendering (dates as ISO strings)."""
        return {
            "as_of": self.as_of.isoformat(),
            "cutoff": self.cutoff.isoformat(),
            "period": {"start": self.period.start.isoformat(), "end": self.period.end.isoformat()},
            "today": asdict(self.today),
            "yesterday": asdict(self.yesterday),
            "diff": asdict(self.issue_diff),
            "status_today": asdict(self.status_today),
            "status_yesterday": asdict(self.status_yesterday),
            "priority_today": asdict(self.priority_today),
            "priority_yesterday": asdict(self.priority_yesterday),
            "open_by_owner": asdict(self.open_by_owner),
            "overlap_by_owner": asdict(self.overlap_by_owner),
            "phase_today": asdict(self.phase_today),
            "phase_yesterday": asdict(self.phase_yesterday),
            "phase_diff": asdict(self.phase_diff),
            "phase_series": asdict(self.phase_series),
        }


def summarize_issues(statuses: Sequence[str], reopen_states: Sequence[ReopenState]) -> IssueSummary:
    """Headline counts for one view; ``statuses`` must already be normalized."""
    total = len(statuses)
    reopened = sum(1 for r in reopen_states if r.reopen_count > 0)
    return IssueSummary(
        total=total,
        open=sum(1 for s in statuses if s == STATUS_OPEN),
        wip=sum(1 for s in statuses if s == STATUS_WIP),
        fixed=sum(1 for s in statuses if s == STATUS_FIXED),
        reopen_total=sum(r.reopen_count for r in reopen_states),
        reopen_rate=reopen_rate(reopened, total),
    )


def distribution(values: Iterable[str], preferred: Sequence[str]) -> LabeledSeries:
    """Counts per value: preferred labels first (zeros kept), then the rest sorted."""
    counts = pd.Series(list(values), dtype=object).value_counts().to_dict()
    labels = ordered_labels(counts.keys(), preferred)
    return LabeledSeries(labels=labels, counts=[int(counts.get(label, 0)) for label in labels])


def _check_top_n(top_n: int | None) -> None:
    if top_n is not None and top_n < 1:
        raise ValueError(f"top_n must be a positive integer, got {top_n}")


def rank_open_by_owner(
    issues: Iterable[IssueModel],
    names: Mapping[int, str],
    *,
    top_n: int | None = None,
) -> OwnerRanking:
    """Open issue counts per owner id, highest first.

    Grouping is by id so two people sharing a display name stay separate.
    Issues without an owner are left out.
    """
    _check_top_n(top_n)
    df = issues_to_dataframe(issues)
    open_df = df[(df["status"] == STATUS_OPEN) & df["owner_id"].notna()]
    grouped = (
        open_df.groupby("owner_id")
        .size()
        .reset_index(name="open_issues")
        .sort_values(["open_issues", "owner_id"], ascending=[False, True])
    )
    if top_n is not None:
        grouped = grouped.head(top_n)
    if grouped.empty:
        return OwnerRanking(labels=[NO_OPEN_ISSUES_LABEL], counts=[0], person_ids=[0])
    ids = [int(v) for v in grouped["owner_id"]]
    return OwnerRanking(
        labels=[display_name(pid, names) for pid in ids],
        counts=[int(v) for v in grouped["open_issues"]],
        person_ids=ids,
    )


def rank_overlap(
    rows: Sequence[WorkloadOverlap],
    names: Mapping[int, str],
    *,
    top_n: int | None = None,
) -> OverlapRanking:
    """Convert ranked overlap rows into parallel series, with a placeholder when empty."""
    _check_top_n(top_n)
    if top_n is not None:
        rows = rows[:top_n]
    if not rows:
        return OverlapRanking(
            labels=[NO_OVERLAP_LABEL],
            overlap_counts=[NO_OVERLAP_PLACEHOLDER_COUNT],
            doing_counts=[0],
            person_ids=[0],
        )
    return OverlapRanking(
        labels=[display_name(r.person_id, names) for r in rows],
        overlap_counts=[r.overlap for r in rows],
        doing_counts=[r.doing for r in rows],
        person_ids=[r.person_id for r in rows],
    )


def build_dashboard_context(
    issues: Sequence[IssueModel],
    events: Iterable[StatusChangeEvent],
    assignments: Iterable[AssignmentModel],
    people: Iterable[PersonModel],
    *,
    as_of: datetime,
    phases: Iterable[PhaseModel] = (),
    period: Period | None = None,
    top_n: int | None = None,
    include_idle: bool = False,
) -> IssueDashboardContext:
    """Compute today vs. yesterday figures, distributions, and rankings.

    Parameters
    ----------
    issues : sequence of IssueModel
        Live issue rows.
    events : iterable of StatusChangeEvent
        Status log; events after the yesterday cutoff are ignored.
    assignments : iterable of AssignmentModel
        Person/project date ranges for the overlap ranking.
    people : iterable of PersonModel
        Source of display names.
    as_of : datetime
        "Now". Aware values are converted to the dashboard timezone.
    phases : iterable of PhaseModel, optional
        Project phases for the phase tracking block.
    period : Period, optional
        Bounding window; defaults to the calendar year of ``as_of``.
    top_n : int, optional
        Truncate both rankings.
    include_idle : bool
        Keep people with zero overlap in the overlap ranking.
    """
    as_of = to_local_naive(as_of)
    today: date = as_of.date()
    cutoff = yesterday_cutoff(as_of)
    period = period or Period.calendar_year(today.year)
    names = build_name_lookup(people)
    issues = list(issues)

    # Today: live fields
    statuses_today = [normalize_status(i.status) for i in issues]
    reopen_today = [ReopenState(bool(i.is_reopen), int(i.reopen_count or 0)) for i in issues]

    # Yesterday: issues that existed by the cutoff, rebuilt from the log
    existed = [i for i in issues if i.created_at <= cutoff]
    existed_ids = {i.issue_id for i in existed}
    lookup = build_history_lookup((e for e in events if e.entity_id in existed_ids), cutoff)
    statuses_yesterday = [status_as_of(i, lookup) for i in existed]
    reopen_yesterday = [reopen_as_of(i, lookup) for i in existed]
    logger.debug(
        "Rebuilt %d of %d issues as of %s (%d with history)",
        len(existed),
        len(issues),
        cutoff,
        len(lookup),
    )

    status_labels = get_labels("status")
    priority_labels = get_labels("priority")

    overlap_rows = compute_workload_overlap(assignments, period, include_idle=include_idle)

    phases = list(phases)
    yesterday = today - timedelta(days=1)
    phase_today = summarize_phases(phases, today, period)
    phase_yesterday = summarize_phases(phases, yesterday, period, done_cutoff=yesterday)

    return IssueDashboardContext(
        as_of=as_of,
        cutoff=cutoff,
        period=period,
        today=summarize_issues(statuses_today, reopen_today),
        yesterday=summarize_issues(statuses_yesterday, reopen_yesterday),
        status_today=distribution(statuses_today, status_labels),
        status_yesterday=distribution(statuses_yesterday, status_labels),
        priority_today=distribution((normalize_priority(i.priority) for i in issues), priority_labels),
        priority_yesterday=distribution((normalize_priority(i.priority) for i in existed), priority_labels),
        open_by_owner=rank_open_by_owner(issues, names, top_n=top_n),
        overlap_by_owner=rank_overlap(overlap_rows, names, top_n=top_n),
        phase_today=phase_today,
        phase_yesterday=phase_yesterday,
        phase_series=LabeledSeries(labels=get_labels("phase"), counts=phase_today.counts()),
    )
