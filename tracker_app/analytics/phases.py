"""Phase tracking counts (planned / doing / done / overdue) for a given day."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from tracker_app.core.models import Period, PhaseModel


@dataclass(slots=True)
class PhaseSummary:
    total: int = 0
    planned: int = 0
    doing: int = 0
    done: int = 0
    overdue: int = 0

    def minus(self, other: PhaseSummary) -> PhaseSummary:
        return PhaseSummary(
            total=self.total - other.total,
            planned=self.planned - other.planned,
            doing=self.doing - other.doing,
            done=self.done - other.done,
            overdue=self.overdue - other.overdue,
        )

    def counts(self) -> list[int]:
        """Counts in PHASE_DISPLAY_ORDER."""
        return [self.planned, self.doing, self.done, self.overdue]


def phases_in_period(phases: Iterable[PhaseModel], period: Period) -> list[PhaseModel]:
    """Phases with a full plan range that touches the period."""
    return [
        p
        for p in phases
        if p.plan_start is not None and p.plan_end is not None and period.overlaps(p.plan_start, p.plan_end)
    ]


def summarize_phases(
    phases: Iterable[PhaseModel],
    day: date,
    period: Period,
    *,
    done_cutoff: date | None = None,
) -> PhaseSummary:
    """Count phases by plan position relative to ``day``.

    Parameters
    ----------
    phases : iterable of PhaseModel
        All phases; those outside ``period`` are ignored.
    day : date
        Day the plan position is evaluated on.
    period : Period
        Bounding window (usually the current calendar year).
    done_cutoff : date, optional
        When given, a phase only counts as done if it finished on or before
        this date. Used to rebuild yesterday's numbers.
    """
    selected = phases_in_period(phases, period)
    summary = PhaseSummary(total=len(selected))
    for p in selected:
        finished = p.actual_end is not None and (done_cutoff is None or p.actual_end <= done_cutoff)
        if p.plan_start > day:
            summary.planned += 1
        if p.plan_start <= day <= p.plan_end:
            summary.doing += 1
        if finished:
            summary.done += 1
        elif p.plan_end < day:
            summary.overdue += 1
    return summary
