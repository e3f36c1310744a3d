from datetime import date

from tracker_app.analytics.phases import PhaseSummary, phases_in_period, summarize_phases
from tracker_app.core.models import Period, PhaseModel

YEAR = Period.calendar_year(2025)
DAY = date(2025, 6, 15)


def _phase(phase_id, start, end, actual_end=None):
    return PhaseModel(phase_id=phase_id, project_id=1, plan_start=start, plan_end=end, actual_end=actual_end)


def _sample_phases():
    return [
        _phase(1, date(2025, 7, 1), date(2025, 7, 31)),  # planned
        _phase(2, date(2025, 6, 1), date(2025, 6, 30)),  # doing
        _phase(3, date(2025, 5, 1), date(2025, 5, 31), actual_end=date(2025, 6, 2)),  # done
        _phase(4, date(2025, 4, 1), date(2025, 4, 30)),  # overdue
        _phase(5, date(2025, 6, 10), date(2025, 6, 20), actual_end=date(2025, 6, 14)),  # doing and done
        _phase(6, date(2024, 1, 1), date(2024, 3, 1)),  # outside the period
        _phase(7, None, date(2025, 6, 20)),  # no plan start
    ]


def test_phases_in_period_requires_plan_range():
    selected = phases_in_period(_sample_phases(), YEAR)
    assert [p.phase_id for p in selected] == [1, 2, 3, 4, 5]


def test_summarize_phases_for_day():
    summary = summarize_phases(_sample_phases(), DAY, YEAR)
    assert summary == PhaseSummary(total=5, planned=1, doing=2, done=2, overdue=1)
    assert summary.counts() == [1, 2, 2, 1]


def test_done_cutoff_rebuilds_earlier_view():
    summary = summarize_phases(_sample_phases(), date(2025, 6, 1), YEAR, done_cutoff=date(2025, 6, 1))
    # phase 3 finished on Jun 2, so on Jun 1 it is still late
    assert summary.done == 0
    assert summary.overdue == 2
    assert summary.planned == 2


def test_summary_minus():
    today = PhaseSummary(total=5, planned=1, doing=2, done=2, overdue=1)
    yesterday = PhaseSummary(total=5, planned=1, doing=2, done=1, overdue=2)
    assert today.minus(yesterday) == PhaseSummary(total=0, planned=0, doing=0, done=1, overdue=-1)
