"""Workload overlap: peak number of projects a person runs at the same time."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import timedelta

from tracker_app.analytics.intervals import intervals_by_person, merge_assignments
from tracker_app.core.models import AssignmentModel, Interval, Period

ONE_DAY = timedelta(days=1)


@dataclass(slots=True, frozen=True)
class WorkloadOverlap:
    person_id: int
    doing: int
    overlap: int


def max_concurrent(intervals: Iterable[Interval]) -> int:
    """Peak count of simultaneously active inclusive-end intervals.

    Each interval contributes ``+1`` on its start and ``-1`` on the day after
    its end. Events sort by ``(date, delta)`` so a decrement lands before an
    increment on the same date: a same-day handoff is not an overlap.
    """
    events: list[tuple] = []
    for it in intervals:
        events.append((it.start, 1))
        events.append((it.end + ONE_DAY, -1))
    events.sort()

    cur = 0
    best = 0
    for _day, delta in events:
        cur += delta
        if cur > best:
            best = cur
    return best


def overlap_from_doing(doing: int) -> int:
    """Commitments beyond a single full-time allocation."""
    return max(0, doing - 1)


def compute_workload_overlap(
    assignments: Iterable[AssignmentModel],
    period: Period,
    *,
    include_idle: bool = False,
) -> list[WorkloadOverlap]:
    """Doing/overlap per person, ranked.

    Sorted by overlap desc, then doing desc, then person id. People whose
    overlap is 0 are dropped unless ``include_idle`` is set.
    """
    per_person = intervals_by_person(merge_assignments(assignments, period))
    rows: list[WorkloadOverlap] = []
    for person_id, intervals in per_person.items():
        doing = max_concurrent(intervals)
        overlap = overlap_from_doing(doing)
        if overlap == 0 and not include_idle:
            continue
        rows.append(WorkloadOverlap(person_id=person_id, doing=doing, overlap=overlap))
    rows.sort(key=lambda r: (-r.overlap, -r.doing, r.person_id))
    return rows
