"""Per (person, project) engagement spans clipped to a bounding period."""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable, Mapping

from tracker_app.core.models import AssignmentModel, Interval, Period

PersonGroupKey = tuple[int, int]


def merge_and_clip(raw_intervals: Iterable[Interval], period: Period) -> Interval | None:
    """Envelope of ``raw_intervals`` clipped to ``period``.

    The envelope runs from the earliest start to the latest end, so gaps
    between sub-intervals count as continuous engagement. Returns None for an
    empty input or when nothing is left after clipping.
    """
    items = list(raw_intervals)
    if not items:
        return None
    start = max(min(i.start for i in items), period.start)
    end = min(max(i.end for i in items), period.end)
    if start > end:
        return None
    return Interval(start, end)


def merge_assignments(assignments: Iterable[AssignmentModel], period: Period) -> dict[PersonGroupKey, Interval]:
    """One merged interval per (person, project).

    Rows missing a person, project, start, or end date are left out of the
    grouping.
    """
    grouped: defaultdict[PersonGroupKey, list[Interval]] = defaultdict(list)
    for a in assignments:
        if a.person_id is None or a.group_key is None:
            continue
        if a.interval_start is None or a.interval_end is None:
            continue
        grouped[(a.person_id, a.group_key)].append(Interval(a.interval_start, a.interval_end))

    merged: dict[PersonGroupKey, Interval] = {}
    for key, raw in grouped.items():
        interval = merge_and_clip(raw, period)
        if interval is not None:
            merged[key] = interval
    return merged


def intervals_by_person(merged: Mapping[PersonGroupKey, Interval]) -> dict[int, list[Interval]]:
    out: defaultdict[int, list[Interval]] = defaultdict(list)
    for (person_id, _group), interval in merged.items():
        out[person_id].append(interval)
    return dict(out)
