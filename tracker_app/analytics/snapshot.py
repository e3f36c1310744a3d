"""Point-in-time reconstruction of issue state from the status-change log.

The live issue row only says what is true now. To answer "what was the status
at the end of yesterday" we pick the last logged transition at or before the
cutoff and read its target status. When no transition qualifies the issue
already held its live status at the cutoff, so the live row is the answer.

All functions here are pure: no I/O, no caching, and "no history" is a normal
outcome rather than an error. Callers are responsible for dropping issues that
did not exist yet at the cutoff (``created_at > cutoff``).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from tracker_app.core.models import IssueModel, StatusChangeEvent
from tracker_app.core.status import normalize_status

HistoryLookup = Mapping[int, StatusChangeEvent]


@dataclass(slots=True, frozen=True)
class ReopenState:
    is_reopen: bool
    reopen_count: int


def select_event(history: Sequence[StatusChangeEvent], cutoff: datetime) -> StatusChangeEvent | None:
    """Return the event with the latest ``changed_at`` not after ``cutoff``.

    Parameters
    ----------
    history : sequence of StatusChangeEvent
        Events of a single issue, in insertion order (any time ordering).
    cutoff : datetime
        Instant the state is evaluated at (inclusive).

    Returns
    -------
    StatusChangeEvent or None
        The winning event; on equal timestamps the later inserted one. Uses
        ``seq`` as the insertion key when every event carries one, otherwise
        the position in ``history``.
    """
    use_seq = all(e.seq is not None for e in history)
    best: StatusChangeEvent | None = None
    best_key: tuple | None = None
    for pos, event in enumerate(history):
        if event.changed_at > cutoff:
            continue
        key = (event.changed_at, event.seq if use_seq else pos)
        if best_key is None or key >= best_key:
            best, best_key = event, key
    return best


def build_history_lookup(events: Iterable[StatusChangeEvent], cutoff: datetime) -> dict[int, StatusChangeEvent]:
    """Prebuild the winning event per issue for one cutoff."""
    grouped: dict[int, list[StatusChangeEvent]] = {}
    for event in events:
        grouped.setdefault(event.entity_id, []).append(event)
    lookup: dict[int, StatusChangeEvent] = {}
    for entity_id, history in grouped.items():
        winner = select_event(history, cutoff)
        if winner is not None:
            lookup[entity_id] = winner
    return lookup


def _status_from(entity: IssueModel, event: StatusChangeEvent | None) -> str:
    if event is not None:
        status = normalize_status(event.new_status)
        if status:
            return status
    return normalize_status(entity.status)


def _reopen_from(entity: IssueModel, event: StatusChangeEvent | None) -> ReopenState:
    if event is not None:
        return ReopenState(bool(event.reopen_flag), int(event.reopen_count or 0))
    return ReopenState(bool(entity.is_reopen), int(entity.reopen_count or 0))


def reconstruct_status(entity: IssueModel, history: Sequence[StatusChangeEvent], cutoff: datetime) -> str:
    """Normalized status of ``entity`` as of ``cutoff``.

    A winning event whose status is blank falls back to the live status.
    """
    return _status_from(entity, select_event(history, cutoff))


def reconstruct_reopen(entity: IssueModel, history: Sequence[StatusChangeEvent], cutoff: datetime) -> ReopenState:
    return _reopen_from(entity, select_event(history, cutoff))


def status_as_of(entity: IssueModel, lookup: HistoryLookup) -> str:
    """Same as ``reconstruct_status`` but reads a lookup from ``build_history_lookup``."""
    return _status_from(entity, lookup.get(entity.issue_id))


def reopen_as_of(entity: IssueModel, lookup: HistoryLookup) -> ReopenState:
    return _reopen_from(entity, lookup.get(entity.issue_id))
