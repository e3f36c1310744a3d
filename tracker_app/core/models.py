"""Domain data models for issues, status history, assignments, and phases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime


@dataclass(slots=True, frozen=True)
class StatusChangeEvent:
    entity_id: int
    old_status: str | None
    new_status: str | None
    reopen_flag: bool
    reopen_count: int
    changed_at: datetime
    changed_by: int | None = None
    # Insertion order in the log (history row id); breaks changed_at ties
    seq: int | None = None


@dataclass(slots=True)
class IssueModel:
    issue_id: int
    status: str | None
    reopen_count: int
    created_at: datetime
    project_id: int | None = None
    owner_id: int | None = None
    priority: str | None = None
    name: str | None = None
    is_reopen: bool = False
    dev_status: str | None = None


@dataclass(slots=True)
class AssignmentModel:
    person_id: int | None
    group_key: int | None
    interval_start: date | None
    interval_end: date | None
    phase_id: int | None = None


@dataclass(slots=True)
class PhaseModel:
    phase_id: int
    project_id: int | None
    name: str | None = None
    plan_start: date | None = None
    plan_end: date | None = None
    actual_start: date | None = None
    actual_end: date | None = None


@dataclass(slots=True)
class PersonModel:
    person_id: int
    name: str | None


@dataclass(slots=True, frozen=True)
class Interval:
    """Inclusive date range."""

    start: date
    end: date


@dataclass(slots=True, frozen=True)
class Period:
    """Bounding window all intervals are clipped to."""

    start: date
    end: date

    @classmethod
    def calendar_year(cls, year: int) -> Period:
        return cls(date(year, 1, 1), date(year, 12, 31))

    def overlaps(self, start: date, end: date) -> bool:
        return end >= self.start and start <= self.end
