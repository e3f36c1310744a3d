"""Data-store boundary: reads tracker exports and hands back domain models.

The dashboard never writes through this layer. Every read either returns a
complete list or raises ``DataSourceError``; callers must not compute on a
partial dataset.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from pathlib import Path

import pandas as pd

from .config import REQUIRED_COLUMNS, SOURCE_FILES
from .mappers import map_assignment, map_issue, map_person, map_phase, map_status_event, parse_int
from .models import AssignmentModel, IssueModel, Period, PersonModel, PhaseModel, StatusChangeEvent

logger = logging.getLogger(__name__)


class DataSourceError(RuntimeError):
    """Raised when source rows cannot be read in full."""


class TrackerStore(ABC):
    """Read-only interface the dashboard service fetches from."""

    @abstractmethod
    def fetch_issues(self) -> list[IssueModel]:
        raise NotImplementedError

    @abstractmethod
    def fetch_status_events(self, issue_ids: Iterable[int], cutoff: datetime) -> list[StatusChangeEvent]:
        raise NotImplementedError

    @abstractmethod
    def fetch_assignments(self, period: Period) -> list[AssignmentModel]:
        raise NotImplementedError

    @abstractmethod
    def fetch_phases(self) -> list[PhaseModel]:
        raise NotImplementedError

    @abstractmethod
    def fetch_people(self) -> list[PersonModel]:
        raise NotImplementedError

    @abstractmethod
    def fetch_projects(self) -> dict[int, str]:
        raise NotImplementedError


class CsvTrackerStore(TrackerStore):
    """TrackerStore over a directory of CSV exports (one file per table)."""

    def __init__(self, base_dir: str | Path, tz=None):
        self.base_dir = Path(base_dir)
        self.tz = tz

    def _read(self, table: str) -> pd.DataFrame:
        path = self.base_dir / SOURCE_FILES[table]
        if not path.exists():
            logger.warning("Missing source file %s", path)
            raise DataSourceError(f"Source file not found: {path}")
        try:
            df = pd.read_csv(path)
        except (OSError, ValueError) as exc:
            logger.warning("Failed to read %s: %s", path, exc)
            raise DataSourceError(f"Failed to read {path}: {exc}") from exc
        missing = [c for c in REQUIRED_COLUMNS[table] if c not in df.columns]
        if missing:
            logger.warning("Source %s lacks columns %s", path, missing)
            raise DataSourceError(f"{path.name} is missing required columns: {', '.join(missing)}")
        return df

    def fetch_issues(self) -> list[IssueModel]:
        rows = self._read("issues").to_dict("records")
        issues = [map_issue(r, self.tz) for r in rows]
        return [i for i in issues if i is not None]

    def fetch_status_events(self, issue_ids: Iterable[int], cutoff: datetime) -> list[StatusChangeEvent]:
        wanted = set(issue_ids)
        rows = self._read("status_history").to_dict("records")
        # File position stands in for the row id when the export has none
        events = [map_status_event(r, self.tz, seq=idx) for idx, r in enumerate(rows)]
        selected = [e for e in events if e is not None and e.entity_id in wanted and e.changed_at <= cutoff]
        selected.sort(key=lambda e: (e.changed_at, e.seq if e.seq is not None else -1), reverse=True)
        selected.sort(key=lambda e: e.entity_id)
        return selected

    def fetch_assignments(self, period: Period) -> list[AssignmentModel]:
        rows = self._read("assignments").to_dict("records")
        out: list[AssignmentModel] = []
        for r in rows:
            a = map_assignment(r, self.tz)
            if a.interval_start is None or a.interval_end is None:
                continue
            if not period.overlaps(a.interval_start, a.interval_end):
                continue
            out.append(a)
        return out

    def fetch_phases(self) -> list[PhaseModel]:
        rows = self._read("phases").to_dict("records")
        phases = [map_phase(r, self.tz) for r in rows]
        return [p for p in phases if p is not None]

    def fetch_people(self) -> list[PersonModel]:
        rows = self._read("people").to_dict("records")
        people = [map_person(r) for r in rows]
        return [p for p in people if p is not None]

    def fetch_projects(self) -> dict[int, str]:
        out: dict[int, str] = {}
        for r in self._read("projects").to_dict("records"):
            project_id = parse_int(r.get("project_id"))
            if project_id is None or project_id in out:
                continue
            name = r.get("name")
            out[project_id] = str(name).strip() if isinstance(name, str) and name.strip() else f"#{project_id}"
        return out
