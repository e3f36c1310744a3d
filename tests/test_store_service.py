from datetime import date, datetime

import pandas as pd
import pytest

from tracker_app.core.config import SETTINGS
from tracker_app.core.mappers import to_local_naive
from tracker_app.core.models import AssignmentModel, IssueModel, Period, PersonModel, StatusChangeEvent
from tracker_app.core.service import DashboardService
from tracker_app.core.store import CsvTrackerStore, DataSourceError, TrackerStore

AS_OF = datetime(2025, 3, 10, 9, 30)


def _write_sample_exports(base):
    pd.DataFrame(
        [
            {"issue_id": 1, "status": "FIXED", "created_at": "2025-03-01 10:00:00", "owner_id": 100,
             "priority": "urgent", "reopen_count": 0, "is_reopen": False},
            {"issue_id": 2, "status": "open", "created_at": "2025-03-02 08:00:00", "owner_id": None,
             "priority": "NORMAL", "reopen_count": 1, "is_reopen": True},
            {"issue_id": 3, "status": "OPEN", "created_at": "2025-03-10 07:00:00", "owner_id": 200,
             "priority": None, "reopen_count": 0, "is_reopen": False},
            {"issue_id": None, "status": "OPEN", "created_at": "2025-03-01", "owner_id": 1,
             "priority": None, "reopen_count": 0, "is_reopen": False},
        ]
    ).to_csv(base / "issues.csv", index=False)
    pd.DataFrame(
        [
            {"id": 11, "issue_id": 1, "old_status": None, "new_status": "OPEN", "changed_at": "2025-03-01 10:00:00",
             "is_reopen": 0, "reopen_count": 0},
            {"id": 12, "issue_id": 1, "old_status": "OPEN", "new_status": "WIP", "changed_at": "2025-03-05 10:00:00",
             "is_reopen": 0, "reopen_count": 0},
            {"id": 13, "issue_id": 1, "old_status": "WIP", "new_status": "FIXED", "changed_at": "2025-03-05 10:00:00",
             "is_reopen": 0, "reopen_count": 0},
            {"id": 14, "issue_id": 1, "old_status": "FIXED", "new_status": "FIXED",
             "changed_at": "2025-03-10 08:00:00", "is_reopen": 0, "reopen_count": 0},
            {"id": 15, "issue_id": 2, "old_status": "FIXED", "new_status": "OPEN", "changed_at": "2025-03-08 09:00:00",
             "is_reopen": 1, "reopen_count": 1},
            {"id": 16, "issue_id": 3, "old_status": None, "new_status": "OPEN", "changed_at": "2025-03-10 07:00:00",
             "is_reopen": 0, "reopen_count": 0},
        ]
    ).to_csv(base / "issue_status_history.csv", index=False)
    pd.DataFrame(
        [
            {"person_id": 100, "project_id": 1, "plan_start": "2025-01-01", "plan_end": "2025-03-31"},
            {"person_id": 100, "project_id": 2, "plan_start": "2025-03-01", "plan_end": "2025-04-30"},
            {"person_id": 200, "project_id": 1, "plan_start": "2024-01-01", "plan_end": "2024-02-01"},
            {"person_id": 200, "project_id": 2, "plan_start": None, "plan_end": "2025-02-01"},
        ]
    ).to_csv(base / "assignments.csv", index=False)
    pd.DataFrame(
        [
            {"phase_id": 1, "project_id": 1, "plan_start": "2025-03-01", "plan_end": "2025-03-31", "actual_end": None},
            {"phase_id": 2, "project_id": 2, "plan_start": "2025-01-01", "plan_end": "2025-01-31", "actual_end": None},
        ]
    ).to_csv(base / "phases.csv", index=False)
    pd.DataFrame(
        [
            {"person_id": 100, "name": "Alice"},
            {"person_id": 200, "name": None},
        ]
    ).to_csv(base / "people.csv", index=False)
    pd.DataFrame(
        [
            {"project_id": 1, "name": "Alpha"},
            {"project_id": 2, "name": None},
        ]
    ).to_csv(base / "projects.csv", index=False)


def test_csv_store_reads_models(tmp_path):
    _write_sample_exports(tmp_path)
    store = CsvTrackerStore(tmp_path)
    issues = store.fetch_issues()
    assert [i.issue_id for i in issues] == [1, 2, 3]
    assert issues[1].owner_id is None
    assert issues[1].is_reopen is True
    assert issues[0].created_at == datetime(2025, 3, 1, 10, 0)
    people = store.fetch_people()
    assert [(p.person_id, p.name) for p in people] == [(100, "Alice"), (200, None)]
    assert store.fetch_projects() == {1: "Alpha", 2: "#2"}
    assert [p.phase_id for p in store.fetch_phases()] == [1, 2]


def test_csv_store_filters_status_events(tmp_path):
    _write_sample_exports(tmp_path)
    store = CsvTrackerStore(tmp_path)
    events = store.fetch_status_events([1, 2], datetime(2025, 3, 9, 23, 59, 59))
    assert [e.seq for e in events] == [13, 12, 11, 15]
    assert all(e.changed_at <= datetime(2025, 3, 9, 23, 59, 59) for e in events)
    assert events[-1].reopen_flag is True


def test_csv_store_assignments_within_period(tmp_path):
    _write_sample_exports(tmp_path)
    rows = CsvTrackerStore(tmp_path).fetch_assignments(Period.calendar_year(2025))
    assert rows == [
        AssignmentModel(100, 1, date(2025, 1, 1), date(2025, 3, 31)),
        AssignmentModel(100, 2, date(2025, 3, 1), date(2025, 4, 30)),
    ]


def test_missing_file_raises(tmp_path):
    with pytest.raises(DataSourceError, match="not found"):
        CsvTrackerStore(tmp_path).fetch_issues()


def test_missing_column_raises(tmp_path):
    pd.DataFrame([{"issue_id": 1, "status": "OPEN"}]).to_csv(tmp_path / "issues.csv", index=False)
    with pytest.raises(DataSourceError, match="created_at"):
        CsvTrackerStore(tmp_path).fetch_issues()


def test_service_builds_dashboard_from_csv(tmp_path):
    _write_sample_exports(tmp_path)
    messages = []
    service = DashboardService(CsvTrackerStore(tmp_path))
    ctx = service.build_dashboard(as_of=AS_OF, progress=lambda msg, cur, total: messages.append((msg, cur, total)))
    assert ctx.today.total == 3
    assert ctx.today.open == 2
    # issue 1 reached FIXED on Mar 5 (same-instant WIP then FIXED)
    assert ctx.yesterday.total == 2
    assert ctx.yesterday.fixed == 1
    assert ctx.yesterday.open == 1
    assert ctx.yesterday.reopen_rate == 50.0
    assert ctx.open_by_owner.labels == ["EMP#200"]
    assert ctx.overlap_by_owner.labels == ["Alice"]
    assert ctx.phase_today.doing == 1
    assert ctx.phase_today.overdue == 1
    assert messages[0] == ("Loading issues", 0, 5)
    assert messages[-1] == ("Dashboard ready", 5, 5)


def test_service_weekly_workload(tmp_path):
    _write_sample_exports(tmp_path)
    df = DashboardService(CsvTrackerStore(tmp_path)).weekly_workload(2025)
    assert set(df["person"]) == {"Alice"}
    week_10 = df[df["week_no"] == 10].iloc[0]
    assert week_10["project_count"] == 2
    assert week_10["project_names"] == "#2 | Alpha"


class _RecordingStore(TrackerStore):
    def __init__(self, issues, events=(), fail_on=None):
        self.issues = list(issues)
        self.events = list(events)
        self.fail_on = fail_on
        self.calls = []

    def _check(self, name):
        self.calls.append(name)
        if name == self.fail_on:
            raise DataSourceError(f"{name} unavailable")

    def fetch_issues(self):
        self._check("issues")
        return self.issues

    def fetch_status_events(self, issue_ids, cutoff):
        self._check("status_events")
        self.requested = (sorted(issue_ids), cutoff)
        return [e for e in self.events if e.entity_id in set(issue_ids) and e.changed_at <= cutoff]

    def fetch_assignments(self, period):
        self._check("assignments")
        return []

    def fetch_phases(self):
        self._check("phases")
        return []

    def fetch_people(self):
        self._check("people")
        return [PersonModel(1, "Dana")]

    def fetch_projects(self):
        self._check("projects")
        return {}


def _sample_store(**kwargs):
    issues = [
        IssueModel(issue_id=1, status="OPEN", reopen_count=0, created_at=datetime(2025, 1, 1), owner_id=1),
        IssueModel(issue_id=2, status="OPEN", reopen_count=0, created_at=datetime(2025, 3, 10, 8, 0), owner_id=1),
    ]
    events = [
        StatusChangeEvent(1, None, "WIP", False, 0, datetime(2025, 1, 2)),
    ]
    return _RecordingStore(issues, events, **kwargs)


def test_service_requests_only_existing_issue_history():
    store = _sample_store()
    ctx = DashboardService(store).build_dashboard(as_of=AS_OF)
    assert store.calls == ["issues", "status_events", "assignments", "phases", "people"]
    assert store.requested == ([1], datetime(2025, 3, 9, 23, 59, 59, 999999))
    assert ctx.yesterday.wip == 1
    assert ctx.today.open == 2
    assert ctx.open_by_owner.labels == ["Dana"]
    assert ctx.open_by_owner.counts == [2]


def test_service_propagates_store_errors():
    store = _sample_store(fail_on="assignments")
    with pytest.raises(DataSourceError, match="assignments unavailable"):
        DashboardService(store).build_dashboard(as_of=AS_OF)
    assert "phases" not in store.calls


def test_service_now_is_naive():
    assert DashboardService(_sample_store()).now().tzinfo is None


def test_incomplete_store_fails_on_creation():
    class _IssuesOnlyStore(TrackerStore):
        def fetch_issues(self):
            return []

    with pytest.raises(TypeError):
        _IssuesOnlyStore()


def test_timestamps_follow_configured_timezone(tmp_path, monkeypatch):
    monkeypatch.setattr(SETTINGS, "timezone", "UTC")
    pd.DataFrame(
        [{"issue_id": 1, "status": "OPEN", "created_at": "2025-03-01T10:00:00+07:00"}]
    ).to_csv(tmp_path / "issues.csv", index=False)
    issues = CsvTrackerStore(tmp_path).fetch_issues()
    assert issues[0].created_at == datetime(2025, 3, 1, 3, 0)
    aware = pd.Timestamp("2025-03-10T09:30:00+07:00").to_pydatetime()
    assert to_local_naive(aware) == datetime(2025, 3, 10, 2, 30)
