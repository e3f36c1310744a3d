"""Mapping raw store rows into domain models and models into DataFrames."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date, datetime
from typing import Any

import pandas as pd
import pytz

from .config import SETTINGS
from .models import AssignmentModel, IssueModel, PersonModel, PhaseModel, StatusChangeEvent
from .status import normalize_priority, normalize_status

Row = Mapping[str, Any]


def _is_missing(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        # Non-scalar values are never "missing"
        return False


def _tz(tz):
    if tz is None:
        return pytz.timezone(SETTINGS.timezone)
    if isinstance(tz, str):
        return pytz.timezone(tz)
    return tz


def to_local_naive(value: datetime, tz=None) -> datetime:
    """Express ``value`` as naive wall-clock time in the dashboard timezone.

    Naive inputs are assumed to already be local and are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(_tz(tz)).replace(tzinfo=None)


def parse_dt(value: Any, tz=None) -> datetime | None:
    if _is_missing(value):
        return None
    ts = pd.to_datetime(value, errors="coerce")
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert(_tz(tz)).tz_localize(None)
    return ts.to_pydatetime()


def parse_date(value: Any, tz=None) -> date | None:
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    dt = parse_dt(value, tz)
    return dt.date() if dt is not None else None


def parse_int(value: Any) -> int | None:
    if _is_missing(value):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError):
        return None


def parse_bool(value: Any) -> bool:
    if _is_missing(value):
        return False
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes", "y", "t"}
    return bool(value)


def _text(value: Any) -> str | None:
    if _is_missing(value):
        return None
    return str(value).strip()


def map_issue(row: Row, tz=None) -> IssueModel | None:
    issue_id = parse_int(row.get("issue_id"))
    created_at = parse_dt(row.get("created_at"), tz)
    if issue_id is None or created_at is None:
        return None
    return IssueModel(
        issue_id=issue_id,
        status=_text(row.get("status")),
        reopen_count=parse_int(row.get("reopen_count")) or 0,
        created_at=created_at,
        project_id=parse_int(row.get("project_id")),
        owner_id=parse_int(row.get("owner_id")),
        priority=_text(row.get("priority")),
        name=_text(row.get("name")),
        is_reopen=parse_bool(row.get("is_reopen")),
        dev_status=_text(row.get("dev_status")),
    )


def map_status_event(row: Row, tz=None, *, seq: int | None = None) -> StatusChangeEvent | None:
    entity_id = parse_int(row.get("issue_id"))
    changed_at = parse_dt(row.get("changed_at"), tz)
    if entity_id is None or changed_at is None:
        return None
    row_id = parse_int(row.get("id"))
    return StatusChangeEvent(
        entity_id=entity_id,
        old_status=_text(row.get("old_status")),
        new_status=_text(row.get("new_status")),
        reopen_flag=parse_bool(row.get("is_reopen")),
        reopen_count=parse_int(row.get("reopen_count")) or 0,
        changed_at=changed_at,
        changed_by=parse_int(row.get("changed_by")),
        seq=row_id if row_id is not None else seq,
    )


def map_assignment(row: Row, tz=None) -> AssignmentModel:
    return AssignmentModel(
        person_id=parse_int(row.get("person_id")),
        group_key=parse_int(row.get("project_id")),
        interval_start=parse_date(row.get("plan_start"), tz),
        interval_end=parse_date(row.get("plan_end"), tz),
        phase_id=parse_int(row.get("phase_id")),
    )


def map_phase(row: Row, tz=None) -> PhaseModel | None:
    phase_id = parse_int(row.get("phase_id"))
    if phase_id is None:
        return None
    return PhaseModel(
        phase_id=phase_id,
        project_id=parse_int(row.get("project_id")),
        name=_text(row.get("name")),
        plan_start=parse_date(row.get("plan_start"), tz),
        plan_end=parse_date(row.get("plan_end"), tz),
        actual_start=parse_date(row.get("actual_start"), tz),
        actual_end=parse_date(row.get("actual_end"), tz),
    )


def map_person(row: Row) -> PersonModel | None:
    person_id = parse_int(row.get("person_id"))
    if person_id is None:
        return None
    return PersonModel(person_id=person_id, name=_text(row.get("name")))


def issues_to_dataframe(issues: Iterable[IssueModel]) -> pd.DataFrame:
    rows = []
    for i in issues:
        rows.append(
            {
                "issue_id": i.issue_id,
                "name": i.name,
                "project_id": i.project_id,
                "owner_id": i.owner_id,
                "status": normalize_status(i.status),
                "priority": normalize_priority(i.priority),
                "reopen_count": int(i.reopen_count or 0),
                "is_reopen": bool(i.is_reopen),
                "created_at": i.created_at,
            }
        )
    columns = [
        "issue_id",
        "name",
        "project_id",
        "owner_id",
        "status",
        "priority",
        "reopen_count",
        "is_reopen",
        "created_at",
    ]
    df = pd.DataFrame(rows, columns=columns)
    # Nullable integer keeps missing owners as <NA> instead of float NaN
    df["owner_id"] = df["owner_id"].astype("Int64")
    df["project_id"] = df["project_id"].astype("Int64")
    return df
