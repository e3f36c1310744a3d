"""Central configuration, constants, and shared label definitions."""

from __future__ import annotations

import os
from collections.abc import Sequence
from dataclasses import dataclass, field

# =============================================================================
# Time Settings
# =============================================================================
TIMEZONE = "Asia/Bangkok"

# =============================================================================
# Issue Workflow Configuration
# =============================================================================
# Canonical display order for the status donut
STATUS_DISPLAY_ORDER: Sequence[str] = (
    "OPEN",
    "WIP",
    "FIXED",
    "REJECT",
    "PASS",
    "FAIL",
)

STATUS_OPEN = "OPEN"
STATUS_WIP = "WIP"
STATUS_FIXED = "FIXED"

PRIORITY_DISPLAY_ORDER: Sequence[str] = (
    "URGENT",
    "NORMAL",
)

# Phase chart buckets, in display order
PHASE_DISPLAY_ORDER: Sequence[str] = (
    "Planned",
    "Doing",
    "Done",
    "Overdue",
)

# =============================================================================
# People / Ranking Labels
# =============================================================================
UNKNOWN_PERSON_LABEL = "Unknown"
PERSON_FALLBACK_PREFIX = "EMP#"

NO_OPEN_ISSUES_LABEL = "No Open Issues"
NO_OVERLAP_LABEL = "No Overlap"
# The overlap placeholder carries 1 so a donut/bar still renders a slice
NO_OVERLAP_PLACEHOLDER_COUNT = 1

# =============================================================================
# Workload Heatmap
# =============================================================================
WEEKS_PER_YEAR = 52
PROJECT_NAME_SEPARATOR = " | "

# =============================================================================
# Data Source (CSV exports)
# =============================================================================
DATA_DIR_ENV = "TRACKER_DATA_DIR"

SOURCE_FILES = {
    "issues": "issues.csv",
    "status_history": "issue_status_history.csv",
    "assignments": "assignments.csv",
    "phases": "phases.csv",
    "people": "people.csv",
    "projects": "projects.csv",
}

REQUIRED_COLUMNS: dict[str, Sequence[str]] = {
    "issues": ("issue_id", "status", "created_at"),
    "status_history": ("issue_id", "new_status", "changed_at"),
    "assignments": ("person_id", "project_id", "plan_start", "plan_end"),
    "phases": ("phase_id", "project_id", "plan_start", "plan_end"),
    "people": ("person_id", "name"),
    "projects": ("project_id", "name"),
}


@dataclass(slots=True)
class AppSettings:
    timezone: str = TIMEZONE
    data_dir: str = field(default_factory=lambda: os.environ.get(DATA_DIR_ENV, "data"))
    top_n: int = 20
    include_idle_in_overlap: bool = False


SETTINGS = AppSettings()
