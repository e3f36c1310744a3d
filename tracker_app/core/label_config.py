"""Load and expose chart label orders from YAML (with fallbacks)."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from .config import PHASE_DISPLAY_ORDER, PRIORITY_DISPLAY_ORDER, STATUS_DISPLAY_ORDER
from .status import normalize_status

logger = logging.getLogger(__name__)

_CACHE: dict[str, list[str]] | None = None


def _defaults() -> dict[str, list[str]]:
    return {
        "status": list(STATUS_DISPLAY_ORDER),
        "priority": list(PRIORITY_DISPLAY_ORDER),
        "phase": list(PHASE_DISPLAY_ORDER),
    }


def load_label_sets(base_path: str | Path | None = None, *, reload: bool = False) -> dict[str, list[str]]:
    global _CACHE
    if _CACHE is not None and not reload:
        return _CACHE
    base = Path(base_path or Path(__file__).resolve().parent.parent)
    yaml_path = base / "labels.yaml"
    if not yaml_path.exists():
        _CACHE = _defaults()
        return _CACHE
    try:
        data = yaml.safe_load(yaml_path.read_text(encoding="utf-8")) or {}
    except (OSError, yaml.YAMLError) as exc:
        logger.warning("Ignoring unreadable label config %s: %s", yaml_path, exc)
        _CACHE = _defaults()
        return _CACHE
    sets = data.get("sets", {}) if isinstance(data, dict) else {}
    out = _defaults()
    for name in ("status", "priority"):
        values = [normalize_status(v) for v in sets.get(name) or []]
        values = [v for v in values if v]
        if values:
            out[name] = values
    phase = [str(v).strip() for v in sets.get("phase") or [] if str(v).strip()]
    # Phase labels rename the fixed buckets, so the count must match
    if len(phase) == len(PHASE_DISPLAY_ORDER):
        out["phase"] = phase
    _CACHE = out
    return _CACHE


def get_labels(set_name: str) -> list[str]:
    sets = load_label_sets()
    return list(sets.get(set_name, []))
