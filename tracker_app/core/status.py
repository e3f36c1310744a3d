"""Status and priority normalization utilities.

Stored status strings come from free-form edits and imports, so every
comparison in the dashboard goes through these helpers. They use the label
configuration from config.py (STATUS_DISPLAY_ORDER, PRIORITY_DISPLAY_ORDER).
"""

from __future__ import annotations

from collections.abc import Iterable


def normalize_status(value: str | None) -> str:
    """Trim and upper-case a status string.

    Parameters
    ----------
    value : str | None
        Raw status string.

    Returns
    -------
    str
        Canonical upper-case form, or "" for missing / blank values.

    Examples
    --------
    >>> normalize_status("  fixed ")
    'FIXED'
    >>> normalize_status(None)
    ''
    """
    if value is None:
        return ""
    try:
        text = str(value).strip()
    except (TypeError, ValueError):
        return ""
    if text.lower() in {"nan", "none", "null"}:
        return ""
    return text.upper()


def normalize_priority(value: str | None) -> str:
    """Priorities follow the same canonical form as statuses."""
    return normalize_status(value)


def ordered_labels(observed: Iterable[str], preferred: Iterable[str]) -> list[str]:
    """Preferred labels first (in order), then other non-blank observed labels sorted."""
    head = list(preferred)
    seen = set(head)
    extra = sorted({v for v in observed if v and v not in seen})
    return head + extra
