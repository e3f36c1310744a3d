"""Person id to display-name lookup."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .config import PERSON_FALLBACK_PREFIX, UNKNOWN_PERSON_LABEL
from .models import PersonModel


def build_name_lookup(people: Iterable[PersonModel]) -> dict[int, str]:
    """Map person id to name; the first row wins when an id repeats."""
    names: dict[int, str] = {}
    for person in people:
        if person.person_id in names:
            continue
        names[person.person_id] = (person.name or "").strip()
    return names


def display_name(person_id: int | None, names: Mapping[int, str]) -> str:
    """Total lookup: never returns a blank label.

    ``None`` ids map to "Unknown"; ids with no (or a blank) name map to
    ``EMP#<id>``.
    """
    if person_id is None:
        return UNKNOWN_PERSON_LABEL
    name = names.get(person_id)
    if name and name.strip():
        return name.strip()
    return f"{PERSON_FALLBACK_PREFIX}{person_id}"
