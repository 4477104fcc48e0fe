"""Dotted-path lookup into raw CT.gov study records."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

FIELD_NOT_FOUND = "Field not found"


def _step(value: Any, key: str) -> Any:
    if isinstance(value, Mapping):
        return value.get(key)
    # Numeric segments index into lists, e.g. "locations.0.city"
    if isinstance(value, Sequence) and not isinstance(value, str) and key.isdigit():
        index = int(key)
        return value[index] if index < len(value) else None
    return None


def search_for_field(study: Mapping[str, Any], search_field: str | None = None) -> Any:
    """Resolve a dot-delimited path inside a study record.

    Returns None when no path is requested. Lookup stops at the first falsy
    value along the path and yields FIELD_NOT_FOUND, so a stored 0, False or
    "" renders the same as a missing key.
    """
    if not search_field:
        return None
    value: Any = study
    for part in search_field.split("."):
        value = _step(value, part)
        if not value:
            return FIELD_NOT_FOUND
    return value
