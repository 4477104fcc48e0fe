"""Render raw CT.gov study records as LLM-readable text.

Two renderers share the same field lookup: a short general-matching summary
and a full eligibility/safety/ethics review. Every requested field produces a
line; missing values show FIELD_NOT_FOUND so each study block has the same
shape.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from trialmcp.registry.fields import FIELD_NOT_FOUND, search_for_field
from trialmcp.registry.query import FIELD_GROUPS, GENERAL_FIELDS

MATCHING_LIMIT = 3
ELIGIBILITY_LIMIT = 100
MAX_LOCATIONS_DISPLAYED = 3
MAX_ELIGIBILITY_CHARS = 2000  # ~500 tokens, roughly the first 20 criteria lines

NO_STUDIES_TEXT = "No recruiting clinical trials found."

_LOCATION_KEYS = ("facility", "city", "state", "country")

# Fields shown by the general matching summary, in display order
_MATCHING_FIELDS: tuple[tuple[str, str], ...] = (
    ("NCT ID", "protocolSection.identificationModule.nctId"),
    ("Title", "protocolSection.identificationModule.briefTitle"),
    ("Status", "protocolSection.statusModule.overallStatus"),
    ("Conditions", "protocolSection.conditionsModule.conditions"),
    ("Phase", "protocolSection.designModule.phases"),
    ("Lead Sponsor", "protocolSection.sponsorCollaboratorsModule.leadSponsor.name"),
    ("Locations", "protocolSection.contactsLocationsModule.locations"),
    ("Sex", "protocolSection.eligibilityModule.sex"),
    ("Minimum Age", "protocolSection.eligibilityModule.minimumAge"),
    ("Maximum Age", "protocolSection.eligibilityModule.maximumAge"),
    ("Summary", "protocolSection.descriptionModule.briefSummary"),
    ("Eligibility Criteria", "protocolSection.eligibilityModule.eligibilityCriteria"),
)

_LOCATION_PATH = next(path for name, _, path in GENERAL_FIELDS if name == "Location")


def _truncate_eligibility(text: str) -> str:
    """Truncate eligibility criteria to prevent context window bloat."""
    if len(text) <= MAX_ELIGIBILITY_CHARS:
        return text
    truncated = text[:MAX_ELIGIBILITY_CHARS]
    last_newline = truncated.rfind("\n")
    if last_newline > MAX_ELIGIBILITY_CHARS * 0.7:
        truncated = truncated[:last_newline]
    return truncated + "\n[... truncated for brevity]"


def _format_location(site: Any) -> str:
    if not isinstance(site, Mapping):
        return str(site)
    parts = [str(site[k]) for k in _LOCATION_KEYS if site.get(k)]
    return ", ".join(parts) or FIELD_NOT_FOUND


def _format_locations(sites: Sequence[Any]) -> str:
    shown = "; ".join(_format_location(s) for s in sites[:MAX_LOCATIONS_DISPLAYED])
    extra = len(sites) - MAX_LOCATIONS_DISPLAYED
    if extra > 0:
        shown += f" (+{extra} more)"
    return shown


def format_value(value: Any) -> str:
    """Flatten a resolved field value into a single display string."""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, str):
        return value
    if isinstance(value, Sequence):
        return ", ".join(format_value(v) for v in value)
    if isinstance(value, Mapping):
        return ", ".join(f"{k}: {format_value(v)}" for k, v in value.items())
    return str(value)


def _render_field(study: Mapping[str, Any], label: str, path: str) -> str:
    value = search_for_field(study, path)
    if value == FIELD_NOT_FOUND:
        text = FIELD_NOT_FOUND
    elif path == _LOCATION_PATH and isinstance(value, Sequence) and not isinstance(value, str):
        text = _format_locations(value)
    else:
        text = format_value(value)
    if "\n" in text:
        return f"{label}:\n{text}"
    return f"{label}: {text}"


def _render_matching_study(index: int, study: Mapping[str, Any]) -> str:
    lines = [f"Study {index}:"]
    for label, path in _MATCHING_FIELDS:
        line = _render_field(study, label, path)
        if label == "Eligibility Criteria":
            line = _truncate_eligibility(line)
        lines.append(line)
    return "\n".join(lines)


def _render_review_study(index: int, study: Mapping[str, Any]) -> str:
    lines = [f"Study {index}:"]
    for group, fields in FIELD_GROUPS.items():
        lines.append(f"-- {group} --")
        lines.extend(_render_field(study, label, path) for _, label, path in fields)
    return "\n".join(lines)


def studies_listed_info(studies: Sequence[Mapping[str, Any]], limit: int = MATCHING_LIMIT) -> str:
    """Summarize the first `limit` studies for general trial matching."""
    selected = list(studies[:limit])
    if not selected:
        return NO_STUDIES_TEXT
    return "\n\n".join(_render_matching_study(i, s) for i, s in enumerate(selected, start=1))


def studies_listed_ethics_safety_eligibility(
    studies: Sequence[Mapping[str, Any]], limit: int = ELIGIBILITY_LIMIT
) -> str:
    """Render identification, eligibility, safety and ethics blocks per study.

    Rendered fields are the same groups requested by build_eligibility_query(),
    so every block lists all 21 fields in the same order.
    """
    selected = list(studies[:limit])
    if not selected:
        return NO_STUDIES_TEXT
    return "\n\n".join(_render_review_study(i, s) for i, s in enumerate(selected, start=1))
