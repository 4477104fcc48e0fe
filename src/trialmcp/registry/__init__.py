"""REGISTRY module: query building, CT.gov fetch, and study rendering.

Public API:
  build_matching_query() / build_eligibility_query(): QuerySpec per tool
  fetch_clinical_trials(): GET /studies
  studies_listed_info() / studies_listed_ethics_safety_eligibility()
"""

from trialmcp.registry.ctgov_client import CTGovClient, fetch_clinical_trials
from trialmcp.registry.fields import FIELD_NOT_FOUND, search_for_field
from trialmcp.registry.formatting import studies_listed_ethics_safety_eligibility, studies_listed_info
from trialmcp.registry.query import QuerySpec, build_eligibility_query, build_matching_query

__all__ = [
    "CTGovClient",
    "FIELD_NOT_FOUND",
    "QuerySpec",
    "build_eligibility_query",
    "build_matching_query",
    "fetch_clinical_trials",
    "search_for_field",
    "studies_listed_ethics_safety_eligibility",
    "studies_listed_info",
]
