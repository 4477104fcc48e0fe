"""Tool handlers: typed arguments in, ToolResponse text out.

Public API:
  get_matching_clinical_trials(): FHIR demographics → recruiting trials
  get_trials_eligibility_ethics_safety(): condition → eligibility/safety/ethics review
"""

from trialmcp.tools.eligibility import get_trials_eligibility_ethics_safety
from trialmcp.tools.matching import get_matching_clinical_trials
from trialmcp.tools.schema import ToolResponse

__all__ = [
    "get_matching_clinical_trials",
    "get_trials_eligibility_ethics_safety",
    "ToolResponse",
]
