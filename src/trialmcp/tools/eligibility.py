"""get-trials-eligibility-ethics-safety: recruiting trials with review fields.

Eligibility, safety and ethics are approximated from what ClinicalTrials.gov
exposes. IRB approval is not in the API; the Data Monitoring Committee,
expanded access and FDA-regulation flags stand in as oversight indicators.
"""

from __future__ import annotations

import structlog

from trialmcp.registry.ctgov_client import fetch_clinical_trials
from trialmcp.registry.formatting import ELIGIBILITY_LIMIT, studies_listed_ethics_safety_eligibility
from trialmcp.registry.query import build_eligibility_query
from trialmcp.tools.schema import ToolResponse

logger = structlog.get_logger()

TOOL_NAME = "get-trials-eligibility-ethics-safety"
TOOL_DESCRIPTION = (
    "Retrieves actively-recruiting clinical trials and returns information specifically "
    "about their eligibility criteria, as well as metrics of safety and ethics."
)

RESULT_HEADER = "Filtered Clinical Trials (Eligibility, Safety, Ethics):\n"
DISCLAIMER = (
    "\n Disclaimer: This tool approximates eligibility, safety and ethics from registry "
    "fields (phase, primary purpose, device approval, data monitoring committee, expanded "
    "access and FDA regulation flags). These are proxies, not an IRB or regulatory "
    "determination; confirm eligibility with the study team before enrolling a patient."
)
RETRIEVAL_ERROR_TEXT = "An error occurred while retrieving clinical trials: "


async def get_trials_eligibility_ethics_safety(
    condition: str | None,
    location: str | None = None,
    trial_id: str | None = None,
) -> ToolResponse:
    """Search recruiting trials and render up to 100 eligibility/safety/ethics reviews."""
    try:
        query = build_eligibility_query(condition=condition, location=location, trial_id=trial_id)
        studies = await fetch_clinical_trials(query, page_size=ELIGIBILITY_LIMIT)
    except Exception as exc:
        logger.exception("eligibility_trials_failed", condition=condition, trial_id=trial_id)
        return ToolResponse(text=f"{RETRIEVAL_ERROR_TEXT}{exc}", is_error=True)

    logger.info("eligibility_trials_fetched", count=len(studies), condition=condition)
    formatted = studies_listed_ethics_safety_eligibility(studies, limit=ELIGIBILITY_LIMIT)
    return ToolResponse(text=RESULT_HEADER + formatted + DISCLAIMER)
