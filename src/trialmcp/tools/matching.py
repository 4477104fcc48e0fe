"""get_matching_clinical_trials: recruiting trials open to a FHIR patient's demographics.

Flow: FHIR context -> effective patient id -> Patient resource ->
demographics -> query -> CT.gov search -> first 3 studies as text.
"""

from __future__ import annotations

from collections.abc import Mapping

import structlog

from trialmcp.fhir.client import fetch_patient_resource
from trialmcp.fhir.context import get_fhir_context, get_patient_id_if_context_exists
from trialmcp.fhir.demographics import extract_demographics
from trialmcp.registry.ctgov_client import fetch_clinical_trials
from trialmcp.registry.formatting import MATCHING_LIMIT, studies_listed_info
from trialmcp.registry.query import build_matching_query
from trialmcp.tools.schema import ToolResponse

logger = structlog.get_logger()

TOOL_NAME = "get_matching_clinical_trials"
TOOL_DESCRIPTION = "Retrieves clinical trials that match a patient's demographics and conditions."

NO_FHIR_CONTEXT_TEXT = "A FHIR server url or token was not provided in the HTTP context."
NO_PATIENT_ID_TEXT = "No patient ID provided or found in context."
RETRIEVAL_ERROR_TEXT = "An error occurred while retrieving clinical trials: "


async def get_matching_clinical_trials(
    patient_id: str | None,
    condition: str | None = None,
    location: str | None = None,
    *,
    headers: Mapping[str, str],
) -> ToolResponse:
    """Find recruiting trials whose sex and age bounds admit the patient.

    A patient id from the request context takes precedence over `patient_id`.
    """
    fhir_context = get_fhir_context(headers)
    if fhir_context is None:
        logger.warning("matching_no_fhir_context")
        return ToolResponse(text=NO_FHIR_CONTEXT_TEXT, is_error=True)

    effective_patient_id = get_patient_id_if_context_exists(headers) or patient_id
    if not effective_patient_id:
        logger.warning("matching_no_patient_id")
        return ToolResponse(text=NO_PATIENT_ID_TEXT, is_error=True)

    try:
        patient = await fetch_patient_resource(fhir_context, effective_patient_id)
        demographics = extract_demographics(patient)
        query = build_matching_query(
            condition=condition,
            location=location,
            age=demographics.age,
            sex=demographics.sex,
        )
        studies = await fetch_clinical_trials(query, page_size=MATCHING_LIMIT)
    except Exception as exc:
        logger.exception("matching_trials_failed", patient_id=effective_patient_id)
        return ToolResponse(text=f"{RETRIEVAL_ERROR_TEXT}{exc}", is_error=True)

    logger.info(
        "matching_trials_fetched",
        patient_id=effective_patient_id,
        count=len(studies),
        query_term=query.term,
    )
    formatted = studies_listed_info(studies, limit=MATCHING_LIMIT)
    return ToolResponse(
        text=f"Clinical trials that {demographics.name} fits the criteria for:\n {formatted}"
    )
