"""Read-only access to the Patient resource on the caller's FHIR server."""

from __future__ import annotations

from urllib.parse import quote

import httpx
import structlog

from trialmcp import config
from trialmcp.fhir.context import FhirContext

logger = structlog.get_logger()


async def fetch_patient_resource(context: FhirContext, patient_id: str) -> dict:
    """GET {url}/Patient/{id} with bearer auth. Raises on any non-2xx response."""
    headers = {
        "Authorization": f"Bearer {context.token}",
        "Accept": "application/fhir+json",
    }
    async with httpx.AsyncClient(timeout=config.FHIR_TIMEOUT_SECONDS) as http:
        url = f"{context.url}/Patient/{quote(patient_id, safe='')}"
        resp = await http.get(url, headers=headers)
        resp.raise_for_status()
        resource = resp.json()
    logger.debug("fhir_patient_fetched", patient_id=patient_id, fhir_url=context.url)
    return resource
