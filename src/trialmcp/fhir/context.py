"""FHIR endpoint and patient context carried on inbound MCP requests."""

from __future__ import annotations

from collections.abc import Mapping

from pydantic import BaseModel

FHIR_SERVER_URL_HEADER = "x-fhir-server-url"
FHIR_ACCESS_TOKEN_HEADER = "x-fhir-access-token"
PATIENT_ID_HEADER = "x-patient-id"


class FhirContext(BaseModel):
    """Where to reach the FHIR server and how to authenticate."""

    url: str
    token: str

    def __repr__(self) -> str:
        return f"FhirContext(url={self.url!r}, token=***)"

    __str__ = __repr__


def _header(headers: Mapping[str, str], name: str) -> str:
    for key, value in headers.items():
        if key.lower() == name:
            return (value or "").strip()
    return ""


def get_fhir_context(headers: Mapping[str, str]) -> FhirContext | None:
    """Return the FHIR context, or None unless both url and token are present."""
    url = _header(headers, FHIR_SERVER_URL_HEADER)
    token = _header(headers, FHIR_ACCESS_TOKEN_HEADER)
    if not url or not token:
        return None
    return FhirContext(url=url.rstrip("/"), token=token)


def get_patient_id_if_context_exists(headers: Mapping[str, str]) -> str | None:
    """Patient id supplied by the calling EHR context, if any."""
    return _header(headers, PATIENT_ID_HEADER) or None
