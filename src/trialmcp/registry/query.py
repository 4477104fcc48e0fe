"""Query construction for the ClinicalTrials.gov /studies endpoint.

Each tool builds one immutable QuerySpec per request. The registry has no
discrete age or sex search parameters, so demographic constraints are encoded
as an Essie AREA[...] expression in query.term by build_demographic_term().
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

RECRUITING = "RECRUITING"

# Values the registry Sex field can match; FHIR "other"/"unknown" have no counterpart
REGISTRY_SEX_VALUES = frozenset({"FEMALE", "MALE", "F", "M"})

# (registry field name, display label, path inside the v2 study record)
GENERAL_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("BriefTitle", "Title", "protocolSection.identificationModule.briefTitle"),
    ("Location", "Locations", "protocolSection.contactsLocationsModule.locations"),
    ("OverallStatus", "Status", "protocolSection.statusModule.overallStatus"),
    ("Condition", "Conditions", "protocolSection.conditionsModule.conditions"),
    ("NCTId", "NCT ID", "protocolSection.identificationModule.nctId"),
    ("LeadSponsorName", "Lead Sponsor", "protocolSection.sponsorCollaboratorsModule.leadSponsor.name"),
    ("StartDate", "Start Date", "protocolSection.statusModule.startDateStruct.date"),
    (
        "PrimaryCompletionDate",
        "Primary Completion Date",
        "protocolSection.statusModule.primaryCompletionDateStruct.date",
    ),
)

ELIGIBILITY_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("EligibilityCriteria", "Eligibility Criteria", "protocolSection.eligibilityModule.eligibilityCriteria"),
    ("Sex", "Sex", "protocolSection.eligibilityModule.sex"),
    ("GenderDescription", "Gender Description", "protocolSection.eligibilityModule.genderDescription"),
    ("MinimumAge", "Minimum Age", "protocolSection.eligibilityModule.minimumAge"),
    ("MaximumAge", "Maximum Age", "protocolSection.eligibilityModule.maximumAge"),
    ("HealthyVolunteers", "Healthy Volunteers", "protocolSection.eligibilityModule.healthyVolunteers"),
)

# Safety proxies: trial phase, primary purpose, unapproved device use
SAFETY_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("Phase", "Phase", "protocolSection.designModule.phases"),
    ("DesignPrimaryPurpose", "Primary Purpose", "protocolSection.designModule.designInfo.primaryPurpose"),
    ("IsUnapprovedDevice", "Unapproved Device", "protocolSection.oversightModule.isUnapprovedDevice"),
)

# Ethics proxies: IRB approval is not exposed by the API, oversight flags stand in for it
ETHICS_FIELDS: tuple[tuple[str, str, str], ...] = (
    ("OversightHasDMC", "Data Monitoring Committee", "protocolSection.oversightModule.oversightHasDmc"),
    ("HasExpandedAccess", "Expanded Access", "protocolSection.statusModule.expandedAccessInfo.hasExpandedAccess"),
    ("IsFDARegulatedDrug", "FDA Regulated Drug", "protocolSection.oversightModule.isFdaRegulatedDrug"),
    ("IsFDARegulatedDevice", "FDA Regulated Device", "protocolSection.oversightModule.isFdaRegulatedDevice"),
)

FIELD_GROUPS: dict[str, tuple[tuple[str, str, str], ...]] = {
    "General Information": GENERAL_FIELDS,
    "Eligibility": ELIGIBILITY_FIELDS,
    "Safety": SAFETY_FIELDS,
    "Ethics & Oversight": ETHICS_FIELDS,
}


def eligibility_fields_param() -> str:
    """Comma-joined `fields` value covering all four groups, in group order."""
    return ",".join(name for group in FIELD_GROUPS.values() for name, _, _ in group)


class QuerySpec(BaseModel):
    """Parameters for one /studies search. Frozen once built."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    condition: str | None = Field(default=None, alias="query.cond")
    location: str | None = Field(default=None, alias="query.locn")
    term: str | None = Field(default=None, alias="query.term")
    overall_status: Literal["RECRUITING"] = Field(default=RECRUITING, alias="filter.overallStatus")
    fields: str | None = Field(default=None, alias="fields")

    def to_params(self) -> dict[str, str]:
        """Registry parameter encoding; unset inputs are omitted, never sent empty."""
        return {k: v for k, v in self.model_dump(by_alias=True).items() if v}


def build_demographic_term(age: int | None = None, sex: str | None = None) -> str | None:
    """Encode sex and a two-sided age bound as one Essie expression.

    Trials qualify when MinimumAge <= age <= MaximumAge. A sex outside
    REGISTRY_SEX_VALUES is treated as not derived. Race and other
    demographics are not encoded yet.
    """
    clauses: list[str] = []
    sex_code = (sex or "").strip().upper()
    # AREA[SEX] matches the exact value only, so Sex=ALL trials are excluded
    if sex_code in REGISTRY_SEX_VALUES:
        clauses.append(f"AREA[SEX]{sex_code}")
    if age is not None:
        clauses.append(f"AREA[MinimumAge]RANGE[MIN, {age}]")
        clauses.append(f"AREA[MaximumAge]RANGE[{age}, MAX]")
    return " AND ".join(clauses) or None


def build_matching_query(
    *,
    condition: str | None = None,
    location: str | None = None,
    age: int | None = None,
    sex: str | None = None,
) -> QuerySpec:
    """Query for recruiting trials open to a patient's age and sex."""
    return QuerySpec(
        condition=condition or None,
        location=location or None,
        term=build_demographic_term(age=age, sex=sex),
    )


def build_eligibility_query(
    *,
    condition: str | None = None,
    location: str | None = None,
    trial_id: str | None = None,
) -> QuerySpec:
    """Query for recruiting trials with eligibility, safety and ethics fields selected.

    trial_id is matched as free text, not through the /studies/{nct_id} lookup.
    """
    return QuerySpec(
        condition=condition or None,
        location=location or None,
        term=trial_id or None,
        fields=eligibility_fields_param(),
    )
