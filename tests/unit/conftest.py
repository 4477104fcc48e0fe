"""Shared fixtures: minimal CT.gov v2 study records."""

from __future__ import annotations

import copy

import pytest


def full_study(nct_id: str = "NCT11111111", title: str = "Trial Alpha") -> dict:
    """Study record with every field the eligibility review requests."""
    return {
        "protocolSection": {
            "identificationModule": {"nctId": nct_id, "briefTitle": title},
            "statusModule": {
                "overallStatus": "RECRUITING",
                "startDateStruct": {"date": "2024-01-15"},
                "primaryCompletionDateStruct": {"date": "2027-06"},
                "expandedAccessInfo": {"hasExpandedAccess": False},
            },
            "sponsorCollaboratorsModule": {"leadSponsor": {"name": "Sponsor Corp"}},
            "conditionsModule": {"conditions": ["Lung Cancer", "NSCLC"]},
            "designModule": {
                "phases": ["PHASE2", "PHASE3"],
                "designInfo": {"primaryPurpose": "TREATMENT"},
            },
            "eligibilityModule": {
                "eligibilityCriteria": "Inclusion Criteria:\n- NSCLC\n\nExclusion Criteria:\n- Prior chemotherapy",
                "sex": "ALL",
                "genderDescription": "All genders",
                "minimumAge": "18 Years",
                "maximumAge": "75 Years",
                "healthyVolunteers": True,
            },
            "oversightModule": {
                "oversightHasDmc": True,
                "isFdaRegulatedDrug": True,
                "isFdaRegulatedDevice": False,
                "isUnapprovedDevice": True,
            },
            "contactsLocationsModule": {
                "locations": [
                    {"facility": "Mass General", "city": "Boston", "state": "Massachusetts", "country": "United States"},
                    {"facility": "Charite", "city": "Berlin", "country": "Germany"},
                ]
            },
            "descriptionModule": {"briefSummary": "Phase 2/3 study of Drug Alpha."},
        }
    }


def study_without(path: str, study: dict | None = None) -> dict:
    """Copy of `study` (default full_study()) with the dotted `path` removed."""
    result = copy.deepcopy(study or full_study())
    *parents, leaf = path.split(".")
    node = result
    for key in parents:
        node = node[key]
    del node[leaf]
    return result


@pytest.fixture
def make_study():
    """Factory for complete study records."""
    return full_study


@pytest.fixture
def make_study_without():
    """Factory for study records missing one dotted path."""
    return study_without
