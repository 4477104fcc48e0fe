"""Derive trial-search demographics from a FHIR R4 Patient resource."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, Field

US_CORE_RACE_URL = "http://hl7.org/fhir/us/core/StructureDefinition/us-core-race"


class PatientDemographics(BaseModel):
    """Demographics derived once per request from a FHIR Patient resource."""

    name: str = "Unknown"
    age: int | None = Field(default=None, ge=0)
    sex: str = ""  # FHIR gender uppercased: "FEMALE" | "MALE" | "OTHER" | "UNKNOWN"
    race: list[str] = Field(default_factory=list)


def get_patient_name(patient: dict) -> str:
    names = patient.get("name") or []
    if not names:
        return "Unknown"
    name = names[0]
    if name.get("text"):
        return name["text"]
    full = f"{' '.join(name.get('given', []))} {name.get('family', '')}".strip()
    return full or "Unknown"


def _parse_birth_date(raw: str) -> date | None:
    # FHIR allows partial dates: YYYY, YYYY-MM, YYYY-MM-DD
    parts = raw.split("T")[0].split("-")
    try:
        year = int(parts[0])
        month = int(parts[1]) if len(parts) > 1 else 1
        day = int(parts[2]) if len(parts) > 2 else 1
        return date(year, month, day)
    except (ValueError, IndexError):
        return None


def get_patient_age(patient: dict, today: date | None = None) -> int | None:
    """Age in whole years, or None when birthDate is missing or malformed."""
    raw = patient.get("birthDate")
    if not raw:
        return None
    born = _parse_birth_date(raw)
    if born is None:
        return None
    today = today or date.today()
    age = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
    return max(age, 0)


def get_patient_sex(patient: dict) -> str:
    return (patient.get("gender") or "").upper()


def get_patient_race(patient: dict) -> list[str]:
    """Race displays from the US Core race extension, order preserved."""
    races: list[str] = []
    for ext in patient.get("extension", []):
        if ext.get("url") != US_CORE_RACE_URL:
            continue
        sub = ext.get("extension", [])
        for kind in ("ombCategory", "detailed"):
            for item in sub:
                if item.get("url") == kind:
                    display = item.get("valueCoding", {}).get("display")
                    if display and display not in races:
                        races.append(display)
        if not races:
            for item in sub:
                if item.get("url") == "text" and item.get("valueString"):
                    races.append(item["valueString"])
    return races


def extract_demographics(patient: dict, today: date | None = None) -> PatientDemographics:
    return PatientDemographics(
        name=get_patient_name(patient),
        age=get_patient_age(patient, today=today),
        sex=get_patient_sex(patient),
        race=get_patient_race(patient),
    )
