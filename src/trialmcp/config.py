"""Environment configuration.

Values are read once at import time; call load_dotenv() before importing
this module to pick up a local .env file.
"""

from __future__ import annotations

import os

_CTGOV_BASE_URL_ENV = "CTGOV_BASE_URL"
_CTGOV_TIMEOUT_ENV = "CTGOV_TIMEOUT_SECONDS"
_CTGOV_PAGE_SIZE_ENV = "CTGOV_PAGE_SIZE"
_FHIR_TIMEOUT_ENV = "FHIR_TIMEOUT_SECONDS"
_HOST_ENV = "TRIALMCP_HOST"
_PORT_ENV = "TRIALMCP_PORT"
_LOG_LEVEL_ENV = "TRIALMCP_LOG_LEVEL"

CTGOV_MAX_PAGE_SIZE = 1000


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else default


def _int_env(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


CTGOV_BASE_URL = os.environ.get(_CTGOV_BASE_URL_ENV, "") or "https://clinicaltrials.gov/api/v2"
CTGOV_TIMEOUT_SECONDS = _float_env(_CTGOV_TIMEOUT_ENV, 30.0)
CTGOV_PAGE_SIZE = min(_int_env(_CTGOV_PAGE_SIZE_ENV, 100), CTGOV_MAX_PAGE_SIZE)
FHIR_TIMEOUT_SECONDS = _float_env(_FHIR_TIMEOUT_ENV, 30.0)

HOST = os.environ.get(_HOST_ENV, "") or "127.0.0.1"
PORT = _int_env(_PORT_ENV, 8000)
LOG_LEVEL = (os.environ.get(_LOG_LEVEL_ENV, "") or "INFO").upper()
