"""Async ClinicalTrials.gov API v2 client.

Wraps GET /studies on the public REST API. The client is thin: it sends a
QuerySpec plus transport parameters and returns raw study dicts. There is no
retry or rate limiting; one failed call fails the request.
"""

from __future__ import annotations

import httpx
import structlog

from trialmcp import config
from trialmcp.registry.query import QuerySpec

logger = structlog.get_logger()


class CTGovClient:
    """Async HTTP client for ClinicalTrials.gov API v2.

    Create one per tool invocation and close it when done (or use it as an
    async context manager).
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_seconds: float | None = None,
        page_size: int | None = None,
    ):
        self._http = httpx.AsyncClient(
            base_url=base_url or config.CTGOV_BASE_URL,
            timeout=timeout_seconds or config.CTGOV_TIMEOUT_SECONDS,
            headers={"Accept": "application/json"},
        )
        self._page_size = min(page_size or config.CTGOV_PAGE_SIZE, config.CTGOV_MAX_PAGE_SIZE)

    async def __aenter__(self) -> CTGovClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get(self, path: str, params: dict) -> dict:
        resp = await self._http.get(path, params=params)
        if resp.status_code == 400:
            body = resp.text
            logger.error("ctgov_bad_request", path=path, params=params, body=body)
            raise ValueError(f"CT.gov API 400 Bad Request: {body}")
        resp.raise_for_status()
        return resp.json()

    async def search_studies(self, query: QuerySpec) -> list[dict]:
        """Run one /studies search and return the studies in registry order."""
        params: dict = {"format": "json", "pageSize": self._page_size, **query.to_params()}
        logger.debug("ctgov_search", params={k: v for k, v in params.items() if k != "format"})
        raw = await self._get("/studies", params)
        return parse_search_results(raw)

    async def aclose(self) -> None:
        await self._http.aclose()


def parse_search_results(raw: dict) -> list[dict]:
    """Extract the list of study records from a search API response."""
    return raw.get("studies", [])


async def fetch_clinical_trials(query: QuerySpec, page_size: int | None = None) -> list[dict]:
    """Fetch recruiting studies for one query with a short-lived client.

    page_size defaults to CTGOV_PAGE_SIZE; callers that render fewer studies
    should pass their display limit.
    """
    async with CTGovClient(page_size=page_size) as client:
        studies = await client.search_studies(query)
    logger.info("ctgov_search_complete", count=len(studies), query_condition=query.condition)
    return studies
