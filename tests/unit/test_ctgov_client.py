"""Unit tests for the CT.gov fetcher.

Async functions are called via asyncio.run() per project convention.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from trialmcp.registry import ctgov_client
from trialmcp.registry.ctgov_client import CTGovClient, fetch_clinical_trials, parse_search_results
from trialmcp.registry.query import build_eligibility_query, build_matching_query


def _ok_response(payload: dict) -> MagicMock:
    resp = MagicMock()
    resp.status_code = 200
    resp.json.return_value = payload
    resp.raise_for_status = MagicMock()
    return resp


class TestParseSearchResults:
    def test_extracts_studies(self, make_study):
        assert parse_search_results({"studies": [make_study()]}) == [make_study()]

    def test_empty(self):
        assert parse_search_results({}) == []


class TestCTGovClient:
    def test_search_sends_query_spec_and_transport_params(self):
        async def _run():
            client = CTGovClient(page_size=50)
            with patch.object(
                client._http, "get", new=AsyncMock(return_value=_ok_response({"studies": []}))
            ) as mock_get:
                await client.search_studies(build_eligibility_query(condition="lung cancer"))

            called_path = mock_get.call_args[0][0]
            called_params = mock_get.call_args[1]["params"]
            assert called_path == "/studies"
            assert called_params["query.cond"] == "lung cancer"
            assert called_params["filter.overallStatus"] == "RECRUITING"
            assert called_params["fields"].startswith("BriefTitle,")
            assert called_params["pageSize"] == 50
            assert called_params["format"] == "json"
            await client.aclose()

        asyncio.run(_run())

    def test_search_preserves_registry_order(self, make_study):
        studies = [make_study("NCT3"), make_study("NCT1"), make_study("NCT2")]

        async def _run():
            client = CTGovClient()
            with patch.object(
                client._http, "get", new=AsyncMock(return_value=_ok_response({"studies": studies}))
            ):
                result = await client.search_studies(build_matching_query(age=40))
            await client.aclose()
            return result

        result = asyncio.run(_run())
        assert [s["protocolSection"]["identificationModule"]["nctId"] for s in result] == [
            "NCT3",
            "NCT1",
            "NCT2",
        ]

    def test_page_size_capped(self):
        client = CTGovClient(page_size=5000)
        assert client._page_size == 1000
        asyncio.run(client.aclose())

    def test_bad_request_raises_value_error(self):
        async def _run():
            client = CTGovClient()
            resp = MagicMock()
            resp.status_code = 400
            resp.text = "invalid query.term"
            with patch.object(client._http, "get", new=AsyncMock(return_value=resp)):
                with pytest.raises(ValueError, match="invalid query.term"):
                    await client.search_studies(build_matching_query(age=40))
            await client.aclose()

        asyncio.run(_run())

    def test_server_error_is_not_retried(self):
        async def _run():
            client = CTGovClient()
            request = httpx.Request("GET", "https://clinicaltrials.gov/api/v2/studies")
            resp = httpx.Response(503, request=request)
            mock_get = AsyncMock(return_value=resp)
            with patch.object(client._http, "get", new=mock_get):
                with pytest.raises(httpx.HTTPStatusError):
                    await client.search_studies(build_matching_query(age=40))
            assert mock_get.await_count == 1
            await client.aclose()

        asyncio.run(_run())

    def test_transport_error_propagates(self):
        async def _run():
            client = CTGovClient()
            with patch.object(
                client._http, "get", new=AsyncMock(side_effect=httpx.ConnectError("refused"))
            ):
                with pytest.raises(httpx.ConnectError):
                    await client.search_studies(build_matching_query(age=40))
            await client.aclose()

        asyncio.run(_run())


class TestFetchClinicalTrials:
    def test_uses_short_lived_client(self, make_study):
        search = AsyncMock(return_value=[make_study()])
        aclose = AsyncMock()
        with (
            patch.object(ctgov_client.CTGovClient, "search_studies", new=search),
            patch.object(ctgov_client.CTGovClient, "aclose", new=aclose),
        ):
            studies = asyncio.run(fetch_clinical_trials(build_matching_query(age=40)))

        assert len(studies) == 1
        search.assert_awaited_once()
        aclose.assert_awaited_once()

    def test_client_closed_on_failure(self):
        aclose = AsyncMock()
        with (
            patch.object(
                ctgov_client.CTGovClient,
                "search_studies",
                new=AsyncMock(side_effect=httpx.ReadTimeout("timed out")),
            ),
            patch.object(ctgov_client.CTGovClient, "aclose", new=aclose),
        ):
            with pytest.raises(httpx.ReadTimeout):
                asyncio.run(fetch_clinical_trials(build_matching_query(age=40)))
        aclose.assert_awaited_once()
