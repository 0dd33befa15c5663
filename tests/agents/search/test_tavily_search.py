"""Tests for TavilySearchProvider."""

import json

import httpx
import pytest

from claim_verifier.agents.search.base_provider import SearchOptions
from claim_verifier.agents.search.tavily_search import (
    TavilySearchProvider,
    source_name_from_url,
)
from claim_verifier.config.trust_rules import FACT_CHECK_DOMAINS

TAVILY_PAYLOAD = {
    "query": "fact check: hot water cures covid",
    "answer": "There is no evidence that hot water cures COVID-19.",
    "results": [
        {
            "title": "Fact Check: Hot water does not kill the coronavirus",
            "url": "https://www.reuters.com/article/factcheck-hot-water",
            "content": "Drinking hot water does not cure COVID-19.",
            "score": 0.93,
            "published_date": "2025-12-01",
        },
        {
            "title": "Can hot drinks stop COVID?",
            "url": "https://apnews.com/article/covid-myths",
            "content": "Experts say no.",
            "score": 0.81,
        },
    ],
}


def _provider(handler) -> TavilySearchProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TavilySearchProvider(api_key="tvly-key", http_client=client, timeout=5.0)


class TestSourceNameFromUrl:
    @pytest.mark.parametrize(
        "url, expected",
        [
            ("https://www.reuters.com/world/abc", "Reuters"),
            ("https://apnews.com/article/x", "Apnews"),
            ("https://factcheck.org/2024/01/x", "Factcheck"),
            ("", "Unknown"),
            ("not a url", "Unknown"),
        ],
    )
    def test_extraction(self, url, expected):
        assert source_name_from_url(url) == expected


@pytest.mark.asyncio
async def test_claim_search_request():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["url"] = str(request.url)
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json=TAVILY_PAYLOAD)

    await _provider(handler).search_for_claim("Hot water cures COVID")

    assert seen["method"] == "POST"
    assert seen["url"] == "https://api.tavily.com/search"
    assert seen["auth"] == "Bearer tvly-key"
    body = seen["body"]
    assert body["query"] == "fact check: Hot water cures COVID"
    assert body["search_depth"] == "advanced"
    assert body["max_results"] == 5
    assert body["include_answer"] is True
    assert body["include_domains"] == list(FACT_CHECK_DOMAINS)


@pytest.mark.asyncio
async def test_results_carry_answer_and_source_names():
    provider = _provider(lambda request: httpx.Response(200, json=TAVILY_PAYLOAD))

    candidates = await provider.search_for_claim("Hot water cures COVID")

    assert [c.source_name for c in candidates] == ["Reuters", "Apnews"]
    assert all(
        c.precomputed_answer == "There is no evidence that hot water cures COVID-19."
        for c in candidates
    )
    assert candidates[0].snippet == "Drinking hot water does not cure COVID-19."
    assert candidates[0].published_at == "2025-12-01"
    assert candidates[0].provider_origin == "tavily"


@pytest.mark.asyncio
async def test_recency_window_maps_to_time_range():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"results": []})

    await _provider(handler).search("covid", SearchOptions(recency_window="week"))

    assert seen["body"]["time_range"] == "week"


@pytest.mark.asyncio
async def test_server_error_returns_empty(monkeypatch):
    # Skip the exponential backoff between retries
    monkeypatch.setattr(TavilySearchProvider._request_json.retry, "sleep", _no_sleep)
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(502)

    assert await _provider(handler).search_for_claim("Hot water cures COVID") == []
    assert len(calls) == 3


@pytest.mark.asyncio
async def test_missing_results_returns_empty():
    provider = _provider(lambda request: httpx.Response(200, json={"answer": "x"}))

    assert await provider.search_for_claim("Hot water cures COVID") == []


async def _no_sleep(seconds: float) -> None:
    return None
