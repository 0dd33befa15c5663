"""Tests for GoogleNewsProvider against a mocked SerpAPI."""

import httpx
import pytest

from claim_verifier.agents.search.base_provider import SearchOptions
from claim_verifier.agents.search.serpapi_news import GoogleNewsProvider
from claim_verifier.config.settings import settings

NEWS_PAYLOAD = {
    "news_results": [
        {
            "title": "Fact check: hot water does not cure COVID-19",
            "snippet": "Health authorities say there is no evidence.",
            "source": "Reuters",
            "link": "https://www.reuters.com/article/factcheck",
            "date": "2 days ago",
        },
        {
            "title": "Hot drinks and the virus",
            "snippet": "Doctors weigh in.",
            "source": {"name": "BBC News", "icon": "https://bbc.example/icon.png"},
            "link": "https://www.bbc.com/news/health",
        },
        "not-an-article",
    ]
}


def _provider(handler, api_key: str | None = "serp-key") -> GoogleNewsProvider:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GoogleNewsProvider(api_key=api_key, http_client=client, timeout=5.0)


@pytest.mark.asyncio
async def test_claim_search_builds_keyword_query():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        seen["host"] = request.url.host
        return httpx.Response(200, json=NEWS_PAYLOAD)

    candidates = await _provider(handler).search_for_claim("Drinking hot water cures COVID-19!")

    assert seen["host"] == "serpapi.com"
    assert seen["q"] == "drinking hot water cures covid"
    assert seen["tbm"] == "nws"
    assert seen["tbs"] == "qdr:m"
    assert seen["num"] == "5"
    assert seen["api_key"] == "serp-key"
    assert len(candidates) == 2


@pytest.mark.asyncio
async def test_parses_news_results():
    provider = _provider(lambda request: httpx.Response(200, json=NEWS_PAYLOAD))

    candidates = await provider.search("hot water covid", SearchOptions(limit=10))

    first, second = candidates
    assert first.source_name == "Reuters"
    assert first.url == "https://www.reuters.com/article/factcheck"
    assert first.published_at == "2 days ago"
    assert first.provider_origin == "serpapi_news"
    assert second.source_name == "BBC News"
    assert second.published_at  # retrieval time when the provider gives none


@pytest.mark.asyncio
async def test_domain_allow_list_becomes_site_filter():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["q"] = request.url.params["q"]
        return httpx.Response(200, json={"news_results": []})

    await _provider(handler).search(
        "hot water",
        SearchOptions(domain_allow_list=["reuters.com", "apnews.com"]),
    )

    assert seen["q"] == "hot water (site:reuters.com OR site:apnews.com)"


@pytest.mark.asyncio
async def test_http_error_returns_empty():
    provider = _provider(lambda request: httpx.Response(401, json={"error": "Invalid API key"}))

    assert await provider.search_for_claim("hot water cures covid") == []


@pytest.mark.asyncio
async def test_error_payload_returns_empty():
    provider = _provider(lambda request: httpx.Response(200, json={"error": "Quota exceeded"}))

    assert await provider.search("hot water") == []


@pytest.mark.asyncio
async def test_non_json_body_returns_empty():
    provider = _provider(lambda request: httpx.Response(200, text="<html>oops</html>"))

    assert await provider.search("hot water") == []


@pytest.mark.asyncio
async def test_missing_key_disables_provider(monkeypatch):
    monkeypatch.setattr(settings, "serpapi_key", "global-key")
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=NEWS_PAYLOAD)

    provider = _provider(handler, api_key=None)

    assert provider.enabled is False
    assert await provider.search_for_claim("hot water cures covid") == []
    assert calls == []


@pytest.mark.asyncio
async def test_claim_without_keywords_skips_request():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json=NEWS_PAYLOAD)

    assert await _provider(handler).search_for_claim("is it so?") == []
    assert calls == []


@pytest.mark.asyncio
async def test_search_without_options_uses_configured_limit():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen.update(dict(request.url.params))
        return httpx.Response(200, json=NEWS_PAYLOAD)

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    provider = GoogleNewsProvider(api_key="serp-key", results_limit=8, http_client=client, timeout=5.0)

    await provider.search("hot water covid")

    assert seen["num"] == "8"
    assert "tbs" not in seen
