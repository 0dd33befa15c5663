"""RapidAPI-hosted web and news search.

One logical provider backed by four RapidAPI endpoints queried in parallel:

- google-search74 (web)
- Bing web search
- Bing news search
- Real-Time News Data (uses its own key)

A failing sub-search contributes nothing; the others still return.
"""

import asyncio
from typing import Any, Optional

import httpx

from claim_verifier.agents.search.base_provider import SearchOptions, SearchProvider
from claim_verifier.agents.verification.schemas import EvidenceCandidate
from claim_verifier.config.settings import UNSET, resolve_credential

GOOGLE_SEARCH_HOST = "google-search74.p.rapidapi.com"
BING_SEARCH_HOST = "bing-search-apis.p.rapidapi.com"
REALTIME_NEWS_HOST = "real-time-news-data.p.rapidapi.com"

GOOGLE_SEARCH_URL = f"https://{GOOGLE_SEARCH_HOST}/"
BING_WEB_URL = f"https://{BING_SEARCH_HOST}/api/rapid/web_search"
BING_NEWS_URL = f"https://{BING_SEARCH_HOST}/api/rapid/news_search"
REALTIME_NEWS_URL = f"https://{REALTIME_NEWS_HOST}/search"

# Real-Time News Data "time_published" values
RECENCY_TO_TIME_PUBLISHED: dict[str, str] = {
    "hour": "1h",
    "day": "1d",
    "week": "7d",
    "year": "1y",
}


class RapidAPINewsProvider(SearchProvider):
    """Combined Google/Bing/Real-Time News search through RapidAPI."""

    name = "rapidapi_news"

    def __init__(
        self,
        api_key: Optional[str] = UNSET,
        realtime_api_key: Optional[str] = UNSET,
        country: str = "US",
        language: str = "en",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._api_key = resolve_credential(api_key, "rapidapi_key")
        self._realtime_api_key = resolve_credential(realtime_api_key, "rapidapi_realtime_key")
        self.country = country
        self.language = language

        if not self.enabled:
            self._logger.warning(
                "rapidapi_keys_not_set",
                msg="RAPIDAPI_KEY and RAPIDAPI_REALTIME_KEY not set, RapidAPI search disabled",
            )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key or self._realtime_api_key)

    def _headers(self, host: str, key: str) -> dict[str, str]:
        return {"x-rapidapi-host": host, "x-rapidapi-key": key}

    async def _search(
        self,
        query: str,
        options: SearchOptions,
    ) -> list[EvidenceCandidate]:
        searches = [
            ("google", self._search_google(query, options)),
            ("bing_web", self._search_bing(BING_WEB_URL, query, options, news=False)),
            ("bing_news", self._search_bing(BING_NEWS_URL, query, options, news=True)),
            ("realtime_news", self._search_realtime_news(query, options)),
        ]
        results = await asyncio.gather(
            *(coro for _, coro in searches),
            return_exceptions=True,
        )

        candidates: list[EvidenceCandidate] = []
        for (label, _), result in zip(searches, results):
            if isinstance(result, BaseException):
                self._logger.error(
                    "rapidapi_subsearch_failed",
                    endpoint=label,
                    error=str(result) or type(result).__name__,
                )
                continue
            candidates.extend(result)

        self._logger.debug("rapidapi_combined", total=len(candidates))
        return candidates

    async def _search_google(
        self,
        query: str,
        options: SearchOptions,
    ) -> list[EvidenceCandidate]:
        if not self._api_key:
            return []

        payload = await self._request_json(
            "GET",
            GOOGLE_SEARCH_URL,
            params={"query": query, "limit": options.limit, "related_keywords": "true"},
            headers=self._headers(GOOGLE_SEARCH_HOST, self._api_key),
        )
        results = payload.get("results") if isinstance(payload, dict) else None
        return [
            EvidenceCandidate(
                title=self._text(item.get("title")),
                snippet=self._text(item.get("description")),
                source_name=self._text(item.get("domain"), "Google Search"),
                url=self._text(item.get("url")),
                provider_origin="rapidapi_google",
            )
            for item in (results or [])
            if isinstance(item, dict)
        ]

    async def _search_bing(
        self,
        url: str,
        query: str,
        options: SearchOptions,
        news: bool,
    ) -> list[EvidenceCandidate]:
        if not self._api_key:
            return []

        params: dict[str, Any] = {"keyword": query, "page": 0, "size": options.limit}
        if news:
            params["cc"] = self.country

        payload = await self._request_json(
            "GET",
            url,
            params=params,
            headers=self._headers(BING_SEARCH_HOST, self._api_key),
        )
        results = payload.get("data") if isinstance(payload, dict) else None
        origin = "rapidapi_bing_news" if news else "rapidapi_bing_web"

        candidates = []
        for item in results or []:
            if not isinstance(item, dict):
                continue
            fields: dict[str, Any] = {
                "title": self._text(item.get("title")),
                "snippet": self._text(item.get("description")),
                "source_name": self._text(item.get("domain"), "Bing Search"),
                "url": self._text(item.get("url")),
                "provider_origin": origin,
            }
            date = self._text(item.get("date"))
            if date:
                fields["published_at"] = date
            candidates.append(EvidenceCandidate(**fields))
        return candidates

    async def _search_realtime_news(
        self,
        query: str,
        options: SearchOptions,
    ) -> list[EvidenceCandidate]:
        if not self._realtime_api_key:
            return []

        payload = await self._request_json(
            "GET",
            REALTIME_NEWS_URL,
            params={
                "query": query,
                "limit": options.limit,
                "time_published": RECENCY_TO_TIME_PUBLISHED.get(
                    options.recency_window or "", "anytime"
                ),
                "country": self.country,
                "lang": self.language,
            },
            headers=self._headers(REALTIME_NEWS_HOST, self._realtime_api_key),
        )
        articles = payload.get("data") if isinstance(payload, dict) else None

        candidates = []
        for article in articles or []:
            if not isinstance(article, dict):
                continue
            fields: dict[str, Any] = {
                "title": self._text(article.get("title")),
                "snippet": self._text(
                    article.get("snippet") or article.get("description")
                ),
                "source_name": self._text(
                    article.get("source_name") or article.get("source"), "Unknown"
                ),
                "url": self._text(article.get("link") or article.get("url")),
                "provider_origin": "rapidapi_realtime_news",
            }
            published = self._text(
                article.get("published_datetime_utc") or article.get("published_datetime")
            )
            if published:
                fields["published_at"] = published
            candidates.append(EvidenceCandidate(**fields))
        return candidates

    async def search_for_claim(self, claim_text: str) -> list[EvidenceCandidate]:
        if not claim_text or not claim_text.strip():
            return []
        query = f'"{claim_text.strip()}" OR fact check OR verification'
        return await self.search(query, SearchOptions(limit=5))
