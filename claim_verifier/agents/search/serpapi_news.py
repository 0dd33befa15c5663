"""Google News search through SerpAPI.

Claim searches reduce the claim to keywords (see query_builder) and restrict
results to the last month, where coverage of circulating claims lives.
"""

from typing import Any, Optional

import httpx

from claim_verifier.agents.search.base_provider import SearchOptions, SearchProvider
from claim_verifier.agents.search.query_builder import build_search_query
from claim_verifier.agents.verification.schemas import EvidenceCandidate
from claim_verifier.config.settings import UNSET, resolve_credential, settings

SERPAPI_URL = "https://serpapi.com/search.json"

# SerpAPI "tbs" values for Google's time filter
RECENCY_TO_TBS: dict[str, str] = {
    "hour": "qdr:h",
    "day": "qdr:d",
    "week": "qdr:w",
    "month": "qdr:m",
    "year": "qdr:y",
}


class GoogleNewsProvider(SearchProvider):
    """Google News results (tbm=nws) via the SerpAPI JSON endpoint."""

    name = "serpapi_news"

    def __init__(
        self,
        api_key: Optional[str] = UNSET,
        engine: Optional[str] = None,
        results_limit: Optional[int] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._api_key = resolve_credential(api_key, "serpapi_key")
        self.engine = engine or settings.serpapi_search_engine
        self.results_limit = results_limit or settings.serpapi_news_results_limit

        if not self._api_key:
            self._logger.warning(
                "serpapi_key_not_set",
                msg="SERPAPI_KEY not set, Google News search disabled",
            )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def default_options(self) -> SearchOptions:
        return SearchOptions(limit=self.results_limit)

    async def _search(
        self,
        query: str,
        options: SearchOptions,
    ) -> list[EvidenceCandidate]:
        if options.domain_allow_list:
            sites = " OR ".join(f"site:{domain}" for domain in options.domain_allow_list)
            query = f"{query} ({sites})"

        params: dict[str, Any] = {
            "engine": self.engine,
            "q": query,
            "api_key": self._api_key,
            "tbm": "nws",
            "num": options.limit,
        }
        tbs = RECENCY_TO_TBS.get(options.recency_window or "")
        if tbs:
            params["tbs"] = tbs

        payload = await self._request_json("GET", SERPAPI_URL, params=params)
        if not isinstance(payload, dict):
            raise ValueError("SerpAPI returned a non-object payload")
        if payload.get("error"):
            raise RuntimeError(f"SerpAPI error: {payload['error']}")

        return self._parse_news_results(payload)[: options.limit]

    def _parse_news_results(self, payload: dict[str, Any]) -> list[EvidenceCandidate]:
        """Convert news_results entries, skipping malformed ones."""
        results = payload.get("news_results") or []
        if not isinstance(results, list):
            return []

        candidates: list[EvidenceCandidate] = []
        for article in results:
            if not isinstance(article, dict):
                continue

            # Newer SerpAPI responses nest the publisher as {"name": ...}
            source = article.get("source")
            if isinstance(source, dict):
                source = source.get("name")

            fields: dict[str, Any] = {
                "title": self._text(article.get("title")),
                "snippet": self._text(article.get("snippet")),
                "source_name": self._text(source, "Unknown"),
                "url": self._text(article.get("link")),
                "provider_origin": self.name,
            }
            date = self._text(article.get("date"))
            if date:
                fields["published_at"] = date
            candidates.append(EvidenceCandidate(**fields))

        return candidates

    async def search_for_claim(self, claim_text: str) -> list[EvidenceCandidate]:
        query = build_search_query(claim_text)
        return await self.search(
            query,
            SearchOptions(limit=5, recency_window="month"),
        )
