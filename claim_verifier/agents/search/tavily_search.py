"""Tavily AI search.

Claim searches run at advanced depth against a fixed allow-list of
fact-checking and wire-service domains. Tavily's generated answer, when
present, rides along on every candidate as precomputed_answer.
"""

from typing import Any, Optional
from urllib.parse import urlparse

import httpx

from claim_verifier.agents.search.base_provider import SearchOptions, SearchProvider
from claim_verifier.agents.verification.schemas import EvidenceCandidate
from claim_verifier.config.settings import UNSET, resolve_credential
from claim_verifier.config.trust_rules import FACT_CHECK_DOMAINS

TAVILY_SEARCH_URL = "https://api.tavily.com/search"

# Tavily "time_range" accepts these directly
TAVILY_TIME_RANGES = frozenset({"day", "week", "month", "year"})


def source_name_from_url(url: str) -> str:
    """Publisher name derived from a URL's host.

    "https://www.reuters.com/world/..." -> "Reuters". Returns "Unknown" when
    the URL has no host.
    """
    try:
        host = urlparse(url).hostname or ""
    except ValueError:
        return "Unknown"
    if host.startswith("www."):
        host = host[4:]
    label = host.split(".")[0]
    if not label:
        return "Unknown"
    return label[0].upper() + label[1:]


class TavilySearchProvider(SearchProvider):
    """Tavily search API client."""

    name = "tavily"

    def __init__(
        self,
        api_key: Optional[str] = UNSET,
        search_depth: str = "advanced",
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        super().__init__(http_client=http_client, timeout=timeout)
        self._api_key = resolve_credential(api_key, "tavily_api_key")
        self.search_depth = search_depth

        if not self._api_key:
            self._logger.warning(
                "tavily_key_not_set",
                msg="TAVILY_API_KEY not set, Tavily search disabled",
            )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    async def _search(
        self,
        query: str,
        options: SearchOptions,
    ) -> list[EvidenceCandidate]:
        body: dict[str, Any] = {
            "query": query,
            "search_depth": self.search_depth,
            "max_results": options.limit,
            "include_answer": True,
            "include_raw_content": False,
            "include_domains": list(options.domain_allow_list),
            "exclude_domains": [],
        }
        if options.recency_window in TAVILY_TIME_RANGES:
            body["time_range"] = options.recency_window

        payload = await self._request_json(
            "POST",
            TAVILY_SEARCH_URL,
            json=body,
            headers={"Authorization": f"Bearer {self._api_key}"},
        )
        if not isinstance(payload, dict):
            raise ValueError("Tavily returned a non-object payload")

        return self._format_results(payload)

    def _format_results(self, payload: dict[str, Any]) -> list[EvidenceCandidate]:
        results = payload.get("results") or []
        if not isinstance(results, list):
            return []

        answer = self._text(payload.get("answer")) or None
        candidates = []
        for result in results:
            if not isinstance(result, dict):
                continue
            url = self._text(result.get("url"))
            fields: dict[str, Any] = {
                "title": self._text(result.get("title")),
                "snippet": self._text(result.get("content")),
                "source_name": source_name_from_url(url),
                "url": url,
                "provider_origin": self.name,
                "precomputed_answer": answer,
            }
            published = self._text(result.get("published_date"))
            if published:
                fields["published_at"] = published
            candidates.append(EvidenceCandidate(**fields))
        return candidates

    async def search_for_claim(self, claim_text: str) -> list[EvidenceCandidate]:
        if not claim_text or not claim_text.strip():
            return []
        return await self.search(
            f"fact check: {claim_text.strip()}",
            SearchOptions(limit=5, domain_allow_list=list(FACT_CHECK_DOMAINS)),
        )
