"""Search provider adapters.

Each adapter turns a backend's native results into EvidenceCandidate objects
and absorbs its own failures:

- GoogleNewsProvider: Google News via SerpAPI (keyword query, last month)
- RapidAPINewsProvider: Google/Bing web and news plus Real-Time News Data
- TavilySearchProvider: Tavily advanced search over fact-checking domains
"""

from typing import Optional

import httpx

from claim_verifier.agents.search.base_provider import SearchOptions, SearchProvider
from claim_verifier.agents.search.query_builder import build_search_query
from claim_verifier.agents.search.rapidapi_news import RapidAPINewsProvider
from claim_verifier.agents.search.serpapi_news import GoogleNewsProvider
from claim_verifier.agents.search.tavily_search import TavilySearchProvider
from claim_verifier.config.settings import Settings, settings as default_settings


def build_search_providers(
    config: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> list[SearchProvider]:
    """Instantiate every provider with credentials, in fan-out order.

    Args:
        config: Settings override (defaults to the global settings).
        http_client: Shared client; the caller owns and closes it.

    Returns:
        Enabled providers: SerpAPI news, RapidAPI, Tavily.
    """
    config = config or default_settings
    timeout = config.search_timeout_seconds
    providers: list[SearchProvider] = [
        GoogleNewsProvider(
            api_key=config.serpapi_key,
            engine=config.serpapi_search_engine,
            results_limit=config.serpapi_news_results_limit,
            http_client=http_client,
            timeout=timeout,
        ),
        RapidAPINewsProvider(
            api_key=config.rapidapi_key,
            realtime_api_key=config.rapidapi_realtime_key,
            http_client=http_client,
            timeout=timeout,
        ),
        TavilySearchProvider(
            api_key=config.tavily_api_key,
            http_client=http_client,
            timeout=timeout,
        ),
    ]
    return [provider for provider in providers if provider.enabled]


__all__ = [
    "GoogleNewsProvider",
    "RapidAPINewsProvider",
    "SearchOptions",
    "SearchProvider",
    "TavilySearchProvider",
    "build_search_providers",
    "build_search_query",
]
