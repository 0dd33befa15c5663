"""Base class for search provider adapters.

Every adapter translates its backend's native response into
EvidenceCandidate objects and absorbs its own failures: missing credentials,
HTTP errors, timeouts and malformed payloads all yield an empty list and a
log line, never an exception.

Transient HTTP failures (transport errors, 429, 5xx) are retried with
exponential backoff via tenacity. Client errors are not retried.
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx
import structlog
from pydantic import BaseModel, Field
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from claim_verifier.agents.verification.schemas import EvidenceCandidate
from claim_verifier.config.settings import settings

USER_AGENT = "Mozilla/5.0 (compatible; ClaimVerifier/1.0)"


class SearchOptions(BaseModel):
    """Provider-agnostic search options.

    recency_window is one of hour, day, week, month, year (or None for any
    time); adapters map it onto their own parameters and ignore values they
    cannot express.
    """

    limit: int = Field(default=5, ge=1, le=100)
    recency_window: Optional[str] = None
    domain_allow_list: list[str] = Field(default_factory=list)


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or status >= 500
    return False


class SearchProvider(ABC):
    """Common plumbing for HTTP search adapters.

    Subclasses implement enabled, _search and search_for_claim. The shared
    httpx.AsyncClient is injected by the caller (and closed by it); when none
    is injected the provider creates and owns one.
    """

    name: str = "search"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.timeout = timeout or settings.search_timeout_seconds
        self._http_client = http_client
        self._owns_client = http_client is None
        self._logger = structlog.get_logger().bind(component=type(self).__name__)

    @property
    @abstractmethod
    def enabled(self) -> bool:
        """True when the provider has the credentials it needs."""

    async def _get_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                limits=httpx.Limits(max_keepalive_connections=5, max_connections=20),
                headers={"User-Agent": USER_AGENT},
            )
            self._owns_client = True
        return self._http_client

    async def aclose(self) -> None:
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "SearchProvider":
        await self._get_client()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    @retry(
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=1, max=4),
        retry=retry_if_exception(_is_transient),
        reraise=True,
    )
    async def _request_json(self, method: str, url: str, **kwargs: Any) -> Any:
        """Send a request and decode its JSON body.

        Raises:
            httpx.HTTPError: After retries for transient failures, at once otherwise.
            ValueError: If the body is not JSON.
        """
        client = await self._get_client()
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
        return response.json()

    async def search(
        self,
        query: str,
        options: Optional[SearchOptions] = None,
    ) -> list[EvidenceCandidate]:
        """Run one search, returning [] on any failure.

        Args:
            query: Provider query string.
            options: Result limit, recency window and domain allow-list.

        Returns:
            EvidenceCandidate list in provider ranking order.
        """
        if not self.enabled:
            self._logger.debug("search_skipped", provider=self.name, reason="not_configured")
            return []
        if not query or not query.strip():
            return []

        options = options or self.default_options()
        try:
            candidates = await self._search(query, options)
        except Exception as e:
            self._logger.error(
                "search_failed",
                provider=self.name,
                query=query[:50],
                error=str(e) or type(e).__name__,
            )
            return []

        self._logger.info(
            "search_executed",
            provider=self.name,
            query=query[:80],
            results=len(candidates),
        )
        return candidates

    def default_options(self) -> SearchOptions:
        """Options used when search() is called without any."""
        return SearchOptions()

    @abstractmethod
    async def _search(
        self,
        query: str,
        options: SearchOptions,
    ) -> list[EvidenceCandidate]:
        """Provider-specific search. May raise; search() absorbs errors."""

    @abstractmethod
    async def search_for_claim(self, claim_text: str) -> list[EvidenceCandidate]:
        """Search with the provider's claim-specific query and options."""

    @staticmethod
    def _text(value: Any, default: str = "") -> str:
        """Coerce a payload field to a stripped string."""
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip() or default
        return str(value)
