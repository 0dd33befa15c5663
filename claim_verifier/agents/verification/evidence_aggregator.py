"""Concurrent evidence collection across search providers.

Every configured provider receives the claim at once. Each call runs under
its own timeout; a provider that raises, times out or returns something that
is not a list of EvidenceCandidate contributes nothing and never blocks the
others. Candidates come back concatenated in provider-registration order,
uncapped (the pipeline truncates before verification).

Usage:
    from claim_verifier.agents.verification.evidence_aggregator import EvidenceAggregator

    aggregator = EvidenceAggregator(providers=[news, rapidapi, tavily])
    candidates = await aggregator.aggregate("Drinking hot water cures COVID-19")
"""

import asyncio
from typing import Any, Optional, Sequence

import structlog

from claim_verifier.agents.verification.schemas import EvidenceCandidate
from claim_verifier.config.settings import settings


class EvidenceAggregator:
    """Fans a claim out to search providers and merges their candidates.

    Attributes:
        providers: Objects exposing async search_for_claim(claim_text).
        timeout: Per-provider timeout in seconds.
    """

    def __init__(
        self,
        providers: Optional[Sequence[Any]] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.providers = list(providers or [])
        self.timeout = timeout or settings.search_timeout_seconds
        self._logger = structlog.get_logger().bind(component="EvidenceAggregator")

    @staticmethod
    def _provider_name(provider: Any) -> str:
        return getattr(provider, "name", type(provider).__name__)

    async def _search_one(self, provider: Any, claim_text: str) -> list[EvidenceCandidate]:
        return await asyncio.wait_for(
            provider.search_for_claim(claim_text),
            timeout=self.timeout,
        )

    async def aggregate(self, claim_text: str) -> list[EvidenceCandidate]:
        """Collect candidates for a claim from every provider.

        Args:
            claim_text: The claim to search for.

        Returns:
            All candidates in provider order; [] if every provider failed.
        """
        if not self.providers or not claim_text or not claim_text.strip():
            return []

        results = await asyncio.gather(
            *(self._search_one(p, claim_text) for p in self.providers),
            return_exceptions=True,
        )

        candidates: list[EvidenceCandidate] = []
        per_provider: dict[str, int] = {}
        for provider, result in zip(self.providers, results):
            name = self._provider_name(provider)

            if isinstance(result, asyncio.TimeoutError):
                self._logger.warning("provider_timeout", provider=name, timeout=self.timeout)
                per_provider[name] = 0
                continue
            if isinstance(result, BaseException):
                self._logger.error(
                    "provider_failed",
                    provider=name,
                    error=str(result) or type(result).__name__,
                )
                per_provider[name] = 0
                continue
            if not isinstance(result, list):
                self._logger.warning(
                    "provider_malformed_result",
                    provider=name,
                    result_type=type(result).__name__,
                )
                per_provider[name] = 0
                continue

            valid = [item for item in result if isinstance(item, EvidenceCandidate)]
            if len(valid) != len(result):
                self._logger.warning(
                    "provider_malformed_items",
                    provider=name,
                    dropped=len(result) - len(valid),
                )
            per_provider[name] = len(valid)
            candidates.extend(valid)

        self._logger.info(
            "evidence_aggregated",
            claim=claim_text[:80],
            total=len(candidates),
            per_provider=per_provider,
        )
        return candidates
