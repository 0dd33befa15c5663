"""End-to-end claim verification.

Stages per claim:
    AGGREGATE -> VERIFY_CANDIDATES -> MERGE_WITH_BACKGROUND
    -> RANK_AND_CAP -> SYNTHESIZE -> ASSEMBLE_RESULT

verify_claim never raises. Every stage absorbs its own failures, and any
exception that escapes a stage yields the terminal UNVERIFIED result with
confidence 0 and no sources.

Usage:
    from claim_verifier.pipeline import ClaimVerificationPipeline

    async with await ClaimVerificationPipeline.create() as pipeline:
        result = await pipeline.verify_claim("Drinking hot water cures COVID-19")
        print(result.verdict, result.confidence)
"""

import asyncio
from typing import Any, Optional, Sequence

import httpx
import structlog
from pydantic import ValidationError
from structlog.contextvars import bound_contextvars

from claim_verifier.agents.search import build_search_providers
from claim_verifier.agents.search.base_provider import USER_AGENT
from claim_verifier.agents.verification.evidence_aggregator import EvidenceAggregator
from claim_verifier.agents.verification.evidence_verifier import EvidenceVerifier
from claim_verifier.agents.verification.schemas import (
    Citation,
    EvidenceDocument,
    FactCheckVerdict,
    VerificationResult,
)
from claim_verifier.agents.verification.verdict_synthesizer import VerdictSynthesizer
from claim_verifier.config.settings import Settings, settings as default_settings
from claim_verifier.data_management.knowledge_store import KnowledgeStore
from claim_verifier.llm import build_llm_provider
from claim_verifier.utils.logging import get_correlation_id

MAX_CANDIDATES_TO_VERIFY = 5
MAX_BACKGROUND_HITS = 3
MAX_EVIDENCE = 5
MAX_CITATIONS = 3

TERMINAL_EXPLANATION = (
    "Unable to verify this claim due to insufficient data or technical issues."
)
NO_EVIDENCE_EXPLANATION = "No relevant sources were found to verify this claim."


def extract_citations(evidence: Sequence[EvidenceDocument]) -> list[Citation]:
    """Citations for evidence items that carry a URL, at most three."""
    citations = [
        Citation(
            title=document.title or "Source",
            url=document.url,
            source=document.source_name or "Unknown",
        )
        for document in evidence
        if document.url
    ]
    return citations[:MAX_CITATIONS]


class ClaimVerificationPipeline:
    """Verifies claims against live search evidence and background knowledge.

    Collaborators are injected; ClaimVerificationPipeline.create() wires the
    production set from settings.
    """

    def __init__(
        self,
        aggregator: Optional[EvidenceAggregator] = None,
        verifier: Optional[EvidenceVerifier] = None,
        synthesizer: Optional[VerdictSynthesizer] = None,
        knowledge_store: Optional[Any] = None,
        llm: Optional[Any] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        knowledge_timeout: Optional[float] = None,
    ) -> None:
        """
        Args:
            aggregator: Search fan-out. Defaults to one with no providers.
            verifier: Candidate verifier. Defaults to one sharing llm.
            synthesizer: Verdict synthesizer. Defaults to one sharing llm.
            knowledge_store: Object exposing async similarity_search(query, limit).
            llm: Text generation provider for default collaborators; closed by aclose().
            http_client: Shared HTTP client owned by the pipeline; closed by aclose().
            knowledge_timeout: Timeout for the background lookup.
        """
        self.aggregator = aggregator or EvidenceAggregator()
        self.verifier = verifier or EvidenceVerifier(llm=llm)
        self.synthesizer = synthesizer or VerdictSynthesizer(llm=llm)
        self.knowledge_store = knowledge_store
        self.llm = llm
        self._http_client = http_client
        self.knowledge_timeout = (
            knowledge_timeout or default_settings.knowledge_store_timeout_seconds
        )
        self._logger = structlog.get_logger().bind(component="ClaimVerificationPipeline")

    @classmethod
    async def create(cls, config: Optional[Settings] = None) -> "ClaimVerificationPipeline":
        """Build a pipeline from settings.

        Creates the shared HTTP client, the enabled search providers, the
        text generation fallback chain and the knowledge store handle.
        """
        config = config or default_settings
        http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(config.search_timeout_seconds),
            limits=httpx.Limits(max_keepalive_connections=10, max_connections=50),
            headers={"User-Agent": USER_AGENT},
        )
        providers = build_search_providers(config, http_client=http_client)
        llm = build_llm_provider(config)

        knowledge_store = KnowledgeStore(
            host=config.chroma_host,
            port=config.chroma_port,
            collection_name=config.chroma_collection_name,
            timeout=config.knowledge_store_timeout_seconds,
        )
        await knowledge_store.initialize()

        return cls(
            aggregator=EvidenceAggregator(providers, timeout=config.search_timeout_seconds),
            verifier=EvidenceVerifier(llm=llm, threshold=config.trust_score_threshold),
            synthesizer=VerdictSynthesizer(llm=llm),
            knowledge_store=knowledge_store,
            llm=llm,
            http_client=http_client,
            knowledge_timeout=config.knowledge_store_timeout_seconds,
        )

    async def aclose(self) -> None:
        if self.llm is not None and hasattr(self.llm, "aclose"):
            await self.llm.aclose()
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "ClaimVerificationPipeline":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.aclose()

    def terminal_result(self, claim_text: str) -> VerificationResult:
        """The zero-confidence UNVERIFIED result returned on total failure."""
        return VerificationResult.from_verdict(
            claim=claim_text,
            verdict=FactCheckVerdict.unverified(TERMINAL_EXPLANATION),
            sources=[],
            sources_found=0,
        )

    async def _background_evidence(self, claim_text: str) -> list[EvidenceDocument]:
        if self.knowledge_store is None:
            return []
        try:
            hits = await asyncio.wait_for(
                self.knowledge_store.similarity_search(claim_text, MAX_BACKGROUND_HITS),
                timeout=self.knowledge_timeout,
            )
        except Exception as e:
            self._logger.warning(
                "background_lookup_failed",
                error=str(e) or type(e).__name__,
            )
            return []

        documents = []
        for hit in hits[:MAX_BACKGROUND_HITS]:
            try:
                documents.append(EvidenceDocument.from_knowledge_hit(hit))
            except ValidationError as e:
                self._logger.warning("background_hit_skipped", error=str(e))
        return documents

    async def _run(self, claim_text: str) -> VerificationResult:
        # AGGREGATE
        candidates = await self.aggregator.aggregate(claim_text)
        to_verify = candidates[:MAX_CANDIDATES_TO_VERIFY]

        # VERIFY_CANDIDATES
        verifications = await self.verifier.verify_many(to_verify)
        live = [
            EvidenceDocument.from_verification(v)
            for v in verifications
            if v.should_include
        ]
        self._logger.info(
            "candidates_verified",
            candidates=len(candidates),
            verified=len(to_verify),
            included=len(live),
        )

        # MERGE_WITH_BACKGROUND, RANK_AND_CAP
        background = await self._background_evidence(claim_text)
        evidence = (live + background)[:MAX_EVIDENCE]

        # SYNTHESIZE
        if evidence:
            verdict = await self.synthesizer.synthesize(claim_text, evidence)
        else:
            self._logger.info("no_evidence_found", candidates=len(candidates))
            verdict = FactCheckVerdict.unverified(NO_EVIDENCE_EXPLANATION)

        # ASSEMBLE_RESULT
        return VerificationResult.from_verdict(
            claim=claim_text,
            verdict=verdict,
            sources=extract_citations(evidence),
            sources_found=len(evidence),
            candidates_found=len(candidates),
            verified_count=len(live),
        )

    async def verify_claim(self, claim_text: str) -> VerificationResult:
        """Verify a single claim. Never raises.

        Args:
            claim_text: Free-text claim; blank input yields the terminal result.

        Returns:
            VerificationResult with at most 5 evidence items counted and 3 citations.
        """
        claim = claim_text.strip() if isinstance(claim_text, str) else ""

        with bound_contextvars(correlation_id=get_correlation_id()):
            if not claim:
                self._logger.warning("empty_claim")
                return self.terminal_result("")

            self._logger.info("claim_verification_started", claim=claim[:80])
            try:
                result = await self._run(claim)
            except Exception as e:
                self._logger.error(
                    "claim_verification_failed",
                    claim=claim[:80],
                    error=str(e) or type(e).__name__,
                    exc_info=True,
                )
                return self.terminal_result(claim)

            self._logger.info(
                "claim_verification_complete",
                verdict=result.verdict.value,
                confidence=result.confidence,
                sources_found=result.sources_found,
            )
            return result

    async def verify_claims(self, claims: Sequence[str]) -> list[VerificationResult]:
        """Verify several claims concurrently, preserving input order."""
        if not claims:
            return []
        return list(await asyncio.gather(*(self.verify_claim(c) for c in claims)))

    async def describe(self) -> dict[str, Any]:
        """Configured collaborators, for status reporting."""
        store_stats: dict[str, Any] = {"available": False, "count": 0}
        if self.knowledge_store is not None and hasattr(self.knowledge_store, "get_stats"):
            store_stats = await self.knowledge_store.get_stats()
        return {
            "search_providers": [
                getattr(p, "name", type(p).__name__) for p in self.aggregator.providers
            ],
            "llm_providers": list(getattr(self.llm, "provider_names", [])),
            "knowledge_store": store_stats,
            "trust_score_threshold": self.verifier.threshold,
        }
