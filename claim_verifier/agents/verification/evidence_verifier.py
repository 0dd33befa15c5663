"""Per-candidate trust scoring and inclusion gating.

Fused trust score:
    trust_score = round(0.6 * source_trust + 0.4 * content_accuracy)

rounded half up. A candidate is included when its fused score reaches the
threshold (default 70, inclusive) and it carries no more than two red flags.
The red-flag rule overrides the score: a 100 with three flags is excluded.

Usage:
    from claim_verifier.agents.verification.evidence_verifier import EvidenceVerifier

    verifier = EvidenceVerifier(llm=provider)
    verification = await verifier.verify(candidate)
    if verification.should_include:
        ...
"""

import asyncio
import math
from typing import Any, Optional

import structlog

from claim_verifier.agents.verification.accuracy_evaluator import ContentAccuracyEvaluator
from claim_verifier.agents.verification.schemas import (
    AccuracyVerdict,
    EvidenceCandidate,
    EvidenceVerification,
)
from claim_verifier.agents.verification.source_evaluator import SourceTrustEvaluator
from claim_verifier.config.settings import settings
from claim_verifier.config.trust_rules import (
    CONTENT_ACCURACY_WEIGHT,
    MAX_TOLERATED_RED_FLAGS,
    SOURCE_TRUST_WEIGHT,
)


def fuse_scores(source_trust: int, content_accuracy: int) -> int:
    """Weighted fusion of source trust and content accuracy, rounded half up."""
    weighted = SOURCE_TRUST_WEIGHT * source_trust + CONTENT_ACCURACY_WEIGHT * content_accuracy
    # Tolerate float noise so 0.6*75 + 0.4*75 lands on 75, not 74.99...
    return max(0, min(100, math.floor(round(weighted, 9) + 0.5)))


def should_include(
    trust_score: int,
    accuracy: Optional[AccuracyVerdict],
    threshold: int,
) -> bool:
    """Inclusion gate: score >= threshold and at most two red flags."""
    if accuracy is not None and accuracy.has_red_flags:
        if accuracy.red_flag_count > MAX_TOLERATED_RED_FLAGS:
            return False
    return trust_score >= threshold


class EvidenceVerifier:
    """Runs source and accuracy evaluation for a candidate and fuses the result.

    Attributes:
        source_evaluator: Two-stage source trust evaluator.
        accuracy_evaluator: Model-based content accuracy evaluator.
        threshold: Minimum fused score for inclusion.
    """

    def __init__(
        self,
        llm: Optional[Any] = None,
        source_evaluator: Optional[SourceTrustEvaluator] = None,
        accuracy_evaluator: Optional[ContentAccuracyEvaluator] = None,
        threshold: Optional[int] = None,
    ) -> None:
        """
        Args:
            llm: Text generation provider shared by both evaluators when they
                are not injected.
            source_evaluator: Override for the source trust stage.
            accuracy_evaluator: Override for the content accuracy stage.
            threshold: Inclusion threshold (defaults to settings.trust_score_threshold).
        """
        self.source_evaluator = source_evaluator or SourceTrustEvaluator(llm=llm)
        self.accuracy_evaluator = accuracy_evaluator or ContentAccuracyEvaluator(llm=llm)
        self.threshold = (
            threshold if threshold is not None else settings.trust_score_threshold
        )
        self._logger = structlog.get_logger().bind(component="EvidenceVerifier")

    async def verify(self, candidate: EvidenceCandidate) -> EvidenceVerification:
        """Verify one candidate. Never raises.

        Returns:
            EvidenceVerification. On internal failure trust_score is 0,
            should_include is False and error is set.
        """
        try:
            source_verdict, accuracy_verdict = await asyncio.gather(
                self.source_evaluator.evaluate_source(candidate.source_name, candidate.url),
                self.accuracy_evaluator.evaluate_accuracy(
                    candidate.title,
                    candidate.snippet,
                    candidate.source_name,
                ),
            )
            trust_score = fuse_scores(
                source_verdict.trust_score,
                accuracy_verdict.accuracy_score,
            )
            include = should_include(trust_score, accuracy_verdict, self.threshold)
        except Exception as e:
            self._logger.error(
                "candidate_verification_failed",
                source=candidate.source_name,
                title=candidate.title[:60],
                error=str(e) or type(e).__name__,
            )
            return EvidenceVerification(
                candidate=candidate,
                trust_score=0,
                should_include=False,
                error=str(e) or type(e).__name__,
            )

        self._logger.info(
            "candidate_verified",
            source=candidate.source_name,
            source_score=source_verdict.trust_score,
            accuracy_score=accuracy_verdict.accuracy_score,
            trust_score=trust_score,
            red_flags=accuracy_verdict.red_flag_count,
            included=include,
        )
        return EvidenceVerification(
            candidate=candidate,
            source_verdict=source_verdict,
            accuracy_verdict=accuracy_verdict,
            trust_score=trust_score,
            should_include=include,
        )

    async def verify_many(
        self,
        candidates: list[EvidenceCandidate],
    ) -> list[EvidenceVerification]:
        """Verify candidates concurrently, preserving input order."""
        if not candidates:
            return []
        return list(await asyncio.gather(*(self.verify(c) for c in candidates)))
