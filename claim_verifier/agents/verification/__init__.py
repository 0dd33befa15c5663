"""Claim verification components.

Core workflow per claim:
1. EvidenceAggregator fans the claim out to every search provider
2. EvidenceVerifier scores each candidate (SourceTrustEvaluator +
   ContentAccuracyEvaluator) and gates it on the fused trust score
3. VerdictSynthesizer turns surviving evidence into a categorical verdict

ClaimExtractor sits in front of the workflow for free-form messages.
"""

from claim_verifier.agents.verification.accuracy_evaluator import ContentAccuracyEvaluator
from claim_verifier.agents.verification.claim_extractor import ClaimExtractor
from claim_verifier.agents.verification.evidence_aggregator import EvidenceAggregator
from claim_verifier.agents.verification.evidence_verifier import (
    EvidenceVerifier,
    fuse_scores,
    should_include,
)
from claim_verifier.agents.verification.schemas import (
    AccuracyVerdict,
    Citation,
    EvidenceCandidate,
    EvidenceDocument,
    EvidenceVerification,
    ExtractedClaim,
    FactCheckVerdict,
    KnowledgeHit,
    SourceTrustVerdict,
    TrustCategory,
    Verdict,
    VerificationResult,
)
from claim_verifier.agents.verification.source_evaluator import SourceTrustEvaluator
from claim_verifier.agents.verification.verdict_synthesizer import (
    VerdictSynthesizer,
    build_context,
)

__all__ = [
    "AccuracyVerdict",
    "Citation",
    "ClaimExtractor",
    "ContentAccuracyEvaluator",
    "EvidenceAggregator",
    "EvidenceCandidate",
    "EvidenceDocument",
    "EvidenceVerification",
    "EvidenceVerifier",
    "ExtractedClaim",
    "FactCheckVerdict",
    "KnowledgeHit",
    "SourceTrustEvaluator",
    "SourceTrustVerdict",
    "TrustCategory",
    "Verdict",
    "VerdictSynthesizer",
    "VerificationResult",
    "build_context",
    "fuse_scores",
    "should_include",
]
