"""Claim verification orchestration.

- ClaimVerificationPipeline: claim text -> VerificationResult, never raises
"""

from claim_verifier.pipeline.verification_pipeline import ClaimVerificationPipeline

__all__ = ["ClaimVerificationPipeline"]
