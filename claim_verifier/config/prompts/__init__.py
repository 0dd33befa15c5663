"""Prompt templates for the claim verification pipeline.

Modules:
    verification_prompts: System and user prompts for claim extraction,
        source trust, article accuracy and verdict synthesis
"""

from claim_verifier.config.prompts.verification_prompts import (
    ARTICLE_ACCURACY_PROMPT,
    ARTICLE_ACCURACY_USER_PROMPT,
    CLAIM_EXTRACTION_SYSTEM_PROMPT,
    CLAIM_EXTRACTION_USER_PROMPT,
    FACT_CHECKING_SYSTEM_PROMPT,
    FACT_CHECKING_USER_PROMPT,
    SOURCE_TRUSTWORTHINESS_PROMPT,
    SOURCE_TRUSTWORTHINESS_USER_PROMPT,
)

__all__ = [
    "ARTICLE_ACCURACY_PROMPT",
    "ARTICLE_ACCURACY_USER_PROMPT",
    "CLAIM_EXTRACTION_SYSTEM_PROMPT",
    "CLAIM_EXTRACTION_USER_PROMPT",
    "FACT_CHECKING_SYSTEM_PROMPT",
    "FACT_CHECKING_USER_PROMPT",
    "SOURCE_TRUSTWORTHINESS_PROMPT",
    "SOURCE_TRUSTWORTHINESS_USER_PROMPT",
]
