"""Extraction of verifiable claims from free-form messages.

Usage:
    from claim_verifier.agents.verification.claim_extractor import ClaimExtractor

    extractor = ClaimExtractor(llm=provider)
    claims = await extractor.extract_claims(message_text)
    results = await pipeline.verify_claims([c.text for c in claims])
"""

from typing import Any, Optional

import structlog
from pydantic import ValidationError

from claim_verifier.agents.verification.schemas import ExtractedClaim
from claim_verifier.config.prompts import (
    CLAIM_EXTRACTION_SYSTEM_PROMPT,
    CLAIM_EXTRACTION_USER_PROMPT,
)
from claim_verifier.config.settings import settings
from claim_verifier.utils.json_extraction import extract_json_array

EXTRACTION_TEMPERATURE = 0.3
EXTRACTION_MAX_TOKENS = 800


class ClaimExtractor:
    """Asks the model for the checkable claims in a message.

    Attributes:
        llm: Text generation provider.
        max_claims: Cap on claims returned per message.
    """

    def __init__(self, llm: Optional[Any] = None, max_claims: Optional[int] = None) -> None:
        self.llm = llm
        self.max_claims = max_claims if max_claims is not None else settings.max_claims_per_message
        self._logger = structlog.get_logger().bind(component="ClaimExtractor")

    def parse_claims(self, response: Optional[str]) -> list[ExtractedClaim]:
        """Parse a model response into claims, dropping entries without text."""
        items = extract_json_array(response)
        if items is None:
            self._logger.warning("claims_unparseable", preview=(response or "")[:80])
            return []

        claims: list[ExtractedClaim] = []
        for item in items:
            if not isinstance(item, dict):
                continue
            text = item.get("text")
            if not isinstance(text, str) or not text.strip():
                continue
            try:
                claims.append(ExtractedClaim.model_validate(item))
            except ValidationError as e:
                self._logger.debug("claim_invalid", error=str(e))
        return claims

    async def extract_claims(self, text: str) -> list[ExtractedClaim]:
        """Extract up to max_claims claims from a message. Never raises."""
        if not text or not text.strip() or self.llm is None:
            return []

        try:
            response = await self.llm.generate(
                CLAIM_EXTRACTION_SYSTEM_PROMPT,
                CLAIM_EXTRACTION_USER_PROMPT.format(text=text.strip()),
                temperature=EXTRACTION_TEMPERATURE,
                max_output_tokens=EXTRACTION_MAX_TOKENS,
            )
        except Exception as e:
            self._logger.error("claim_extraction_failed", error=str(e) or type(e).__name__)
            return []

        claims = self.parse_claims(response)
        limited = claims[: self.max_claims]
        self._logger.info(
            "claims_extracted",
            text_length=len(text),
            found=len(claims),
            kept=len(limited),
        )
        return limited
