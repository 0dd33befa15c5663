"""Verdict synthesis from a claim and its evidence.

Renders the evidence into a numbered context block, asks the model for a
structured verdict and normalizes it. The verdict is always one of TRUE,
FALSE, PARTIALLY TRUE or UNVERIFIED; model spellings such as
"partially_true" are normalized and anything else clamps to UNVERIFIED.
"""

from typing import Any, Optional, Sequence

import structlog
from pydantic import ValidationError

from claim_verifier.agents.verification.schemas import EvidenceDocument, FactCheckVerdict
from claim_verifier.config.prompts import (
    FACT_CHECKING_SYSTEM_PROMPT,
    FACT_CHECKING_USER_PROMPT,
)
from claim_verifier.utils.json_extraction import extract_json_object

SYNTHESIS_TEMPERATURE = 0.2
SYNTHESIS_MAX_TOKENS = 1000

NO_EVIDENCE_CONTEXT = "No relevant sources found in the database."
CONTEXT_HEADER = "Relevant information from trusted sources:"

UNPARSEABLE_VERDICT_EXPLANATION = "Unable to verify this claim with available information."
GENERATION_FAILED_EXPLANATION = "Unable to generate a verdict at this time."


def build_context(evidence: Sequence[EvidenceDocument]) -> str:
    """Render evidence into the synthesis context block.

    Example:
        Relevant information from trusted sources:

        Source 1:
        Fact check: hot water does not cure COVID-19

        Health authorities say ...
        (Source: Reuters)

    A provider-supplied summary, if any item carries one, is appended once
    after the numbered sources.
    """
    if not evidence:
        return NO_EVIDENCE_CONTEXT

    blocks = []
    summary: Optional[str] = None
    for index, document in enumerate(evidence, start=1):
        lines = [f"Source {index}:", document.text]
        if document.source_name:
            lines.append(f"(Source: {document.source_name})")
        blocks.append("\n".join(lines))
        if summary is None and document.precomputed_answer:
            summary = document.precomputed_answer

    context = CONTEXT_HEADER + "\n\n" + "\n\n".join(blocks)
    if summary:
        context += f"\n\nProvider summary: {summary}"
    return context


class VerdictSynthesizer:
    """Produces a FactCheckVerdict for a claim from rendered evidence."""

    def __init__(self, llm: Optional[Any] = None) -> None:
        self.llm = llm
        self._logger = structlog.get_logger().bind(component="VerdictSynthesizer")

    def parse_verdict(self, response: Optional[str]) -> FactCheckVerdict:
        """Parse a model response into a verdict, or the default verdict.

        The decoded object must carry a non-empty verdict and explanation.
        """
        parsed = extract_json_object(response)
        if parsed is None:
            self._logger.warning("verdict_unparseable", preview=(response or "")[:80])
            return FactCheckVerdict.unverified(UNPARSEABLE_VERDICT_EXPLANATION)

        raw_verdict = parsed.get("verdict")
        explanation = parsed.get("explanation")
        if not isinstance(raw_verdict, str) or not raw_verdict.strip():
            self._logger.warning("verdict_missing_fields", field="verdict")
            return FactCheckVerdict.unverified(UNPARSEABLE_VERDICT_EXPLANATION)
        if not isinstance(explanation, str) or not explanation.strip():
            self._logger.warning("verdict_missing_fields", field="explanation")
            return FactCheckVerdict.unverified(UNPARSEABLE_VERDICT_EXPLANATION)

        try:
            verdict = FactCheckVerdict.model_validate(
                {
                    "verdict": raw_verdict,
                    "explanation": explanation.strip(),
                    "confidence": parsed.get("confidence"),
                    "correctedInfo": parsed.get("correctedInfo", parsed.get("corrected_info")),
                }
            )
        except ValidationError as e:
            self._logger.warning("verdict_invalid", error=str(e))
            return FactCheckVerdict.unverified(UNPARSEABLE_VERDICT_EXPLANATION)

        if verdict.verdict.value != raw_verdict.strip().upper():
            self._logger.debug(
                "verdict_normalized",
                raw=raw_verdict,
                normalized=verdict.verdict.value,
            )
        return verdict

    async def synthesize(
        self,
        claim_text: str,
        evidence: Sequence[EvidenceDocument],
    ) -> FactCheckVerdict:
        """Generate a verdict for a claim. Never raises.

        Args:
            claim_text: The claim being verified.
            evidence: Live and background evidence, already ranked and capped.

        Returns:
            FactCheckVerdict; the zero-confidence UNVERIFIED default on failure.
        """
        if self.llm is None:
            return FactCheckVerdict.unverified(GENERATION_FAILED_EXPLANATION)

        prompt = FACT_CHECKING_USER_PROMPT.format(
            claim=claim_text,
            context=build_context(evidence),
        )
        try:
            response = await self.llm.generate(
                FACT_CHECKING_SYSTEM_PROMPT,
                prompt,
                temperature=SYNTHESIS_TEMPERATURE,
                max_output_tokens=SYNTHESIS_MAX_TOKENS,
            )
        except Exception as e:
            self._logger.error("verdict_generation_failed", error=str(e) or type(e).__name__)
            return FactCheckVerdict.unverified(GENERATION_FAILED_EXPLANATION)

        verdict = self.parse_verdict(response)
        self._logger.info(
            "verdict_generated",
            claim=claim_text[:80],
            verdict=verdict.verdict.value,
            confidence=verdict.confidence,
            evidence=len(evidence),
        )
        return verdict
