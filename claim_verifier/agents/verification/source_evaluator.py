"""Two-stage source trust evaluation.

Stage 1 checks the source name against the static rules table in
config/trust_rules.py. A hit is definitive and costs no model call.
Stage 2 asks the text generation provider for a structured assessment.
Anything that goes wrong in stage 2 (provider error, timeout, unparseable
or invalid output) degrades to the neutral default instead of raising.

Usage:
    from claim_verifier.agents.verification.source_evaluator import SourceTrustEvaluator

    evaluator = SourceTrustEvaluator(llm=provider)
    verdict = await evaluator.evaluate_source("Reuters", "https://reuters.com/...")
"""

from typing import Any, Optional, Sequence

import structlog
from pydantic import ValidationError

from claim_verifier.agents.verification.schemas import SourceTrustVerdict, TrustCategory
from claim_verifier.config.prompts import (
    SOURCE_TRUSTWORTHINESS_PROMPT,
    SOURCE_TRUSTWORTHINESS_USER_PROMPT,
)
from claim_verifier.config.trust_rules import (
    NEUTRAL_SOURCE_SCORE,
    TRUSTED_SOURCE_SCORE,
    TRUSTED_SOURCES,
    UNRELIABLE_SOURCE_SCORE,
    UNRELIABLE_SOURCES,
)
from claim_verifier.utils.json_extraction import extract_json_object

SOURCE_EVAL_TEMPERATURE = 0.2
SOURCE_EVAL_MAX_TOKENS = 500


def _first_match(name: str, patterns: Sequence[str]) -> Optional[str]:
    for pattern in patterns:
        if pattern in name:
            return pattern
    return None


class SourceTrustEvaluator:
    """Scores how trustworthy a named source is on a 0-100 scale.

    Attributes:
        llm: Object exposing async generate(); None restricts evaluation to
            the rules table.
        trusted_sources: Lowercase substrings marking trusted outlets.
        unreliable_sources: Lowercase substrings marking unreliable outlets.
    """

    def __init__(
        self,
        llm: Optional[Any] = None,
        trusted_sources: Sequence[str] = TRUSTED_SOURCES,
        unreliable_sources: Sequence[str] = UNRELIABLE_SOURCES,
    ) -> None:
        self.llm = llm
        self.trusted_sources = tuple(s.lower() for s in trusted_sources)
        self.unreliable_sources = tuple(s.lower() for s in unreliable_sources)
        self._logger = structlog.get_logger().bind(component="SourceTrustEvaluator")

    def check_rules(self, source_name: str) -> Optional[SourceTrustVerdict]:
        """Match a source name against the rules table.

        Trusted patterns are consulted first; the first hit wins.

        Returns:
            Definitive verdict on a match, None otherwise.
        """
        name = (source_name or "").lower()
        if not name:
            return None

        pattern = _first_match(name, self.trusted_sources)
        if pattern:
            return SourceTrustVerdict(
                trustworthy=True,
                trust_score=TRUSTED_SOURCE_SCORE,
                reasoning=f"Known trusted source (matched '{pattern}')",
                category=TrustCategory.HIGHLY_TRUSTED,
                source_name=source_name,
                definitive=True,
            )

        pattern = _first_match(name, self.unreliable_sources)
        if pattern:
            return SourceTrustVerdict(
                trustworthy=False,
                trust_score=UNRELIABLE_SOURCE_SCORE,
                reasoning=f"Known unreliable source (matched '{pattern}')",
                category=TrustCategory.UNRELIABLE,
                source_name=source_name,
                definitive=True,
            )

        return None

    def neutral_verdict(self, source_name: str, reasoning: str) -> SourceTrustVerdict:
        return SourceTrustVerdict(
            trustworthy=False,
            trust_score=NEUTRAL_SOURCE_SCORE,
            reasoning=reasoning,
            category=TrustCategory.NEUTRAL,
            source_name=source_name or "Unknown",
        )

    async def evaluate_source(
        self,
        source_name: str,
        source_url: Optional[str] = None,
    ) -> SourceTrustVerdict:
        """Evaluate a source, never raising.

        Args:
            source_name: Publisher name as reported by the search provider.
            source_url: Article or site URL, passed to the model for context.

        Returns:
            SourceTrustVerdict. Rules-table hits have definitive=True.
        """
        ruled = self.check_rules(source_name)
        if ruled is not None:
            self._logger.debug(
                "source_rule_matched",
                source=source_name,
                trust_score=ruled.trust_score,
                category=ruled.category.value,
            )
            return ruled

        if self.llm is None:
            return self.neutral_verdict(source_name, "No model available for source assessment")

        prompt = SOURCE_TRUSTWORTHINESS_USER_PROMPT.format(
            source_name=source_name or "Unknown",
            source_url=source_url or "N/A",
        )
        try:
            response = await self.llm.generate(
                SOURCE_TRUSTWORTHINESS_PROMPT,
                prompt,
                temperature=SOURCE_EVAL_TEMPERATURE,
                max_output_tokens=SOURCE_EVAL_MAX_TOKENS,
            )
        except Exception as e:
            self._logger.error(
                "source_evaluation_failed",
                source=source_name,
                error=str(e) or type(e).__name__,
            )
            return self.neutral_verdict(source_name, "Unable to assess source trustworthiness")

        parsed = extract_json_object(response)
        if parsed is None:
            self._logger.warning("source_evaluation_unparseable", source=source_name)
            return self.neutral_verdict(source_name, "Unable to parse source assessment")

        try:
            verdict = SourceTrustVerdict.model_validate(
                {**parsed, "source_name": source_name or "Unknown", "definitive": False}
            )
        except ValidationError as e:
            self._logger.warning(
                "source_evaluation_invalid",
                source=source_name,
                error=str(e),
            )
            return self.neutral_verdict(source_name, "Invalid source assessment")

        self._logger.debug(
            "source_evaluated",
            source=source_name,
            trust_score=verdict.trust_score,
            category=verdict.category.value,
        )
        return verdict
