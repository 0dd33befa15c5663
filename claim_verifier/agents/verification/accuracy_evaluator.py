"""Content-level accuracy assessment of a single evidence item."""

from typing import Any, Optional

import structlog
from pydantic import ValidationError

from claim_verifier.agents.verification.schemas import AccuracyVerdict
from claim_verifier.config.prompts import (
    ARTICLE_ACCURACY_PROMPT,
    ARTICLE_ACCURACY_USER_PROMPT,
)
from claim_verifier.utils.json_extraction import extract_json_object

ACCURACY_EVAL_TEMPERATURE = 0.2
ACCURACY_EVAL_MAX_TOKENS = 600


class ContentAccuracyEvaluator:
    """Asks the model for sensationalism, sourcing and red-flag signals.

    Every call goes to the model; there is no rules shortcut. Failures yield
    AccuracyVerdict() (score 50, no red flags, recommendation review).
    """

    def __init__(self, llm: Optional[Any] = None) -> None:
        self.llm = llm
        self._logger = structlog.get_logger().bind(component="ContentAccuracyEvaluator")

    async def evaluate_accuracy(
        self,
        title: str,
        snippet: str,
        source_name: str,
    ) -> AccuracyVerdict:
        if self.llm is None:
            return AccuracyVerdict(reasoning="No model available for accuracy assessment")

        content = f"{title or ''}\n\n{snippet or ''}".strip()
        prompt = ARTICLE_ACCURACY_USER_PROMPT.format(
            source_name=source_name or "Unknown",
            content=content,
        )

        try:
            response = await self.llm.generate(
                ARTICLE_ACCURACY_PROMPT,
                prompt,
                temperature=ACCURACY_EVAL_TEMPERATURE,
                max_output_tokens=ACCURACY_EVAL_MAX_TOKENS,
            )
        except Exception as e:
            self._logger.error(
                "accuracy_evaluation_failed",
                source=source_name,
                error=str(e) or type(e).__name__,
            )
            return AccuracyVerdict(reasoning="Unable to assess content accuracy")

        parsed = extract_json_object(response)
        if parsed is None:
            self._logger.warning("accuracy_evaluation_unparseable", source=source_name)
            return AccuracyVerdict(reasoning="Unable to parse accuracy assessment")

        try:
            verdict = AccuracyVerdict.model_validate(parsed)
        except ValidationError as e:
            self._logger.warning(
                "accuracy_evaluation_invalid",
                source=source_name,
                error=str(e),
            )
            return AccuracyVerdict(reasoning="Invalid accuracy assessment")

        self._logger.debug(
            "accuracy_evaluated",
            source=source_name,
            accuracy_score=verdict.accuracy_score,
            red_flags=verdict.red_flag_count,
        )
        return verdict
