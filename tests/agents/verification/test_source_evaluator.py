"""Tests for SourceTrustEvaluator two-stage evaluation.

Tests cover:
- Rules table (trusted/unreliable matches, precedence, no model call)
- Model stage (JSON in prose, score coercion, category normalization)
- Fallbacks (model error, unparseable output, no model)
"""

from unittest.mock import AsyncMock

import pytest

from claim_verifier.agents.verification.schemas import TrustCategory
from claim_verifier.agents.verification.source_evaluator import SourceTrustEvaluator


@pytest.fixture
def llm() -> AsyncMock:
    mock = AsyncMock()
    mock.generate = AsyncMock(
        return_value='{"trustworthy": true, "trustScore": 80, "reasoning": "Established", "category": "trusted"}'
    )
    return mock


@pytest.fixture
def evaluator(llm: AsyncMock) -> SourceTrustEvaluator:
    return SourceTrustEvaluator(llm=llm)


# ── Rules table ───────────────────────────────────────────────────────────


class TestRulesTable:
    @pytest.mark.asyncio
    async def test_reuters_is_trusted_without_model_call(self, evaluator, llm):
        verdict = await evaluator.evaluate_source("Reuters", "https://www.reuters.com/x")

        assert verdict.trust_score == 95
        assert verdict.trustworthy is True
        assert verdict.category == TrustCategory.HIGHLY_TRUSTED
        assert verdict.definitive is True
        assert llm.generate.call_count == 0

    @pytest.mark.asyncio
    async def test_infowars_is_unreliable_without_model_call(self, evaluator, llm):
        verdict = await evaluator.evaluate_source("Infowars", "https://infowars.com/x")

        assert verdict.trust_score == 10
        assert verdict.trustworthy is False
        assert verdict.category == TrustCategory.UNRELIABLE
        assert verdict.definitive is True
        llm.generate.assert_not_called()

    @pytest.mark.asyncio
    async def test_match_is_case_insensitive_substring(self, evaluator, llm):
        verdict = await evaluator.evaluate_source("BBC News World", None)

        assert verdict.trust_score == 95
        llm.generate.assert_not_called()

    def test_trusted_list_checked_first(self, evaluator):
        verdict = evaluator.check_rules("Reuters Parody Desk")

        assert verdict is not None
        assert verdict.trust_score == 95

    def test_no_match_returns_none(self, evaluator):
        assert evaluator.check_rules("Example Gazette") is None
        assert evaluator.check_rules("") is None

    def test_custom_rules(self):
        evaluator = SourceTrustEvaluator(
            trusted_sources=("Example Gazette",),
            unreliable_sources=(),
        )
        verdict = evaluator.check_rules("the example gazette")

        assert verdict is not None
        assert verdict.trust_score == 95


# ── Model stage ───────────────────────────────────────────────────────────


class TestModelStage:
    @pytest.mark.asyncio
    async def test_unknown_source_uses_model(self, evaluator, llm):
        verdict = await evaluator.evaluate_source("Example Gazette", "https://gazette.example")

        assert llm.generate.call_count == 1
        assert verdict.trust_score == 80
        assert verdict.category == TrustCategory.TRUSTED
        assert verdict.definitive is False
        assert verdict.source_name == "Example Gazette"

    @pytest.mark.asyncio
    async def test_prompt_carries_source_and_settings(self, evaluator, llm):
        await evaluator.evaluate_source("Example Gazette", "https://gazette.example")

        args, kwargs = llm.generate.call_args
        assert "Example Gazette" in args[1]
        assert "https://gazette.example" in args[1]
        assert kwargs["temperature"] == 0.2
        assert kwargs["max_output_tokens"] == 500

    @pytest.mark.asyncio
    async def test_json_embedded_in_prose(self, evaluator, llm):
        llm.generate.return_value = (
            "Here is my assessment:\n"
            '{"trustworthy": false, "trustScore": 34.6, "reasoning": "Partisan", '
            '"category": "questionable"}\nLet me know if you need more.'
        )
        verdict = await evaluator.evaluate_source("Example Gazette")

        assert verdict.trust_score == 35
        assert verdict.category == TrustCategory.QUESTIONABLE
        assert verdict.trustworthy is False

    @pytest.mark.asyncio
    async def test_unknown_category_normalizes_to_neutral(self, evaluator, llm):
        llm.generate.return_value = '{"trustworthy": true, "trustScore": 60, "category": "mostly fine"}'
        verdict = await evaluator.evaluate_source("Example Gazette")

        assert verdict.category == TrustCategory.NEUTRAL
        assert verdict.trust_score == 60

    @pytest.mark.asyncio
    async def test_out_of_range_score_is_clamped(self, evaluator, llm):
        llm.generate.return_value = '{"trustworthy": true, "trustScore": 140}'
        verdict = await evaluator.evaluate_source("Example Gazette")

        assert verdict.trust_score == 100


# ── Fallbacks ─────────────────────────────────────────────────────────────


class TestFallbacks:
    @pytest.mark.asyncio
    async def test_model_error_yields_neutral(self, evaluator, llm):
        llm.generate.side_effect = RuntimeError("quota exceeded")
        verdict = await evaluator.evaluate_source("Example Gazette")

        assert verdict.trust_score == 50
        assert verdict.category == TrustCategory.NEUTRAL
        assert verdict.trustworthy is False

    @pytest.mark.asyncio
    async def test_unparseable_output_yields_neutral(self, evaluator, llm):
        llm.generate.return_value = "I cannot assess this source."
        verdict = await evaluator.evaluate_source("Example Gazette")

        assert verdict.trust_score == 50
        assert verdict.category == TrustCategory.NEUTRAL

    @pytest.mark.asyncio
    async def test_invalid_field_type_yields_neutral(self, evaluator, llm):
        llm.generate.return_value = '{"trustworthy": "perhaps", "trustScore": 90}'
        verdict = await evaluator.evaluate_source("Example Gazette")

        assert verdict.trust_score == 50

    @pytest.mark.asyncio
    async def test_no_model_yields_neutral(self):
        evaluator = SourceTrustEvaluator(llm=None)
        verdict = await evaluator.evaluate_source("Example Gazette")

        assert verdict.trust_score == 50
        assert verdict.definitive is False
