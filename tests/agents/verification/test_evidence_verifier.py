"""Tests for EvidenceVerifier score fusion and inclusion gating.

Tests cover:
- fuse_scores (weights, rounding, clamping)
- should_include (threshold boundary, red-flag override)
- verify() end to end with evaluators sharing a mocked model
- Failure path (trust_score 0, excluded, error recorded)
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from claim_verifier.agents.verification.evidence_verifier import (
    EvidenceVerifier,
    fuse_scores,
    should_include,
)
from claim_verifier.agents.verification.schemas import (
    AccuracyVerdict,
    EvidenceCandidate,
    SourceTrustVerdict,
)
from claim_verifier.config.prompts import (
    ARTICLE_ACCURACY_PROMPT,
    SOURCE_TRUSTWORTHINESS_PROMPT,
)


def _candidate(source: str = "Example Gazette") -> EvidenceCandidate:
    return EvidenceCandidate(
        title="Fact check: hot water does not cure COVID-19",
        snippet="Health authorities say there is no evidence.",
        source_name=source,
        url="https://gazette.example/fact-check",
        provider_origin="serpapi_news",
    )


def _routing_llm(source_json: str, accuracy_json: str) -> AsyncMock:
    """Model mock answering by system prompt."""

    async def generate(system_instruction, user_prompt, **kwargs):
        if system_instruction == SOURCE_TRUSTWORTHINESS_PROMPT:
            return source_json
        if system_instruction == ARTICLE_ACCURACY_PROMPT:
            return accuracy_json
        raise AssertionError("unexpected prompt")

    llm = AsyncMock()
    llm.generate = AsyncMock(side_effect=generate)
    return llm


# ── fuse_scores ───────────────────────────────────────────────────────────


class TestFuseScores:
    def test_weighted_sum(self):
        assert fuse_scores(95, 50) == 77
        assert fuse_scores(80, 80) == 80
        assert fuse_scores(10, 90) == 42

    def test_rounds_to_nearest(self):
        # 0.6*51 + 0.4*50 = 50.6
        assert fuse_scores(51, 50) == 51
        # 0.6*50 + 0.4*51 = 50.4
        assert fuse_scores(50, 51) == 50

    def test_equal_inputs_are_preserved(self):
        for score in (0, 33, 70, 75, 99, 100):
            assert fuse_scores(score, score) == score

    def test_bounds(self):
        assert fuse_scores(0, 0) == 0
        assert fuse_scores(100, 100) == 100


# ── should_include ────────────────────────────────────────────────────────


class TestShouldInclude:
    def test_threshold_is_inclusive(self):
        assert should_include(70, AccuracyVerdict(), 70) is True
        assert should_include(69, AccuracyVerdict(), 70) is False

    def test_three_red_flags_exclude_even_perfect_score(self):
        accuracy = AccuracyVerdict(has_red_flags=True, red_flags=["a", "b", "c"])
        assert should_include(100, accuracy, 70) is False

    def test_two_red_flags_are_tolerated(self):
        accuracy = AccuracyVerdict(has_red_flags=True, red_flags=["a", "b"])
        assert should_include(80, accuracy, 70) is True

    def test_flags_listed_without_has_red_flags_do_not_exclude(self):
        accuracy = AccuracyVerdict(has_red_flags=False, red_flags=["a", "b", "c"])
        assert should_include(80, accuracy, 70) is True

    def test_missing_accuracy_uses_score_only(self):
        assert should_include(75, None, 70) is True


# ── verify ────────────────────────────────────────────────────────────────


class TestVerify:
    @pytest.mark.asyncio
    async def test_fused_80_without_flags_is_included(self):
        llm = _routing_llm(
            '{"trustworthy": true, "trustScore": 80, "category": "trusted"}',
            '{"accuracyScore": 80, "hasRedFlags": false, "redFlags": []}',
        )
        verifier = EvidenceVerifier(llm=llm, threshold=70)

        verification = await verifier.verify(_candidate())

        assert verification.trust_score == 80
        assert verification.should_include is True
        assert verification.error is None
        assert verification.source_verdict.trust_score == 80
        assert verification.accuracy_verdict.accuracy_score == 80
        assert llm.generate.call_count == 2

    @pytest.mark.asyncio
    async def test_trusted_source_skips_source_model_call(self):
        llm = _routing_llm(
            "unused",
            '{"accuracyScore": 50, "hasRedFlags": false}',
        )
        verifier = EvidenceVerifier(llm=llm, threshold=70)

        verification = await verifier.verify(_candidate("Reuters"))

        # 0.6*95 + 0.4*50 = 77
        assert verification.trust_score == 77
        assert verification.should_include is True
        assert llm.generate.call_count == 1

    @pytest.mark.asyncio
    async def test_red_flags_override_high_score(self):
        llm = _routing_llm(
            "unused",
            '{"accuracyScore": 100, "hasRedFlags": true, "redFlags": ["x", "y", "z"]}',
        )
        verifier = EvidenceVerifier(llm=llm, threshold=70)

        verification = await verifier.verify(_candidate("Reuters"))

        assert verification.trust_score == 97
        assert verification.should_include is False

    @pytest.mark.asyncio
    async def test_unreliable_source_is_excluded(self):
        llm = _routing_llm(
            "unused",
            '{"accuracyScore": 90, "hasRedFlags": false}',
        )
        verifier = EvidenceVerifier(llm=llm, threshold=70)

        verification = await verifier.verify(_candidate("Infowars"))

        # 0.6*10 + 0.4*90 = 42
        assert verification.trust_score == 42
        assert verification.should_include is False

    @pytest.mark.asyncio
    async def test_evaluator_failure_yields_zero_score(self):
        source_evaluator = MagicMock()
        source_evaluator.evaluate_source = AsyncMock(side_effect=RuntimeError("boom"))
        accuracy_evaluator = MagicMock()
        accuracy_evaluator.evaluate_accuracy = AsyncMock(return_value=AccuracyVerdict())
        verifier = EvidenceVerifier(
            source_evaluator=source_evaluator,
            accuracy_evaluator=accuracy_evaluator,
            threshold=70,
        )

        verification = await verifier.verify(_candidate())

        assert verification.trust_score == 0
        assert verification.should_include is False
        assert verification.error == "boom"
        assert verification.source_verdict is None
        assert verification.accuracy_verdict is None

    @pytest.mark.asyncio
    async def test_verify_many_preserves_order(self):
        source_evaluator = MagicMock()
        source_evaluator.evaluate_source = AsyncMock(
            return_value=SourceTrustVerdict(trust_score=90)
        )
        accuracy_evaluator = MagicMock()
        accuracy_evaluator.evaluate_accuracy = AsyncMock(
            return_value=AccuracyVerdict(accuracy_score=90)
        )
        verifier = EvidenceVerifier(
            source_evaluator=source_evaluator,
            accuracy_evaluator=accuracy_evaluator,
            threshold=70,
        )
        candidates = [_candidate(f"Outlet {i}") for i in range(4)]

        verifications = await verifier.verify_many(candidates)

        assert [v.candidate.source_name for v in verifications] == [
            "Outlet 0", "Outlet 1", "Outlet 2", "Outlet 3",
        ]
        assert all(v.trust_score == 90 for v in verifications)

    @pytest.mark.asyncio
    async def test_verify_many_empty(self):
        verifier = EvidenceVerifier(threshold=70)
        assert await verifier.verify_many([]) == []

    def test_threshold_defaults_to_settings(self):
        from claim_verifier.config.settings import settings

        assert EvidenceVerifier().threshold == settings.trust_score_threshold
