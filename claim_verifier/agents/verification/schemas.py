"""Verification domain schemas for the claim verification pipeline.

Defines the data structures that flow between pipeline stages:

- EvidenceCandidate: one retrieved article/snippet from a search provider
- SourceTrustVerdict / AccuracyVerdict: per-stage model assessments
- EvidenceVerification: fused trust score and inclusion decision per candidate
- EvidenceDocument: a piece of evidence rendered into the synthesis context
- FactCheckVerdict: the categorical verdict produced by synthesis
- VerificationResult: the only entity exposed across the pipeline boundary

Model output is semi-structured, so the assessment schemas accept the
camelCase keys the prompts request (trustScore, hasRedFlags, ...) and
normalize loosely typed values (float scores, unknown categories, verdict
casing) in before-validators. A parsed value is always fully populated.
"""

import math
import re
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal, Optional

from pydantic import BaseModel, Field, field_validator


def clamp_score(value: Any, default: int) -> int:
    """Coerce a loosely typed score into an int on the 0-100 scale.

    Rounds half up. Booleans, NaN and non-numeric values yield default.
    """
    if isinstance(value, bool) or value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return max(0, min(100, math.floor(number + 0.5)))


def _coerce_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


class Verdict(str, Enum):
    """Final categorical judgment on a claim."""

    TRUE = "TRUE"
    FALSE = "FALSE"
    PARTIALLY_TRUE = "PARTIALLY TRUE"
    UNVERIFIED = "UNVERIFIED"

    @classmethod
    def normalize(cls, raw: Any) -> "Verdict":
        """Map raw model output onto the enum.

        Upper-cases, treats underscores and hyphens as spaces and collapses
        whitespace, so "partially_true" and "Partially  True" both resolve.
        Anything outside the four values clamps to UNVERIFIED.
        """
        if isinstance(raw, Verdict):
            return raw
        if not isinstance(raw, str):
            return cls.UNVERIFIED
        text = re.sub(r"[\s_\-]+", " ", raw.strip().upper())
        try:
            return cls(text)
        except ValueError:
            return cls.UNVERIFIED


class TrustCategory(str, Enum):
    """Source reputation bucket."""

    HIGHLY_TRUSTED = "highly_trusted"
    TRUSTED = "trusted"
    NEUTRAL = "neutral"
    QUESTIONABLE = "questionable"
    UNRELIABLE = "unreliable"


class Recommendation(str, Enum):
    """What the accuracy assessment suggests doing with the evidence."""

    INCLUDE = "include"
    REVIEW = "review"
    EXCLUDE = "exclude"


class EvidenceCandidate(BaseModel):
    """One piece of retrieved material considered as evidence for a claim.

    Produced by a search provider adapter and immutable afterwards.
    """

    title: str = Field(default="", description="Article or result title")
    snippet: str = Field(default="", description="Body excerpt")
    source_name: str = Field(
        default="Unknown", description="Publisher name reported by the provider"
    )
    url: str = Field(default="", description="Link to the article, may be empty")
    published_at: str = Field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat(),
        description="Best-effort publication timestamp, retrieval time if unknown",
    )
    provider_origin: str = Field(..., description="Search backend that produced it")
    precomputed_answer: Optional[str] = Field(
        default=None, description="Provider-supplied direct answer, if any"
    )

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "examples": [
                {
                    "title": "Fact check: Hot water does not cure COVID-19",
                    "snippet": "Health authorities say there is no evidence...",
                    "source_name": "Reuters",
                    "url": "https://www.reuters.com/article/factcheck-hot-water",
                    "published_at": "2026-03-10T12:00:00+00:00",
                    "provider_origin": "serpapi_news",
                    "precomputed_answer": None,
                }
            ]
        },
    }

    @property
    def content(self) -> str:
        """Title and snippet as a single text block."""
        return f"{self.title}\n\n{self.snippet}".strip()


class SourceTrustVerdict(BaseModel):
    """Trust assessment for a named source."""

    trustworthy: bool = False
    trust_score: int = Field(default=50, ge=0, le=100, alias="trustScore")
    reasoning: str = ""
    category: TrustCategory = TrustCategory.NEUTRAL
    source_name: str = "Unknown"
    definitive: bool = Field(
        default=False,
        description="True when the static rules table decided without a model call",
    )

    model_config = {"populate_by_name": True}

    @field_validator("trust_score", mode="before")
    @classmethod
    def _normalize_score(cls, value: Any) -> int:
        return clamp_score(value, default=50)

    @field_validator("reasoning", mode="before")
    @classmethod
    def _normalize_reasoning(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> TrustCategory:
        if isinstance(value, TrustCategory):
            return value
        key = re.sub(r"[\s\-]+", "_", _coerce_text(value).strip().lower())
        try:
            return TrustCategory(key)
        except ValueError:
            return TrustCategory.NEUTRAL


class AccuracyVerdict(BaseModel):
    """Content-level accuracy assessment for one evidence item."""

    accuracy_score: int = Field(default=50, ge=0, le=100, alias="accuracyScore")
    has_red_flags: bool = Field(default=False, alias="hasRedFlags")
    red_flags: list[str] = Field(default_factory=list, alias="redFlags")
    reasoning: str = ""
    recommendation: Recommendation = Recommendation.REVIEW

    model_config = {"populate_by_name": True}

    @field_validator("accuracy_score", mode="before")
    @classmethod
    def _normalize_score(cls, value: Any) -> int:
        return clamp_score(value, default=50)

    @field_validator("red_flags", mode="before")
    @classmethod
    def _normalize_red_flags(cls, value: Any) -> list[str]:
        if value is None:
            return []
        if isinstance(value, str):
            return [value] if value.strip() else []
        if isinstance(value, (list, tuple)):
            return [str(flag) for flag in value if flag not in (None, "")]
        return []

    @field_validator("reasoning", mode="before")
    @classmethod
    def _normalize_reasoning(cls, value: Any) -> str:
        return _coerce_text(value)

    @field_validator("recommendation", mode="before")
    @classmethod
    def _normalize_recommendation(cls, value: Any) -> Recommendation:
        if isinstance(value, Recommendation):
            return value
        try:
            return Recommendation(_coerce_text(value).strip().lower())
        except ValueError:
            return Recommendation.REVIEW

    @property
    def red_flag_count(self) -> int:
        return len(self.red_flags)


class EvidenceVerification(BaseModel):
    """Fused verification outcome for a single evidence candidate.

    trust_score = round(0.6 * source trust + 0.4 * content accuracy).
    On internal failure both assessments are absent, trust_score is 0 and
    should_include is False.
    """

    candidate: EvidenceCandidate
    source_verdict: Optional[SourceTrustVerdict] = None
    accuracy_verdict: Optional[AccuracyVerdict] = None
    trust_score: int = Field(..., ge=0, le=100)
    should_include: bool
    error: Optional[str] = None
    verified_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class KnowledgeHit(BaseModel):
    """Similarity-search hit from the background knowledge store."""

    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    similarity: Optional[float] = None


class EvidenceDocument(BaseModel):
    """A piece of evidence as rendered into the synthesis context."""

    text: str
    source_name: Optional[str] = None
    title: Optional[str] = None
    url: Optional[str] = None
    trust_score: Optional[int] = None
    precomputed_answer: Optional[str] = None
    origin: Literal["live", "background"] = "live"

    @classmethod
    def from_verification(cls, verification: EvidenceVerification) -> "EvidenceDocument":
        candidate = verification.candidate
        return cls(
            text=candidate.content,
            source_name=candidate.source_name,
            title=candidate.title or None,
            url=candidate.url or None,
            trust_score=verification.trust_score,
            precomputed_answer=candidate.precomputed_answer,
            origin="live",
        )

    @classmethod
    def from_knowledge_hit(cls, hit: KnowledgeHit) -> "EvidenceDocument":
        metadata = hit.metadata or {}
        trust_score = metadata.get("trustScore")
        return cls(
            text=hit.text,
            source_name=_coerce_text(metadata.get("source")).strip() or None,
            title=_coerce_text(metadata.get("title")).strip() or None,
            url=_coerce_text(metadata.get("url")).strip() or None,
            trust_score=clamp_score(trust_score, 0) if trust_score is not None else None,
            origin="background",
        )


class FactCheckVerdict(BaseModel):
    """Verdict produced by the synthesizer.

    verdict is always one of the four enum values, whatever casing or
    spelling the model used.
    """

    verdict: Verdict = Verdict.UNVERIFIED
    confidence: int = Field(default=50, ge=0, le=100)
    explanation: str = ""
    corrected_info: Optional[str] = Field(default=None, alias="correctedInfo")

    model_config = {"populate_by_name": True}

    @field_validator("verdict", mode="before")
    @classmethod
    def _normalize_verdict(cls, value: Any) -> Verdict:
        return Verdict.normalize(value)

    @field_validator("confidence", mode="before")
    @classmethod
    def _normalize_confidence(cls, value: Any) -> int:
        return clamp_score(value, default=50)

    @field_validator("corrected_info", mode="before")
    @classmethod
    def _normalize_corrected_info(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        text = str(value).strip()
        if not text or text.lower() in {"null", "none", "n/a"}:
            return None
        return text

    @classmethod
    def unverified(cls, explanation: str) -> "FactCheckVerdict":
        """Zero-confidence UNVERIFIED verdict used on every failure path."""
        return cls(
            verdict=Verdict.UNVERIFIED,
            confidence=0,
            explanation=explanation,
            corrected_info=None,
        )


class Citation(BaseModel):
    """Source link shown alongside a verdict."""

    title: str
    url: str
    source: str


class VerificationResult(BaseModel):
    """Complete verification outcome for a single claim.

    The pipeline never raises; callers distinguish a system failure from a
    genuinely unverified claim by confidence == 0 and sources_found == 0.
    """

    claim: str = ""
    verdict: Verdict = Verdict.UNVERIFIED
    confidence: int = Field(default=0, ge=0, le=100)
    explanation: str = ""
    corrected_info: Optional[str] = Field(default=None, alias="correctedInfo")
    sources: list[Citation] = Field(default_factory=list, max_length=3)
    sources_found: int = Field(default=0, ge=0, le=5, alias="sourcesFound")

    # Diagnostics
    candidates_found: int = Field(
        default=0,
        ge=0,
        alias="candidatesFound",
        description="Raw candidates returned by all search providers",
    )
    verified_count: int = Field(
        default=0,
        ge=0,
        alias="verifiedCount",
        description="Live candidates that passed the inclusion gate",
    )
    verified_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="verifiedAt",
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "claim": "Drinking hot water cures COVID-19",
                    "verdict": "FALSE",
                    "confidence": 92,
                    "explanation": "Health authorities report no evidence...",
                    "correctedInfo": "Hot water does not cure or prevent COVID-19.",
                    "sources": [
                        {
                            "title": "Fact check: Hot water does not cure COVID-19",
                            "url": "https://www.reuters.com/article/factcheck-hot-water",
                            "source": "Reuters",
                        }
                    ],
                    "sourcesFound": 2,
                    "candidatesFound": 9,
                    "verifiedCount": 1,
                }
            ]
        },
    }

    @classmethod
    def from_verdict(
        cls,
        claim: str,
        verdict: FactCheckVerdict,
        sources: list[Citation],
        sources_found: int,
        candidates_found: int = 0,
        verified_count: int = 0,
    ) -> "VerificationResult":
        return cls(
            claim=claim,
            verdict=verdict.verdict,
            confidence=verdict.confidence,
            explanation=verdict.explanation,
            corrected_info=verdict.corrected_info,
            sources=sources,
            sources_found=sources_found,
            candidates_found=candidates_found,
            verified_count=verified_count,
        )

    @property
    def is_failure(self) -> bool:
        """Heuristic for a system failure rather than a weak verdict."""
        return self.confidence == 0 and self.sources_found == 0

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape consumed by chat formatters."""
        return self.model_dump(by_alias=True, mode="json")


class ExtractedClaim(BaseModel):
    """A verifiable claim pulled out of a free-form message."""

    text: str
    category: str = "general"
    priority: str = "medium"

    @field_validator("text", mode="before")
    @classmethod
    def _strip_text(cls, value: Any) -> str:
        return _coerce_text(value).strip()

    @field_validator("category", mode="before")
    @classmethod
    def _normalize_category(cls, value: Any) -> str:
        return _coerce_text(value).strip().lower() or "general"

    @field_validator("priority", mode="before")
    @classmethod
    def _normalize_priority(cls, value: Any) -> str:
        return _coerce_text(value).strip().lower() or "medium"
