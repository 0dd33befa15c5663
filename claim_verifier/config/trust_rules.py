"""Source trust rules for evidence verification.

Curated lists consulted before any model-based assessment. Matching is a
case-insensitive substring test against the source name reported by the
search provider, so "BBC News" and "bbc.com" both hit "bbc".

Scores are on the 0-100 scale used throughout the verification pipeline:
- Known trusted outlets, agencies and fact-checkers: 95 (highly_trusted)
- Known misinformation or satire outlets: 10 (unreliable)
- Anything else falls through to the model (neutral default 50)
"""

from typing import Tuple

# Wire services, public-health bodies, journals and fact-checkers (lowercase)
TRUSTED_SOURCES: Tuple[str, ...] = (
    "reuters",
    "associated press",
    "ap news",
    "bbc",
    "who",
    "world health organization",
    "pib",
    "press information bureau",
    "the guardian",
    "the new york times",
    "washington post",
    "nature",
    "science",
    "the lancet",
    "bmj",
    "cdc",
    "centers for disease control",
    "government",
    "fact check",
    "snopes",
    "politifact",
    "factcheck.org",
    "altnews",
    "boom live",
)

# Conspiracy, fabricated-news and satire outlets (lowercase)
UNRELIABLE_SOURCES: Tuple[str, ...] = (
    "infowars",
    "natural news",
    "before it's news",
    "yournewswire",
    "the onion",
    "clickhole",
    "satirical",
    "parody",
)

TRUSTED_SOURCE_SCORE: int = 95
UNRELIABLE_SOURCE_SCORE: int = 10
NEUTRAL_SOURCE_SCORE: int = 50

# Fusion weights for the evidence trust score (must sum to 1.0)
SOURCE_TRUST_WEIGHT: float = 0.6
CONTENT_ACCURACY_WEIGHT: float = 0.4

# More red flags than this excludes evidence regardless of its score
MAX_TOLERATED_RED_FLAGS: int = 2

# Domains preferred when a provider supports an allow-list
FACT_CHECK_DOMAINS: Tuple[str, ...] = (
    "reuters.com",
    "apnews.com",
    "factcheck.org",
    "snopes.com",
    "politifact.com",
    "bbc.com",
    "who.int",
)
