"""Keyword query construction for search providers.

News search engines rank better on a handful of keywords than on a verbatim
sentence. build_search_query reduces a claim to at most seven lower-cased
content words:

1. Lower-case the claim
2. Replace punctuation with spaces
3. Drop words of two characters or fewer and the stop-word set
4. Keep the first seven remaining words, in claim order
"""

import re

STOP_WORDS: frozenset[str] = frozenset(
    {
        "the", "a", "an", "and", "or", "but",
        "is", "are", "was", "were", "been", "being",
        "have", "has", "had",
    }
)

MAX_QUERY_TERMS = 7
MIN_TERM_LENGTH = 3

_NON_WORD = re.compile(r"[^\w\s]")


def build_search_query(claim_text: str, max_terms: int = MAX_QUERY_TERMS) -> str:
    """Derive a compact keyword query from a claim.

    Args:
        claim_text: Free-text claim.
        max_terms: Maximum number of keywords to keep.

    Returns:
        Space-separated keywords; empty string if nothing survives filtering.

    Example:
        >>> build_search_query("Drinking hot water cures COVID-19!")
        'drinking hot water cures covid'
    """
    if not claim_text:
        return ""

    words = _NON_WORD.sub(" ", claim_text.lower()).split()
    keywords = [
        word
        for word in words
        if len(word) >= MIN_TERM_LENGTH and word not in STOP_WORDS
    ]
    return " ".join(keywords[:max_terms])


__all__ = ["STOP_WORDS", "MAX_QUERY_TERMS", "build_search_query"]
