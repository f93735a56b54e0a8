"""Frequency-ranked keyword extraction."""

from __future__ import annotations

from collections import Counter

from .text import tokenize

STOP_WORDS = frozenset(
    {
        "the", "a", "an", "and", "or", "but", "in", "on", "at", "to",
        "for", "of", "with", "by", "is", "are", "was", "were", "been", "be",
        "have", "has", "had", "do", "does", "did", "will", "would", "could", "should",
        "may", "might", "can", "cannot", "this", "that", "these", "those",
    }
)

MIN_KEYWORD_LENGTH = 4
MAX_SCANNED_TOKENS = 20
MAX_KEYWORDS = 10


def extract_keywords(text: str | None, limit: int = MAX_KEYWORDS) -> list[str]:
    """Return up to ``limit`` keywords ordered by descending frequency.

    Only the first 20 tokens that survive the length and stop-word filters
    are counted. Ties keep first-occurrence order.

    Args:
        text: Raw or lowercased text (typically title and body joined)
        limit: Maximum number of keywords to return

    Returns:
        List of lowercase keywords, most frequent first
    """
    words = [
        word
        for word in tokenize(text)
        if len(word) >= MIN_KEYWORD_LENGTH and word not in STOP_WORDS
    ][:MAX_SCANNED_TOKENS]

    # most_common() sorts stably, so equal counts stay in insertion order
    return [word for word, _ in Counter(words).most_common(limit)]
