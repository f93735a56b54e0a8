"""Capitalized-phrase entity extraction.

This is a proper-noun heuristic, not named-entity recognition. It both over-
and under-matches (sentence-initial words, lowercase brand names), and the
similarity gates are tuned against exactly that profile.
"""

from __future__ import annotations

import re

CAPITALIZED_PHRASE_PATTERN = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)*\b")

ENTITY_BLACKLIST = frozenset(
    {
        "The", "This", "That", "These", "Those", "They", "There",
        "Then", "When", "Where", "What", "Who", "Why", "How",
    }
)

MAX_ENTITIES = 10


def extract_entities(text: str | None, limit: int = MAX_ENTITIES) -> list[str]:
    """Extract capitalized phrases from case-preserved text.

    Args:
        text: Original-case text; lowercased input yields no entities
        limit: Maximum number of entities to return

    Returns:
        Unique phrases longer than 3 and shorter than 30 characters,
        in first-occurrence order
    """
    if not text:
        return []

    entities: list[str] = []
    seen: set[str] = set()
    for match in CAPITALIZED_PHRASE_PATTERN.findall(text):
        if not 3 < len(match) < 30:
            continue
        if match in ENTITY_BLACKLIST or match in seen:
            continue
        seen.add(match)
        entities.append(match)
        if len(entities) >= limit:
            break
    return entities
