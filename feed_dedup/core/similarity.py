"""
Pairwise similarity scoring between content fingerprints.

The score is an additive composite of four gated signals:
1. Title token Jaccard
2. Keyword Jaccard
3. Entity Jaccard
4. Exact fingerprint hash equality (flat bonus)

Each signal contributes ``weight * raw`` only when its raw value clears its
gate, and appends a human-readable reason. All signals are set operations,
so ``score(a, b)`` and ``score(b, a)`` are numerically identical.
"""

from __future__ import annotations

from typing import Iterable

from ..config import ScoringConfig
from .types import ContentFingerprint, SimilarityResult

REASON_TITLES = "Similar titles"
REASON_KEYWORDS = "Similar keywords"
REASON_ENTITIES = "Similar entities"
REASON_FINGERPRINT = "Content fingerprint match"


def jaccard(first: Iterable[str], second: Iterable[str]) -> float:
    """Jaccard similarity of two collections; 0.0 when both are empty."""
    set1 = set(first)
    set2 = set(second)
    union = set1 | set2
    if not union:
        return 0.0
    return len(set1 & set2) / len(union)


def lowered_overlap(first: Iterable[str], second: Iterable[str]) -> float:
    """Case-insensitive Jaccard over two term collections."""
    return jaccard((s.lower() for s in first), (s.lower() for s in second))


def title_similarity(first: str, second: str) -> float:
    """Jaccard over lowercase whitespace-split title tokens."""
    return jaccard((first or "").lower().split(), (second or "").lower().split())


def score(
    first: ContentFingerprint,
    second: ContentFingerprint,
    cfg: ScoringConfig | None = None,
) -> SimilarityResult:
    """Score ``second`` as a candidate duplicate of ``first``.

    Args:
        first: Fingerprint of the target item
        second: Fingerprint of the candidate item
        cfg: Gates and weights; defaults to ScoringConfig()

    Returns:
        SimilarityResult describing the candidate, with reasons in gate order
    """
    cfg = cfg or ScoringConfig()
    reasons: list[str] = []
    total = 0.0

    title_sim = title_similarity(first.title, second.title)
    if title_sim > cfg.title_gate:
        total += title_sim * cfg.title_weight
        reasons.append(REASON_TITLES)

    keyword_overlap = lowered_overlap(first.keywords, second.keywords)
    if keyword_overlap > cfg.keyword_gate:
        total += keyword_overlap * cfg.keyword_weight
        reasons.append(REASON_KEYWORDS)

    entity_overlap = lowered_overlap(first.entities, second.entities)
    if entity_overlap > cfg.entity_gate:
        total += entity_overlap * cfg.entity_weight
        reasons.append(REASON_ENTITIES)

    if first.fingerprint_hash == second.fingerprint_hash:
        total += cfg.fingerprint_bonus
        reasons.append(REASON_FINGERPRINT)

    return SimilarityResult(
        candidate_id=second.item_id,
        score=total,
        reasons=tuple(reasons),
        source_url=second.source_url,
        title=second.title,
    )


def common_reasons(results: Iterable[SimilarityResult]) -> list[str]:
    """Reasons shared by more than one result, in first-seen order."""
    counts: dict[str, int] = {}
    for result in results:
        for reason in result.reasons:
            counts[reason] = counts.get(reason, 0) + 1
    return [reason for reason, count in counts.items() if count > 1]
