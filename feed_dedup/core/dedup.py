"""
Bulk moderation helpers over a candidate item set.

This module decides *which* items a bulk operation touches; persisting the
decision is left to the content store. Operations:
1. Bulk delete matching (keywords, entities, sources, date range)
2. Title-duplicate cleanup (exact URL and fuzzy title, oldest kept)
3. Merge planning (fold a duplicate into its original)
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable

from rapidfuzz import fuzz

from .entities import extract_entities
from .text import normalize_title
from .types import BulkDeleteCriteria, ContentItem, MergePlan, ProcessingStatus

_KEYWORD_SPLIT_PATTERN = re.compile(r"[,\n]")


def parse_keyword_list(raw: str | Iterable[str]) -> list[str]:
    """Split pasted keyword input on commas and newlines.

    Blank entries and repeats are dropped; order of first appearance is kept.

    Examples:
        >>> parse_keyword_list("traffic accident, road closure\\nflooding")
        ['traffic accident', 'road closure', 'flooding']
    """
    if isinstance(raw, str):
        parts = _KEYWORD_SPLIT_PATTERN.split(raw)
    else:
        parts = [piece for chunk in raw for piece in _KEYWORD_SPLIT_PATTERN.split(chunk)]

    keywords: list[str] = []
    for part in parts:
        cleaned = part.strip()
        if cleaned and cleaned not in keywords:
            keywords.append(cleaned)
    return keywords


def match_bulk_delete(items: Iterable[ContentItem], criteria: BulkDeleteCriteria) -> list[str]:
    """Return ids of items a bulk delete with ``criteria`` should remove.

    Only items still in the ``new`` state are candidates. A date range acts
    as a pre-filter on ``created_at``; within it, an item matches when any
    keyword occurs in its title or body, any filter entity occurs in one of
    its extracted entities, or any source string occurs in its URL. A date
    range on its own matches every candidate inside it.

    Args:
        items: Candidate items, typically the store's current content set
        criteria: Filter to apply

    Returns:
        Matching ids, in input order. Items whose status is anything other
        than ``new`` are never returned, whatever the criteria.
    """
    if criteria.is_empty:
        return []

    keywords = [k.lower() for k in criteria.keywords if k]
    entities = [e.lower() for e in criteria.entities if e]
    sources = [s.lower() for s in criteria.sources if s]
    range_only = not (keywords or entities or sources)

    matched: list[str] = []
    for item in items:
        if item.processing_status != ProcessingStatus.NEW:
            continue
        if criteria.has_date_range and not _within_range(item.created_at, criteria):
            continue
        if range_only or _matches_terms(item, keywords, entities, sources):
            matched.append(item.id)
    return matched


def _within_range(created_at: datetime | None, criteria: BulkDeleteCriteria) -> bool:
    if created_at is None:
        return False
    if criteria.start is not None and created_at < criteria.start:
        return False
    if criteria.end is not None and created_at > criteria.end:
        return False
    return True


def _matches_terms(
    item: ContentItem,
    keywords: list[str],
    entities: list[str],
    sources: list[str],
) -> bool:
    if keywords:
        text = item.text.lower()
        if any(keyword in text for keyword in keywords):
            return True

    if entities:
        item_entities = [e.lower() for e in extract_entities(item.text)]
        if any(entity in found for entity in entities for found in item_entities):
            return True

    if sources:
        url = item.source_url.lower()
        if any(source in url for source in sources):
            return True

    return False


def find_title_duplicates(items: Iterable[ContentItem], threshold: int = 92) -> list[str]:
    """Find ``new`` items that repeat an older item's URL or title.

    Items are visited oldest first (items without ``created_at`` last, in
    input order) so the earliest copy is kept and later copies are reported.

    Args:
        items: Candidate items
        threshold: Similarity threshold (0-100) for fuzzy title matching

    Returns:
        Ids of duplicate items to discard
    """
    candidates = [item for item in items if item.processing_status == ProcessingStatus.NEW]
    ordered = sorted(
        enumerate(candidates),
        key=lambda pair: (pair[1].created_at is None, pair[1].created_at or datetime.min, pair[0]),
    )

    seen_urls: set[str] = set()
    kept_titles: list[str] = []
    duplicates: list[str] = []

    for _, item in ordered:
        title_key = normalize_title(item.title)
        if item.source_url and item.source_url in seen_urls:
            duplicates.append(item.id)
            continue
        if title_key and _is_similar_title(title_key, kept_titles, threshold):
            duplicates.append(item.id)
            continue
        if item.source_url:
            seen_urls.add(item.source_url)
        if title_key:
            kept_titles.append(title_key)

    return duplicates


def _is_similar_title(title: str, titles: list[str], threshold: int) -> bool:
    """Check if a title is similar to any title in the given list.

    Uses rapidfuzz's ratio, a normalized Levenshtein similarity percentage.
    """
    for existing in titles:
        if fuzz.ratio(title, existing) >= threshold:
            return True
    return False


def plan_merge(original: ContentItem, duplicate: ContentItem, now: datetime) -> MergePlan:
    """Plan folding ``duplicate`` into ``original``.

    The merged body is the longer of the two bodies (or whichever one is
    present), and the duplicate's URL is appended to the sources when it
    differs from the original's.
    """
    if original.body and duplicate.body:
        body = original.body if len(original.body) > len(duplicate.body) else duplicate.body
    else:
        body = original.body or duplicate.body

    sources = [original.source_url]
    if duplicate.source_url != original.source_url:
        sources.append(duplicate.source_url)

    return MergePlan(
        original_id=original.id,
        duplicate_id=duplicate.id,
        body=body,
        merged_sources=tuple(sources),
        merged_at=now,
    )
