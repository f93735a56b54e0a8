"""
Core domain models and duplicate-detection logic.

This package contains data types and algorithms that are independent of
any storage backend or command-line surface.
"""

from .dedup import find_title_duplicates, match_bulk_delete, parse_keyword_list, plan_merge
from .entities import extract_entities
from .fingerprint import build_fingerprint
from .index import DuplicateIndex
from .keywords import extract_keywords
from .similarity import common_reasons, jaccard, score, title_similarity
from .suppression import SuppressionMemory
from .text import normalize_text, normalize_title, tokenize
from .types import (
    BulkDeleteCriteria,
    BulkDeleteResult,
    ContentFingerprint,
    ContentItem,
    DeletionMemoryEntry,
    MergePlan,
    ProcessingStatus,
    SimilarityResult,
)

__all__ = [
    "BulkDeleteCriteria",
    "BulkDeleteResult",
    "ContentFingerprint",
    "ContentItem",
    "DeletionMemoryEntry",
    "DuplicateIndex",
    "MergePlan",
    "ProcessingStatus",
    "SimilarityResult",
    "SuppressionMemory",
    "build_fingerprint",
    "common_reasons",
    "extract_entities",
    "extract_keywords",
    "find_title_duplicates",
    "jaccard",
    "match_bulk_delete",
    "normalize_text",
    "normalize_title",
    "parse_keyword_list",
    "plan_merge",
    "score",
    "title_similarity",
    "tokenize",
]
