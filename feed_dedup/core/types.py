"""
Core data types for near-duplicate detection.

This module defines the fundamental data structures used throughout the package:
- ContentItem: Raw content record supplied by the ingestion pipeline
- ContentFingerprint: Derived, immutable comparison form of an item
- SimilarityResult: Scored candidate returned by the duplicate index
- DeletionMemoryEntry: Keyword signature of a recently bulk-deleted item
- BulkDeleteCriteria / BulkDeleteResult: Bulk delete request and outcome
- MergePlan: Instructions for folding a duplicate into its original
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


def as_utc(value: datetime | None) -> datetime | None:
    """Attach UTC to a naive datetime; aware values and None pass through."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class ProcessingStatus(str, Enum):
    """Lifecycle status assigned to an item by the ingestion pipeline."""

    NEW = "new"
    PROCESSED = "processed"
    DISCARDED = "discarded"
    MERGED = "merged"

    @property
    def is_live(self) -> bool:
        return self not in (ProcessingStatus.DISCARDED, ProcessingStatus.MERGED)


@dataclass(frozen=True)
class ContentItem:
    """A content record as handed over by the ingestion pipeline.

    Attributes:
        id: Opaque identifier
        title: Headline text; None is treated as empty
        body: Article text; None is treated as empty
        source_url: URL the item was fetched from
        processing_status: Pipeline status
        created_at: Optional ingestion timestamp (naive values are taken as UTC)
    """

    id: str
    title: str = ""
    body: str = ""
    source_url: str = ""
    processing_status: ProcessingStatus = ProcessingStatus.NEW
    created_at: datetime | None = None

    def __post_init__(self) -> None:
        # Frozen dataclass, so coerce through object.__setattr__
        if self.title is None:
            object.__setattr__(self, "title", "")
        if self.body is None:
            object.__setattr__(self, "body", "")
        if self.source_url is None:
            object.__setattr__(self, "source_url", "")
        if not isinstance(self.processing_status, ProcessingStatus):
            object.__setattr__(self, "processing_status", ProcessingStatus(self.processing_status))
        object.__setattr__(self, "created_at", as_utc(self.created_at))

    @property
    def text(self) -> str:
        """Title and body joined by a space, case preserved."""
        return f"{self.title} {self.body}"


@dataclass(frozen=True)
class ContentFingerprint:
    """Derived comparison form of a ContentItem.

    Keywords and entities are derived deterministically from title and body,
    so building a fingerprint twice from the same text yields equal objects.
    """

    item_id: str
    title: str
    body: str
    source_url: str
    keywords: tuple[str, ...]
    entities: frozenset[str]
    fingerprint_hash: str


@dataclass(frozen=True)
class SimilarityResult:
    """A candidate similar to some target item, with its score and reasons."""

    candidate_id: str
    score: float
    reasons: tuple[str, ...]
    source_url: str
    title: str

    @property
    def label(self) -> str:
        if self.score > 0.8:
            return "Very Similar"
        if self.score > 0.6:
            return "Similar"
        return "Somewhat Similar"


@dataclass(frozen=True)
class DeletionMemoryEntry:
    """Keyword signature of one bulk-deleted item."""

    keywords: frozenset[str]
    deleted_at: datetime


@dataclass
class BulkDeleteCriteria:
    """Filter for a bulk delete request.

    Attributes:
        keywords: Case-insensitive substrings matched against title and body
        entities: Case-insensitive substrings matched against extracted entities
        sources: Substrings matched against the source URL
        start: Inclusive lower bound on created_at; naive values are taken as UTC
        end: Inclusive upper bound on created_at; naive values are taken as UTC
    """

    keywords: list[str] = field(default_factory=list)
    entities: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    start: datetime | None = None
    end: datetime | None = None

    def __post_init__(self) -> None:
        self.start = as_utc(self.start)
        self.end = as_utc(self.end)

    @property
    def has_date_range(self) -> bool:
        return self.start is not None or self.end is not None

    @property
    def is_empty(self) -> bool:
        return not (self.keywords or self.entities or self.sources or self.has_date_range)


@dataclass
class BulkDeleteResult:
    """Outcome of a bulk delete: the ids removed and the recorded signature."""

    deleted_ids: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.deleted_ids)


@dataclass(frozen=True)
class MergePlan:
    """Instructions for folding a duplicate item into its original.

    Attributes:
        original_id: Item that survives the merge
        duplicate_id: Item marked as merged
        body: Body the original should carry afterwards
        merged_sources: Source URLs of both items, original first
        merged_at: Time the plan was made
    """

    original_id: str
    duplicate_id: str
    body: str
    merged_sources: tuple[str, ...]
    merged_at: datetime
