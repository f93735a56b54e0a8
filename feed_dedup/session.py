"""
Moderation session orchestration.

A ModerationSession owns one DuplicateIndex and one SuppressionMemory for a
single topic's working set and coordinates them with a ContentStore:
1. Refresh the index from the store
2. Answer similarity queries
3. Bulk delete by criteria and remember what was deleted
4. Screen new items against recent deletions
5. Clean up title duplicates and merge pairs
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable

from .config import AppConfig
from .core.dedup import find_title_duplicates, match_bulk_delete, plan_merge
from .core.index import DuplicateIndex
from .core.suppression import SuppressionMemory, utc_now
from .core.types import (
    BulkDeleteCriteria,
    BulkDeleteResult,
    ContentItem,
    MergePlan,
    SimilarityResult,
)
from .logging_utils import log_event
from .store.base import ContentStore, StoreError

BULK_DELETE_REASON = "Bulk delete - matched keywords, entities, sources or date range"
CLEANUP_REASON = "Bulk cleanup - duplicate URL or title"


class ModerationSession:
    """Duplicate detection and suppression for one moderation session.

    Attributes:
        store: Collaborator that supplies items and persists decisions
        config: Application configuration
        index: Fingerprint index over the live working set
        memory: Recent-deletion memory
    """

    def __init__(
        self,
        store: ContentStore,
        config: AppConfig | None = None,
        clock: Callable[[], datetime] = utc_now,
        logger: logging.Logger | None = None,
    ):
        self.store = store
        self.config = config or AppConfig()
        self._clock = clock
        self.logger = logger or logging.getLogger(__name__)
        self.index = DuplicateIndex(
            scoring=self.config.scoring,
            threshold=self.config.index.similarity_threshold,
            hash_algorithm=self.config.fingerprint.hash_algorithm,
        )
        self.memory = SuppressionMemory(
            window=timedelta(hours=self.config.suppression.window_hours),
            overlap_threshold=self.config.suppression.overlap_threshold,
            clock=clock,
        )
        if self.config.suppression.sweeper_enabled:
            self.memory.start_sweeper(self.config.suppression.sweep_interval_seconds)

    def refresh(self) -> list[ContentItem]:
        """Reload items from the store and rebuild the index."""
        items = self.store.list_items()
        indexed = self.index.rebuild(items)
        log_event(
            self.logger,
            "Index rebuilt",
            event="index_rebuilt",
            items=len(items),
            indexed=indexed,
        )
        return items

    def similar(self, item_id: str) -> list[SimilarityResult]:
        return self.index.find_similar(item_id)

    def similar_map(self) -> dict[str, list[SimilarityResult]]:
        return self.index.similar_map()

    def preview_bulk_delete(self, criteria: BulkDeleteCriteria) -> list[str]:
        """Ids a bulk delete with ``criteria`` would remove, without removing them."""
        return match_bulk_delete(self.store.list_items(), criteria)

    def bulk_delete(self, criteria: BulkDeleteCriteria) -> BulkDeleteResult:
        """Discard every matching item and remember its keyword signature.

        Raises:
            StoreError: If the store fails to read or discard
        """
        matched = self.preview_bulk_delete(criteria)
        result = BulkDeleteResult(keywords=list(criteria.keywords))
        if not matched:
            log_event(self.logger, "Bulk delete matched nothing", event="bulk_delete", deleted=0)
            return result

        self.store.discard(matched, BULK_DELETE_REASON)
        self.memory.record_deletion(matched, criteria.keywords)
        result.deleted_ids = matched

        log_event(
            self.logger,
            f"Deleted {len(matched)} similar items",
            event="bulk_delete",
            deleted=len(matched),
            keywords=list(criteria.keywords),
            entities=list(criteria.entities),
        )
        self.refresh()
        return result

    def is_likely_suppressed(self, item: ContentItem) -> bool:
        return self.memory.is_likely_suppressed(item)

    def screen(self, items: Iterable[ContentItem]) -> list[ContentItem]:
        """Return the items that do not resemble a recent deletion."""
        visible: list[ContentItem] = []
        for item in items:
            if self.memory.is_likely_suppressed(item):
                log_event(
                    self.logger,
                    f"Suppressed item {item.id}",
                    event="suppressed",
                    item_id=item.id,
                )
                continue
            visible.append(item)
        return visible

    def find_cleanup_candidates(self) -> list[str]:
        return find_title_duplicates(
            self.store.list_items(), self.config.cleanup.title_similarity_threshold
        )

    def cleanup_duplicates(self) -> list[str]:
        """Discard repeated URLs and near-identical titles, keeping the oldest."""
        duplicates = self.find_cleanup_candidates()
        if duplicates:
            self.store.discard(duplicates, CLEANUP_REASON)
            self.refresh()
        log_event(
            self.logger,
            f"Cleaned up {len(duplicates)} duplicate items",
            event="cleanup",
            discarded=len(duplicates),
        )
        return duplicates

    def merge(self, original_id: str, duplicate_id: str) -> MergePlan:
        """Fold ``duplicate_id`` into ``original_id`` through the store.

        Raises:
            StoreError: If either item is unknown to the store
        """
        items = {item.id: item for item in self.store.list_items()}
        missing = [i for i in (original_id, duplicate_id) if i not in items]
        if missing:
            raise StoreError(f"Items not found: {', '.join(missing)}")

        plan = plan_merge(items[original_id], items[duplicate_id], self._clock())
        self.store.apply_merge(plan)
        log_event(
            self.logger,
            f"Merged {duplicate_id} into {original_id}",
            event="merge",
            original_id=original_id,
            duplicate_id=duplicate_id,
            merged_sources=list(plan.merged_sources),
        )
        self.refresh()
        return plan

    def close(self) -> None:
        self.memory.stop_sweeper()

    def __enter__(self) -> "ModerationSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
