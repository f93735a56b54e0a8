"""
Abstract base class for content stores.

The duplicate-detection core never persists anything itself. A content
store supplies the current item set and carries out the delete and merge
decisions the core makes. New backends should inherit from ContentStore.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..core.types import ContentItem, MergePlan


class StoreError(RuntimeError):
    """Raised when a store cannot read or write its backing data."""


class ContentStore(ABC):
    """Abstract boundary to the system that owns content items."""

    @abstractmethod
    def list_items(self) -> list[ContentItem]:
        """Return every item currently known to the store."""
        raise NotImplementedError

    @abstractmethod
    def discard(self, item_ids: list[str], reason: str) -> None:
        """Mark the given items as discarded.

        Args:
            item_ids: Ids to discard
            reason: Human-readable reason stored alongside the status change
        """
        raise NotImplementedError

    @abstractmethod
    def apply_merge(self, plan: MergePlan) -> None:
        """Update the original item and mark the duplicate as merged."""
        raise NotImplementedError
