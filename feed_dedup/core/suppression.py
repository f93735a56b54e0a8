"""
Time-windowed memory of recently bulk-deleted content.

Each bulk delete records the keyword signature of the batch against every
deleted id. Newly seen items whose keywords overlap a live signature are
flagged as likely resurfacing of removed content. Entries expire after the
retention window; expired entries are ignored by lookups immediately and
physically removed by ``sweep``, which can run on a background thread.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Iterable, Mapping

from .keywords import extract_keywords
from .similarity import lowered_overlap
from .types import ContentItem, DeletionMemoryEntry

logger = logging.getLogger(__name__)

DEFAULT_WINDOW = timedelta(hours=24)
DEFAULT_SWEEP_INTERVAL = 3600.0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SuppressionMemory:
    """Recent-deletion memory keyed by deleted item id.

    Writers (record_deletion, sweep) build a new mapping and swap it in under
    a lock; readers take the current mapping under the same lock and scan it
    afterwards, so they never see a partially mutated structure.

    Attributes:
        window: Retention window for entries
        overlap_threshold: Keyword Jaccard above which an item is suppressed
    """

    def __init__(
        self,
        window: timedelta = DEFAULT_WINDOW,
        overlap_threshold: float = 0.5,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.window = window
        self.overlap_threshold = overlap_threshold
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Mapping[str, DeletionMemoryEntry] = {}
        self._stop_event: threading.Event | None = None
        self._sweeper: threading.Thread | None = None

    def record_deletion(self, item_ids: Iterable[str], keywords: Iterable[str]) -> int:
        """Store one entry per id, sharing the keyword set and timestamp.

        Prior entries for the same ids are overwritten.

        Returns:
            Number of entries written
        """
        entry = DeletionMemoryEntry(
            keywords=frozenset(k.strip().lower() for k in keywords if k and k.strip()),
            deleted_at=self._clock(),
        )
        ids = list(item_ids)
        with self._lock:
            updated = dict(self._entries)
            for item_id in ids:
                updated[item_id] = entry
            self._entries = updated
        return len(ids)

    def is_likely_suppressed(self, item: ContentItem) -> bool:
        """Whether ``item`` resembles something deleted within the window."""
        item_keywords = extract_keywords(item.text.lower())

        now = self._clock()
        for deleted_id, entry in self._snapshot().items():
            if now - entry.deleted_at > self.window:
                continue
            if lowered_overlap(item_keywords, entry.keywords) > self.overlap_threshold:
                logger.debug(
                    "Item matches recent deletion",
                    extra={"event": "suppression_match", "item_id": item.id, "deleted_id": deleted_id},
                )
                return True
        return False

    def sweep(self) -> int:
        """Remove entries older than the retention window.

        Returns:
            Number of entries removed
        """
        now = self._clock()
        with self._lock:
            kept = {
                item_id: entry
                for item_id, entry in self._entries.items()
                if now - entry.deleted_at <= self.window
            }
            removed = len(self._entries) - len(kept)
            self._entries = kept
        if removed:
            logger.info(
                "Swept expired deletion entries",
                extra={"event": "memory_swept", "removed": removed, "remaining": len(kept)},
            )
        return removed

    def start_sweeper(self, interval: float = DEFAULT_SWEEP_INTERVAL) -> None:
        """Run ``sweep`` every ``interval`` seconds on a daemon thread."""
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        stop_event = threading.Event()

        def _run() -> None:
            while not stop_event.wait(interval):
                self.sweep()

        self._stop_event = stop_event
        self._sweeper = threading.Thread(target=_run, name="suppression-sweeper", daemon=True)
        self._sweeper.start()

    def stop_sweeper(self, timeout: float | None = 5.0) -> None:
        """Stop the background sweeper if it is running."""
        if self._stop_event is not None:
            self._stop_event.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout)
        self._stop_event = None
        self._sweeper = None

    @property
    def sweeper_running(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def __enter__(self) -> "SuppressionMemory":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop_sweeper()

    def _snapshot(self) -> Mapping[str, DeletionMemoryEntry]:
        with self._lock:
            return self._entries

    def entries(self) -> dict[str, DeletionMemoryEntry]:
        return dict(self._snapshot())

    def __len__(self) -> int:
        return len(self._snapshot())

    def to_dict(self) -> dict[str, Any]:
        """Serialize entries for an external store."""
        return {
            "entries": {
                item_id: {
                    "keywords": sorted(entry.keywords),
                    "deleted_at": entry.deleted_at.isoformat(),
                }
                for item_id, entry in self._snapshot().items()
            }
        }

    def load_dict(self, data: Mapping[str, Any]) -> None:
        """Replace entries with ones previously produced by ``to_dict``."""
        loaded: dict[str, DeletionMemoryEntry] = {}
        for item_id, raw in (data.get("entries") or {}).items():
            deleted_at = datetime.fromisoformat(raw["deleted_at"])
            if deleted_at.tzinfo is None:
                deleted_at = deleted_at.replace(tzinfo=timezone.utc)
            loaded[item_id] = DeletionMemoryEntry(
                keywords=frozenset(raw.get("keywords", [])),
                deleted_at=deleted_at,
            )
        with self._lock:
            self._entries = loaded

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, Any],
        window: timedelta = DEFAULT_WINDOW,
        overlap_threshold: float = 0.5,
        clock: Callable[[], datetime] = utc_now,
    ) -> "SuppressionMemory":
        memory = cls(window=window, overlap_threshold=overlap_threshold, clock=clock)
        memory.load_dict(data)
        return memory
