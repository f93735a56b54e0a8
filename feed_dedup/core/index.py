"""
In-memory duplicate index over the live working set.

The index maps item ids to fingerprints and is rebuilt wholesale whenever the
caller supplies a new item set. There is no incremental diffing: a rebuild
fingerprints everything into a fresh mapping and swaps it in under a lock, so
readers see either the old or the new index, never a mix.

Lookups are a linear scan (O(n) per target, O(n^2) for ``similar_map``).
That is fine for one topic's working set (tens to low hundreds of items);
larger sets would need a bucketed index keyed by fingerprint prefix.
"""

from __future__ import annotations

import logging
import threading
from typing import Iterable, Mapping

from ..config import ScoringConfig
from .fingerprint import build_fingerprint
from .similarity import score
from .types import ContentFingerprint, ContentItem, SimilarityResult

logger = logging.getLogger(__name__)


class DuplicateIndex:
    """Fingerprint index answering "what is similar to item X".

    Attributes:
        threshold: Candidates must score strictly above this value
        scoring: Gates and weights passed to the scorer
        hash_algorithm: Fingerprint hash used when building entries
    """

    def __init__(
        self,
        scoring: ScoringConfig | None = None,
        threshold: float = 0.7,
        hash_algorithm: str = "fnv1a",
    ):
        self.scoring = scoring or ScoringConfig()
        self.threshold = threshold
        self.hash_algorithm = hash_algorithm
        self._lock = threading.Lock()
        self._fingerprints: Mapping[str, ContentFingerprint] = {}

    def rebuild(self, items: Iterable[ContentItem]) -> int:
        """Replace the index with fingerprints of all live items.

        Discarded and merged items are dropped. The new mapping is built
        outside the lock and swapped in as a whole.

        Returns:
            Number of fingerprints in the new index
        """
        fresh: dict[str, ContentFingerprint] = {}
        skipped = 0
        for item in items:
            if not item.processing_status.is_live:
                skipped += 1
                continue
            fresh[item.id] = build_fingerprint(item, self.hash_algorithm)

        with self._lock:
            self._fingerprints = fresh

        logger.debug(
            "Index rebuilt",
            extra={"event": "index_rebuilt", "indexed": len(fresh), "skipped": skipped},
        )
        return len(fresh)

    def _snapshot(self) -> Mapping[str, ContentFingerprint]:
        with self._lock:
            return self._fingerprints

    def find_similar(self, item_id: str) -> list[SimilarityResult]:
        """Return indexed items similar to ``item_id``, best first.

        Unknown ids yield an empty list.
        """
        snapshot = self._snapshot()
        target = snapshot.get(item_id)
        if target is None:
            return []
        return self._scan(target, snapshot)

    def find_similar_to(self, item: ContentItem) -> list[SimilarityResult]:
        """Like find_similar, for an item that may not be indexed yet."""
        snapshot = self._snapshot()
        return self._scan(build_fingerprint(item, self.hash_algorithm), snapshot)

    def similar_map(self) -> dict[str, list[SimilarityResult]]:
        """Similar candidates for every indexed item that has any."""
        snapshot = self._snapshot()
        similar: dict[str, list[SimilarityResult]] = {}
        for item_id, fingerprint in snapshot.items():
            results = self._scan(fingerprint, snapshot)
            if results:
                similar[item_id] = results
        return similar

    def _scan(
        self,
        target: ContentFingerprint,
        snapshot: Mapping[str, ContentFingerprint],
    ) -> list[SimilarityResult]:
        results: list[SimilarityResult] = []
        for candidate_id, candidate in snapshot.items():
            if candidate_id == target.item_id:
                continue
            result = score(target, candidate, self.scoring)
            if result.score > self.threshold:
                results.append(result)
        results.sort(key=lambda r: r.score, reverse=True)
        return results

    def get(self, item_id: str) -> ContentFingerprint | None:
        return self._snapshot().get(item_id)

    def ids(self) -> list[str]:
        return list(self._snapshot())

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._snapshot()

    def __len__(self) -> int:
        return len(self._snapshot())
