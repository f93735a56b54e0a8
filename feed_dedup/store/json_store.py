"""
JSON file content store.

Keeps the item export in a single JSON file and rewrites it on every
change. Suppression memory is kept in a sibling file so that deletion
signatures survive between command-line runs.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..core.types import ContentItem, MergePlan, ProcessingStatus
from ..input.json_parser import parse_items_json
from .base import ContentStore, StoreError

logger = logging.getLogger(__name__)


class JsonFileStore(ContentStore):
    """Content store backed by a ``{"items": [...]}`` JSON file.

    Attributes:
        path: Path to the items file
        memory_path: Path to the suppression memory file
    """

    def __init__(self, path: Path, memory_path: Path | None = None):
        self.path = Path(path)
        self.memory_path = memory_path or self.path.with_name(f"{self.path.stem}.memory.json")

    def list_items(self) -> list[ContentItem]:
        return parse_items_json(self._read())

    def discard(self, item_ids: list[str], reason: str) -> None:
        if not item_ids:
            return
        wanted = set(item_ids)
        data = self._read()
        discarded_at = datetime.now(timezone.utc).isoformat()
        for raw in data["items"]:
            if str(raw.get("id")) in wanted:
                _set_status(raw, ProcessingStatus.DISCARDED)
                raw["discarded_reason"] = reason
                raw["discarded_at"] = discarded_at
        self._write(data)
        logger.debug("Discarded %d items in %s", len(wanted), self.path)

    def apply_merge(self, plan: MergePlan) -> None:
        data = self._read()
        found = set()
        for raw in data["items"]:
            item_id = str(raw.get("id"))
            if item_id == plan.original_id:
                raw["body"] = plan.body
                raw["merged_sources"] = list(plan.merged_sources)
                raw["merged_from"] = plan.duplicate_id
                raw["merged_at"] = plan.merged_at.isoformat()
                found.add(item_id)
            elif item_id == plan.duplicate_id:
                _set_status(raw, ProcessingStatus.MERGED)
                found.add(item_id)
        missing = {plan.original_id, plan.duplicate_id} - found
        if missing:
            raise StoreError(f"Items not found: {', '.join(sorted(missing))}")
        self._write(data)

    def load_memory(self) -> dict[str, Any]:
        """Read persisted suppression memory, or an empty payload."""
        if not self.memory_path.exists():
            return {"entries": {}}
        return _read_json(self.memory_path)

    def save_memory(self, payload: dict[str, Any]) -> None:
        _write_json(self.memory_path, payload)

    def _read(self) -> dict[str, Any]:
        data = _read_json(self.path)
        if not isinstance(data, dict) or "items" not in data:
            raise StoreError(f"Invalid items file {self.path}: missing 'items' key")
        return data

    def _write(self, data: dict[str, Any]) -> None:
        _write_json(self.path, data)


def _set_status(raw: dict[str, Any], status: ProcessingStatus) -> None:
    # Keep whichever key spelling the file already uses
    key = "processingStatus" if "processingStatus" in raw else "processing_status"
    raw[key] = status.value


def _read_json(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise StoreError(f"Failed to read {path}: {exc}") from exc


def _write_json(path: Path, payload: Any) -> None:
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_suffix(path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        tmp_path.replace(path)
    except OSError as exc:
        raise StoreError(f"Failed to write {path}: {exc}") from exc
