"""JSON parser for content item exports.

This module parses content exports into structured ContentItem objects.
The format uses a top-level ``items`` array; each item carries id, title,
body, source URL, processing status and an optional creation timestamp.
Both snake_case and camelCase keys are accepted.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any

from ..core.types import ContentItem, ProcessingStatus, as_utc

logger = logging.getLogger(__name__)


def parse_items_json(data: dict[str, Any]) -> list[ContentItem]:
    """Parse a content export into a list of ContentItem objects.

    The export structure:
        {
            "items": [
                {
                    "id": "a1",
                    "title": "City Council Approves New Park",
                    "body": "The Riverside City Council voted...",
                    "source_url": "https://example.com/park",
                    "processing_status": "new",
                    "created_at": "2026-02-03T11:44:10Z"
                }
            ]
        }

    Args:
        data: The parsed JSON content as a dictionary

    Returns:
        A list of ContentItem objects. Items without an id are skipped
        with a warning; missing title or body become empty strings.

    Raises:
        ValueError: If the JSON is missing the 'items' key or an item
                    carries an unknown processing status
    """
    if "items" not in data:
        raise ValueError("Invalid JSON format: missing 'items' key")

    items: list[ContentItem] = []

    for raw in data["items"]:
        item_id = raw.get("id")
        if item_id is None or item_id == "":
            logger.warning("Skipping item without id: %s", raw.get("title", "untitled"))
            continue

        status = _first(raw, "processing_status", "processingStatus") or "new"
        try:
            processing_status = ProcessingStatus(status)
        except ValueError as exc:
            raise ValueError(f"Item {item_id}: unknown processing status '{status}'") from exc

        created_at = _first(raw, "created_at", "createdAt")

        items.append(
            ContentItem(
                id=str(item_id),
                title=raw.get("title") or "",
                body=raw.get("body") or "",
                source_url=_first(raw, "source_url", "sourceUrl") or "",
                processing_status=processing_status,
                created_at=parse_iso8601(created_at) if created_at else None,
            )
        )

    return items


def parse_iso8601(value: str) -> datetime:
    """Parse an ISO 8601 timestamp string into a timezone-aware datetime."""
    raw = value.strip()
    if raw.endswith("Z"):
        raw = f"{raw[:-1]}+00:00"
    return as_utc(datetime.fromisoformat(raw))


def _first(raw: dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None
