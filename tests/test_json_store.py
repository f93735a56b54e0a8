"""Tests for the JSON file content store and the items parser."""

import json
from datetime import datetime, timezone

import pytest

from feed_dedup.core.types import MergePlan, ProcessingStatus
from feed_dedup.input.json_parser import parse_items_json
from feed_dedup.store.base import StoreError
from feed_dedup.store.json_store import JsonFileStore


def _write_items(path, items):
    path.write_text(json.dumps({"items": items}), encoding="utf-8")


def test_parse_items_accepts_both_key_styles():
    """snake_case and camelCase keys both parse, with null text coerced to empty."""
    items = parse_items_json(
        {
            "items": [
                {
                    "id": "a",
                    "title": "First",
                    "body": "Body",
                    "source_url": "https://a.example",
                    "processing_status": "processed",
                    "created_at": "2026-02-03T11:44:10Z",
                },
                {"id": 7, "title": None, "sourceUrl": "https://b.example", "processingStatus": "discarded"},
            ]
        }
    )

    assert items[0].processing_status == ProcessingStatus.PROCESSED
    assert items[0].created_at == datetime(2026, 2, 3, 11, 44, 10, tzinfo=timezone.utc)
    assert items[1].id == "7"
    assert items[1].title == ""
    assert items[1].body == ""
    assert items[1].source_url == "https://b.example"
    assert items[1].processing_status == ProcessingStatus.DISCARDED


def test_parse_items_skips_missing_id_and_defaults_status():
    """Items without an id are skipped and status defaults to new."""
    items = parse_items_json({"items": [{"title": "no id"}, {"id": "x", "title": "ok"}]})

    assert [item.id for item in items] == ["x"]
    assert items[0].processing_status == ProcessingStatus.NEW


def test_parse_items_rejects_bad_input():
    """A missing items key or unknown status raises ValueError."""
    with pytest.raises(ValueError, match="missing 'items' key"):
        parse_items_json({"articles": []})
    with pytest.raises(ValueError, match="unknown processing status"):
        parse_items_json({"items": [{"id": "x", "processing_status": "archived"}]})


def test_discard_marks_items_with_reason(tmp_path):
    """Discarding sets the status and reason, keeping the file's key spelling."""
    path = tmp_path / "items.json"
    _write_items(path, [{"id": "a", "title": "A"}, {"id": "b", "title": "B", "processingStatus": "new"}])
    store = JsonFileStore(path)

    store.discard(["a", "b"], "test reason")

    raw = json.loads(path.read_text(encoding="utf-8"))["items"]
    assert raw[0]["processing_status"] == "discarded"
    assert raw[0]["discarded_reason"] == "test reason"
    assert raw[1]["processingStatus"] == "discarded"
    assert all(item.processing_status == ProcessingStatus.DISCARDED for item in store.list_items())


def test_apply_merge_updates_both_items(tmp_path):
    """Applying a merge rewrites the original and marks the duplicate."""
    path = tmp_path / "items.json"
    _write_items(path, [{"id": "o", "title": "O", "body": "x"}, {"id": "d", "title": "D", "body": "longer"}])
    store = JsonFileStore(path)
    plan = MergePlan(
        original_id="o",
        duplicate_id="d",
        body="longer",
        merged_sources=("https://a.example", "https://b.example"),
        merged_at=datetime(2026, 2, 8, tzinfo=timezone.utc),
    )

    store.apply_merge(plan)

    raw = {item["id"]: item for item in json.loads(path.read_text(encoding="utf-8"))["items"]}
    assert raw["o"]["body"] == "longer"
    assert raw["o"]["merged_sources"] == ["https://a.example", "https://b.example"]
    assert raw["o"]["merged_from"] == "d"
    assert raw["d"]["processing_status"] == "merged"


def test_apply_merge_unknown_item_raises(tmp_path):
    """Merging an id missing from the file raises StoreError."""
    path = tmp_path / "items.json"
    _write_items(path, [{"id": "o", "title": "O"}])
    plan = MergePlan("o", "missing", "", (), datetime(2026, 2, 8, tzinfo=timezone.utc))

    with pytest.raises(StoreError, match="missing"):
        JsonFileStore(path).apply_merge(plan)


def test_unreadable_files_raise_store_error(tmp_path):
    """Missing, malformed and wrongly shaped files raise StoreError."""
    with pytest.raises(StoreError):
        JsonFileStore(tmp_path / "absent.json").list_items()

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(StoreError):
        JsonFileStore(broken).list_items()

    wrong_shape = tmp_path / "wrong.json"
    wrong_shape.write_text("[]", encoding="utf-8")
    with pytest.raises(StoreError, match="missing 'items' key"):
        JsonFileStore(wrong_shape).list_items()


def test_memory_file_next_to_items(tmp_path):
    """Suppression memory round-trips through a sibling file."""
    path = tmp_path / "items.json"
    _write_items(path, [])
    store = JsonFileStore(path)

    assert store.memory_path == tmp_path / "items.memory.json"
    assert store.load_memory() == {"entries": {}}

    payload = {"entries": {"a": {"keywords": ["flooding"], "deleted_at": "2026-02-08T12:00:00+00:00"}}}
    store.save_memory(payload)
    assert store.load_memory() == payload
