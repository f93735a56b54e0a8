"""Tests for configuration loading and logging setup."""

import json
import logging

import pytest

from feed_dedup.config import AppConfig, LoggingConfig, load_config
from feed_dedup.logging_utils import log_event, setup_logging


def test_load_config_without_path_returns_defaults():
    """No config path yields the default configuration."""
    cfg = load_config(None)

    assert cfg == AppConfig()
    assert cfg.index.similarity_threshold == 0.7
    assert cfg.suppression.window_hours == 24
    assert cfg.fingerprint.hash_algorithm == "fnv1a"


def test_load_config_merges_partial_yaml(tmp_path):
    """Partial YAML overrides only the keys it names; unknown keys are ignored."""
    path = tmp_path / "config.yaml"
    path.write_text(
        "index:\n"
        "  similarity_threshold: 0.8\n"
        "suppression:\n"
        "  window_hours: 12\n"
        "  unknown_key: ignored\n"
        "unknown_section:\n"
        "  foo: bar\n",
        encoding="utf-8",
    )

    cfg = load_config(path)

    assert cfg.index.similarity_threshold == 0.8
    assert cfg.suppression.window_hours == 12
    assert cfg.suppression.overlap_threshold == 0.5
    assert cfg.scoring.title_weight == 0.4


def test_load_config_empty_file(tmp_path):
    """An empty YAML file yields the defaults."""
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == AppConfig()


def test_load_config_missing_file(tmp_path):
    """A config path that does not exist raises FileNotFoundError."""
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


@pytest.mark.parametrize(
    "yaml_text, message",
    [
        ("scoring:\n  title_gate: 1.5\n", "scoring.title_gate"),
        ("suppression:\n  window_hours: 0\n", "window_hours"),
        ("fingerprint:\n  hash_algorithm: md5\n", "Unsupported hash algorithm"),
        ("cleanup:\n  title_similarity_threshold: 150\n", "title_similarity_threshold"),
    ],
)
def test_load_config_rejects_invalid_values(tmp_path, yaml_text, message):
    """Out-of-range values are rejected with a message naming the field."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml_text, encoding="utf-8")

    with pytest.raises(ValueError, match=message):
        load_config(path)


def test_setup_logging_writes_jsonl(tmp_path):
    """JSONL file logging writes structured fields as top-level keys."""
    cfg = LoggingConfig(console=False, file=True, format="jsonl", filename="run.jsonl")
    logger = setup_logging(cfg, tmp_path)

    assert logger.name == "feed_dedup"
    assert logger.propagate is False
    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.FileHandler)

    log_event(logger, "Deleted 2 similar items", event="bulk_delete", deleted=2)
    for handler in logger.handlers:
        handler.flush()
        handler.close()

    lines = (tmp_path / "run.jsonl").read_text(encoding="utf-8").strip().split("\n")
    entry = json.loads(lines[0])
    assert entry["message"] == "Deleted 2 similar items"
    assert entry["event"] == "bulk_delete"
    assert entry["deleted"] == 2
    assert entry["level"] == "INFO"
    assert "timestamp" in entry


def test_setup_logging_file_defaults_to_working_directory(tmp_path, monkeypatch):
    """File logging without a directory writes into the working directory."""
    monkeypatch.chdir(tmp_path)
    logger = setup_logging(LoggingConfig(console=False, file=True, filename="cwd.jsonl"))

    assert len(logger.handlers) == 1
    assert isinstance(logger.handlers[0], logging.FileHandler)

    log_event(logger, "Index rebuilt", event="index_rebuilt", indexed=3)
    for handler in logger.handlers:
        handler.flush()
        handler.close()

    entry = json.loads((tmp_path / "cwd.jsonl").read_text(encoding="utf-8").splitlines()[0])
    assert entry["event"] == "index_rebuilt"
    assert entry["indexed"] == 3


def test_setup_logging_console_only():
    """Console-only logging installs a single handler at the configured level."""
    logger = setup_logging(LoggingConfig(level="debug", console=True, file=False))

    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 1


def test_log_event_without_logger_is_noop():
    """log_event accepts a missing logger."""
    log_event(None, "ignored", event="x")
