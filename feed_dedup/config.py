"""
Configuration management using YAML files and dataclasses.

This module defines all configuration dataclasses and provides loading
from YAML files with defaults. Configuration sections:
- ScoringConfig: Similarity gates and weights
- IndexConfig: Duplicate index settings
- FingerprintConfig: Fingerprint hashing settings
- SuppressionConfig: Deletion memory window and sweeper settings
- CleanupConfig: Title-duplicate cleanup settings
- LoggingConfig: Logging behavior
- AppConfig: Root configuration container
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

HASH_ALGORITHMS = ("fnv1a", "rolling31")


@dataclass
class ScoringConfig:
    """Gates and weights for the composite similarity score.

    Each signal only contributes when its raw value is strictly above its gate.
    With the default weights the maximum score is exactly 1.0.

    Attributes:
        title_gate: Minimum title token Jaccard to count titles as similar
        title_weight: Weight applied to the title Jaccard
        keyword_gate: Minimum keyword Jaccard to count keywords as similar
        keyword_weight: Weight applied to the keyword Jaccard
        entity_gate: Minimum entity Jaccard to count entities as similar
        entity_weight: Weight applied to the entity Jaccard
        fingerprint_bonus: Flat bonus when fingerprint hashes are equal
    """

    title_gate: float = 0.7
    title_weight: float = 0.4
    keyword_gate: float = 0.3
    keyword_weight: float = 0.3
    entity_gate: float = 0.2
    entity_weight: float = 0.2
    fingerprint_bonus: float = 0.1


@dataclass
class IndexConfig:
    """Configuration for the duplicate index.

    Attributes:
        similarity_threshold: Candidates must score strictly above this
    """

    similarity_threshold: float = 0.7


@dataclass
class FingerprintConfig:
    """Configuration for fingerprint hashing.

    Attributes:
        hash_algorithm: "fnv1a" (default) or "rolling31" for the legacy
                        multiply-by-31 hash
    """

    hash_algorithm: str = "fnv1a"


@dataclass
class SuppressionConfig:
    """Configuration for the recent-deletion memory.

    Attributes:
        window_hours: Retention window for deletion entries
        overlap_threshold: Keyword Jaccard above which an item is suppressed
        sweep_interval_seconds: Interval of the background sweeper
        sweeper_enabled: Whether sessions start the background sweeper
    """

    window_hours: float = 24.0
    overlap_threshold: float = 0.5
    sweep_interval_seconds: float = 3600.0
    sweeper_enabled: bool = False


@dataclass
class CleanupConfig:
    """Configuration for bulk title-duplicate cleanup.

    Attributes:
        title_similarity_threshold: Fuzzy match threshold (0-100) for titles
    """

    title_similarity_threshold: int = 92


@dataclass
class LoggingConfig:
    """Configuration for logging behavior.

    Attributes:
        level: Logging level ("DEBUG", "INFO", "WARNING", "ERROR")
        console: Whether to log to console
        file: Whether to log to file
        format: Log file format ("jsonl" or "plain")
        filename: Name of the log file
        directory: Directory for the log file (defaults to the working directory)
    """

    level: str = "INFO"
    console: bool = True
    file: bool = False
    format: str = "jsonl"
    filename: str = "feed_dedup.jsonl"
    directory: str | None = None


@dataclass
class AppConfig:
    """Root configuration container aggregating all config sections."""

    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    index: IndexConfig = field(default_factory=IndexConfig)
    fingerprint: FingerprintConfig = field(default_factory=FingerprintConfig)
    suppression: SuppressionConfig = field(default_factory=SuppressionConfig)
    cleanup: CleanupConfig = field(default_factory=CleanupConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


_SECTIONS: dict[str, type] = {
    "scoring": ScoringConfig,
    "index": IndexConfig,
    "fingerprint": FingerprintConfig,
    "suppression": SuppressionConfig,
    "cleanup": CleanupConfig,
    "logging": LoggingConfig,
}


def load_config(path: str | Path | None) -> AppConfig:
    """Load configuration from a YAML file with defaults.

    Raises:
        FileNotFoundError: If the config file does not exist.
        ValueError: If a value is out of range.
    """
    if not path:
        return AppConfig()

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    cfg = _merge_config(AppConfig(), raw)
    validate_config(cfg)
    return cfg


def validate_config(cfg: AppConfig) -> None:
    """Reject configuration values the scoring code cannot honor."""
    gates = {
        "scoring.title_gate": cfg.scoring.title_gate,
        "scoring.keyword_gate": cfg.scoring.keyword_gate,
        "scoring.entity_gate": cfg.scoring.entity_gate,
        "suppression.overlap_threshold": cfg.suppression.overlap_threshold,
    }
    for name, value in gates.items():
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"{name} must be between 0 and 1, got {value}")
    if cfg.suppression.window_hours <= 0:
        raise ValueError("suppression.window_hours must be positive")
    if cfg.suppression.sweep_interval_seconds <= 0:
        raise ValueError("suppression.sweep_interval_seconds must be positive")
    if not 0 <= cfg.cleanup.title_similarity_threshold <= 100:
        raise ValueError("cleanup.title_similarity_threshold must be between 0 and 100")
    if cfg.fingerprint.hash_algorithm not in HASH_ALGORITHMS:
        supported = ", ".join(HASH_ALGORITHMS)
        raise ValueError(
            f"Unsupported hash algorithm: {cfg.fingerprint.hash_algorithm}. Supported: {supported}"
        )


def _merge_config(base: AppConfig, raw: dict[str, Any]) -> AppConfig:
    """Merge raw YAML config into base AppConfig."""
    data = _asdict(base)
    for key, value in raw.items():
        if key not in data:
            continue
        if isinstance(value, dict):
            known = {k: v for k, v in value.items() if k in data[key]}
            data[key].update(known)
    return _fromdict(data)


def _asdict(cfg: AppConfig) -> dict[str, Any]:
    """Convert AppConfig to nested dictionary."""
    return {name: dict(vars(getattr(cfg, name))) for name in _SECTIONS}


def _fromdict(data: dict[str, Any]) -> AppConfig:
    """Reconstruct AppConfig from nested dictionary."""
    return AppConfig(**{name: cls(**data[name]) for name, cls in _SECTIONS.items()})
