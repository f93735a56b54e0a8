"""
Feed Dedup - near-duplicate detection and suppression for content items.

This package fingerprints incoming content items, scores pairwise
similarity, drives bulk deletion, and suppresses items that resemble
recently deleted content.

Main entry point is the CLI via the `feed-dedup` command.

Example:
    $ feed-dedup similar a1 -i items.json
"""

__all__ = [
    "__version__",
    "AppConfig",
    "ContentItem",
    "DuplicateIndex",
    "ModerationSession",
    "SuppressionMemory",
    "load_config",
    "parse_items_json",
]
__version__ = "0.1.0"

from .config import AppConfig, load_config
from .core.index import DuplicateIndex
from .core.suppression import SuppressionMemory
from .core.types import ContentItem
from .input.json_parser import parse_items_json
from .session import ModerationSession
