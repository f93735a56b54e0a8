"""Text normalization helpers shared by the extractors and fingerprinting."""

from __future__ import annotations

import re

PUNCTUATION_PATTERN = re.compile(r"[^\w\s]")
SPACES_PATTERN = re.compile(r"\s+")


def normalize_text(text: str | None) -> str:
    """Lowercase text and replace punctuation with whitespace."""
    if not text:
        return ""
    return PUNCTUATION_PATTERN.sub(" ", text.lower())


def tokenize(text: str | None) -> list[str]:
    """Split normalized text into whitespace-separated tokens."""
    return normalize_text(text).split()


def strip_punctuation(text: str | None) -> str:
    """Remove punctuation outright and lowercase, keeping spacing as-is."""
    if not text:
        return ""
    return PUNCTUATION_PATTERN.sub("", text).lower()


def normalize_title(title: str | None) -> str:
    """Normalize titles to deterministic comparison keys."""
    collapsed = SPACES_PATTERN.sub(" ", normalize_text(title))
    return collapsed.strip()
