"""
Content fingerprinting.

A fingerprint bundles the keywords and entities of an item with a compact
32-bit hash over its normalized title and sorted term sets. The hash is a
cheap equality pre-check; it is never treated as proof of duplication.
"""

from __future__ import annotations

from typing import Callable

from .entities import extract_entities
from .keywords import extract_keywords
from .text import strip_punctuation
from .types import ContentFingerprint, ContentItem

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

FNV_OFFSET_BASIS = 0x811C9DC5
FNV_PRIME = 0x01000193


def to_base36(value: int) -> str:
    """Encode an integer in base 36, with a leading '-' for negatives."""
    if value == 0:
        return "0"
    sign = "-" if value < 0 else ""
    value = abs(value)
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return sign + "".join(reversed(digits))


def fnv1a_32(text: str) -> int:
    """32-bit FNV-1a over the UTF-8 bytes of ``text``."""
    value = FNV_OFFSET_BASIS
    for byte in text.encode("utf-8"):
        value ^= byte
        value = (value * FNV_PRIME) & 0xFFFFFFFF
    return value


def rolling31_32(text: str) -> int:
    """Legacy ``hash * 31 + code_unit`` hash, wrapped to signed 32 bits.

    Iterates UTF-16 code units so non-BMP characters hash like they did in
    the browser-side implementation.
    """
    value = 0
    encoded = text.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        value = (value * 31 + code_unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return value


_HASHERS: dict[str, Callable[[str], int]] = {
    "fnv1a": fnv1a_32,
    "rolling31": rolling31_32,
}


def fingerprint_hash(
    title: str,
    keywords: list[str] | tuple[str, ...],
    entities: list[str] | frozenset[str],
    algorithm: str = "fnv1a",
) -> str:
    """Hash the normalized title plus sorted keywords and entities.

    Sorting makes the hash independent of extraction order.
    """
    hasher = _HASHERS.get(algorithm)
    if hasher is None:
        supported = ", ".join(sorted(_HASHERS))
        raise ValueError(f"Unsupported hash algorithm: {algorithm}. Supported: {supported}")
    combined = "|".join([strip_punctuation(title), *sorted(keywords), *sorted(entities)])
    return to_base36(hasher(combined))


def build_fingerprint(item: ContentItem, algorithm: str = "fnv1a") -> ContentFingerprint:
    """Build the fingerprint of a content item.

    Keywords come from the lowercased title and body; entities come from the
    case-preserved text because the capitalization heuristic needs it.
    """
    title = item.title or ""
    body = item.body or ""
    combined = f"{title} {body}"

    keywords = extract_keywords(combined.lower())
    entities = extract_entities(combined)

    return ContentFingerprint(
        item_id=item.id,
        title=title,
        body=body,
        source_url=item.source_url or "",
        keywords=tuple(keywords),
        entities=frozenset(entities),
        fingerprint_hash=fingerprint_hash(title, keywords, entities, algorithm),
    )
