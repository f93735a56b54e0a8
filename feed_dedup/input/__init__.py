"""
Input parsing for content item exports.
"""

from .json_parser import parse_items_json, parse_iso8601

__all__ = ["parse_items_json", "parse_iso8601"]
