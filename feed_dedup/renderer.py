"""
Terminal rendering for command-line output.

Builds rich tables for similarity lists and item id lists. Nothing here is
persisted; the tables are printed by the CLI.
"""

from __future__ import annotations

from typing import Iterable

from rich.table import Table

from .core.types import ContentItem, SimilarityResult

_LABEL_STYLES = {
    "Very Similar": "red",
    "Similar": "dark_orange",
    "Somewhat Similar": "yellow",
}


def render_similar_table(item_id: str, results: list[SimilarityResult]) -> Table:
    """Table of candidates similar to ``item_id``, best first."""
    table = Table(title=f"Similar to {item_id}")
    table.add_column("Candidate", style="cyan", no_wrap=True)
    table.add_column("Score", justify="right")
    table.add_column("Label")
    table.add_column("Reasons")
    table.add_column("Title")
    table.add_column("Source")

    for result in results:
        style = _LABEL_STYLES.get(result.label, "")
        table.add_row(
            result.candidate_id,
            f"{result.score:.2f}",
            f"[{style}]{result.label}[/{style}]" if style else result.label,
            ", ".join(result.reasons),
            result.title,
            result.source_url,
        )
    return table


def render_items_table(title: str, items: Iterable[ContentItem]) -> Table:
    """Table listing items by id, title and source."""
    table = Table(title=title)
    table.add_column("Id", style="cyan", no_wrap=True)
    table.add_column("Title")
    table.add_column("Source")
    for item in items:
        table.add_row(item.id, item.title, item.source_url)
    return table
