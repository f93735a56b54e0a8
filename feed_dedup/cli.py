"""
Command-line interface for feed-dedup.

Uses Typer to expose similarity lookups, bulk deletion, suppression checks
and duplicate cleanup over a JSON items file. Supports loading .env files so
the items and config paths can be set once per working directory.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import datetime
from pathlib import Path
from typing import Iterator

import typer
from dotenv import load_dotenv
from rich.console import Console

from .config import load_config
from .core.dedup import parse_keyword_list
from .core.types import BulkDeleteCriteria, ProcessingStatus
from .input.json_parser import parse_iso8601
from .logging_utils import setup_logging
from .renderer import render_items_table, render_similar_table
from .session import ModerationSession
from .store.base import StoreError
from .store.json_store import JsonFileStore

app = typer.Typer(add_completion=False)
console = Console()

ITEMS_OPTION = typer.Option(
    ..., "--items", "-i", envvar="FEED_DEDUP_ITEMS", exists=True, readable=True
)
CONFIG_OPTION = typer.Option(
    None, "--config", "-c", envvar="FEED_DEDUP_CONFIG", exists=True, help="YAML config file."
)
LOG_LEVEL_OPTION = typer.Option(None, "--log-level", help="Logging level.")


@app.callback()
def main() -> None:
    """Near-duplicate detection and suppression for content items."""
    load_dotenv()


@contextmanager
def _session(items: Path, config: Path | None, log_level: str | None) -> Iterator[ModerationSession]:
    """Open a session over ``items`` with persisted suppression memory.

    Errors from the store or from malformed input end the command with
    exit code 1.
    """
    try:
        cfg = load_config(config)
        if log_level:
            cfg.logging.level = log_level
        logger = setup_logging(cfg.logging)

        store = JsonFileStore(items)
        with ModerationSession(store, cfg, logger=logger) as session:
            session.memory.load_dict(store.load_memory())
            session.refresh()
            yield session
            store.save_memory(session.memory.to_dict())
    except (StoreError, ValueError, FileNotFoundError) as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from exc


@app.command()
def similar(
    item_id: str = typer.Argument(..., help="Item to find near-duplicates of."),
    items: Path = ITEMS_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Show items similar to ITEM_ID, best match first."""
    with _session(items, config, log_level) as session:
        if item_id not in session.index:
            console.print(f"[yellow]Item {item_id} is not in the live working set.[/yellow]")
            return
        results = session.similar(item_id)
        if not results:
            console.print(f"No items similar to {item_id}.")
            return
        console.print(render_similar_table(item_id, results))


@app.command("bulk-delete")
def bulk_delete(
    keyword: list[str] | None = typer.Option(
        None, "--keyword", "-k", help="Keyword to match; commas and newlines split entries."
    ),
    entity: list[str] | None = typer.Option(None, "--entity", "-e", help="Place or organization to match."),
    source: list[str] | None = typer.Option(None, "--source", "-s", help="Source URL fragment to match."),
    start: str | None = typer.Option(None, "--start", help="ISO 8601 start of the date range."),
    end: str | None = typer.Option(None, "--end", help="ISO 8601 end of the date range."),
    dry_run: bool = typer.Option(False, "--dry-run", help="Only list matching items."),
    items: Path = ITEMS_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Discard new items matching keywords, entities, sources or a date range."""
    with _session(items, config, log_level) as session:
        criteria = BulkDeleteCriteria(
            keywords=parse_keyword_list(keyword or []),
            entities=parse_keyword_list(entity or []),
            sources=parse_keyword_list(source or []),
            start=_parse_bound(start),
            end=_parse_bound(end),
        )
        if criteria.is_empty:
            console.print("[red]Error:[/red] give at least one keyword, entity, source or date bound.")
            raise typer.Exit(code=1)

        if dry_run:
            matched = set(session.preview_bulk_delete(criteria))
            live = [item for item in session.store.list_items() if item.id in matched]
            console.print(render_items_table(f"{len(live)} items would be deleted", live))
            return

        result = session.bulk_delete(criteria)
        console.print(f"Deleted {result.count} items.")


@app.command()
def check(
    items: Path = ITEMS_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """List new items that resemble a recently deleted item."""
    with _session(items, config, log_level) as session:
        new_items = [
            item
            for item in session.store.list_items()
            if item.processing_status == ProcessingStatus.NEW
        ]
        visible = {item.id for item in session.screen(new_items)}
        suppressed = [item for item in new_items if item.id not in visible]
        if not suppressed:
            console.print("No new items match recent deletions.")
            return
        console.print(render_items_table(f"{len(suppressed)} likely suppressed items", suppressed))


@app.command()
def cleanup(
    dry_run: bool = typer.Option(False, "--dry-run", help="Only list duplicate items."),
    items: Path = ITEMS_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Discard new items repeating an older item's URL or title."""
    with _session(items, config, log_level) as session:
        if dry_run:
            duplicates = set(session.find_cleanup_candidates())
            listed = [item for item in session.store.list_items() if item.id in duplicates]
            console.print(render_items_table(f"{len(listed)} duplicate items", listed))
            return
        discarded = session.cleanup_duplicates()
        console.print(f"Discarded {len(discarded)} duplicate items.")


@app.command()
def merge(
    original_id: str = typer.Argument(..., help="Item that survives."),
    duplicate_id: str = typer.Argument(..., help="Item folded into the original."),
    items: Path = ITEMS_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Merge DUPLICATE_ID into ORIGINAL_ID."""
    with _session(items, config, log_level) as session:
        plan = session.merge(original_id, duplicate_id)
        console.print(f"Merged {plan.duplicate_id} into {plan.original_id}.")


@app.command()
def sweep(
    items: Path = ITEMS_OPTION,
    config: Path | None = CONFIG_OPTION,
    log_level: str | None = LOG_LEVEL_OPTION,
):
    """Drop deletion memory entries older than the retention window."""
    with _session(items, config, log_level) as session:
        removed = session.memory.sweep()
        console.print(f"Removed {removed} expired entries, {len(session.memory)} remaining.")


def _parse_bound(value: str | None) -> datetime | None:
    if not value:
        return None
    return parse_iso8601(value)


if __name__ == "__main__":
    app()
