"""CLI interface for mongocache."""

import asyncio
import json
import logging
import os
from collections.abc import Awaitable, Callable
from typing import Any

import typer
from rich.console import Console

from mongocache.consts import (
    DEFAULT_COLLECTION_NAME,
    DEFAULT_DATABASE_NAME,
    DEFAULT_MONGO_URI,
    DEFAULT_TTL,
    ENV_COLLECTION_NAME,
    ENV_DATABASE_NAME,
    ENV_MONGO_URI,
)
from mongocache.errors import CacheError
from mongocache.storage.cache.mongo_cache import MongoCache
from mongocache.storage.document_store.base import DocumentStore
from mongocache.storage.document_store.mongo_store import MongoDocumentStore

app = typer.Typer(
    name="mongocache",
    help="mongocache - TTL key-value cache backed by MongoDB",
)

console = Console()

URI_OPTION = typer.Option(None, "--uri", help=f"MongoDB URI (env: {ENV_MONGO_URI})")
DATABASE_OPTION = typer.Option(None, "--database", "-d", help=f"Database name (env: {ENV_DATABASE_NAME})")
COLLECTION_OPTION = typer.Option(
    None, "--collection", "-c", help=f"Cache collection (env: {ENV_COLLECTION_NAME})"
)
IGNORE_ERRORS_OPTION = typer.Option(
    False, "--ignore-store-error", help="Log store failures instead of failing"
)
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Enable debug logging")


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def _open_store(uri: str | None, database: str | None) -> DocumentStore:
    """Connect to MongoDB. Explicit option > env var > default."""
    return MongoDocumentStore(
        uri or os.getenv(ENV_MONGO_URI, DEFAULT_MONGO_URI),
        database=database or os.getenv(ENV_DATABASE_NAME, DEFAULT_DATABASE_NAME),
    )


def _parse_value(raw: str) -> Any:
    """Interpret a CLI value as JSON, falling back to the raw string."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return raw


def _run(
    operation: Callable[[MongoCache], Awaitable[Any]],
    uri: str | None,
    database: str | None,
    collection: str | None,
    ignore_store_error: bool,
    ttl: float = DEFAULT_TTL,
) -> Any:
    """Open a cache, run one operation against it, and tear everything down."""

    async def _main() -> Any:
        store = _open_store(uri, database)
        try:
            async with MongoCache(
                store,
                ttl=ttl,
                collection_name=collection or os.getenv(ENV_COLLECTION_NAME, DEFAULT_COLLECTION_NAME),
                ignore_store_error=ignore_store_error,
            ) as cache:
                return await operation(cache)
        finally:
            await store.close()

    try:
        return asyncio.run(_main())
    except CacheError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


@app.command("set")
def set_(
    key: str = typer.Argument(..., help="Cache key"),
    value: str = typer.Argument(..., help="Value to store (parsed as JSON when possible)"),
    ttl: float = typer.Option(DEFAULT_TTL, "--ttl", "-t", help="Seconds until the entry expires"),
    uri: str | None = URI_OPTION,
    database: str | None = DATABASE_OPTION,
    collection: str | None = COLLECTION_OPTION,
    ignore_store_error: bool = IGNORE_ERRORS_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Store a value under a key."""
    _configure_logging(verbose)
    item = _parse_value(value)
    stored = _run(lambda cache: cache.set(key, item), uri, database, collection, ignore_store_error, ttl)
    if not stored:
        console.print(f"[yellow]Store returned no result for '{key}'[/yellow]")
        raise typer.Exit(1)
    console.print(f"[green]Stored[/green] '{key}' (ttl {ttl}s)")


@app.command()
def get(
    key: str = typer.Argument(..., help="Cache key"),
    uri: str | None = URI_OPTION,
    database: str | None = DATABASE_OPTION,
    collection: str | None = COLLECTION_OPTION,
    ignore_store_error: bool = IGNORE_ERRORS_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Print the value stored under a key as JSON."""
    _configure_logging(verbose)
    value = _run(lambda cache: cache.get(key), uri, database, collection, ignore_store_error)
    if value is None:
        console.print(f"[yellow]Key '{key}' not found or expired.[/yellow]")
        raise typer.Exit(1)
    console.print_json(data=value, default=str)


@app.command()
def delete(
    key: str = typer.Argument(..., help="Cache key"),
    uri: str | None = URI_OPTION,
    database: str | None = DATABASE_OPTION,
    collection: str | None = COLLECTION_OPTION,
    ignore_store_error: bool = IGNORE_ERRORS_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Delete the entry stored under a key."""
    _configure_logging(verbose)
    _run(lambda cache: cache.delete(key), uri, database, collection, ignore_store_error)
    console.print(f"[green]Deleted[/green] '{key}'")


@app.command()
def flush(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
    uri: str | None = URI_OPTION,
    database: str | None = DATABASE_OPTION,
    collection: str | None = COLLECTION_OPTION,
    ignore_store_error: bool = IGNORE_ERRORS_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Delete every entry in the cache collection."""
    _configure_logging(verbose)
    if not yes:
        typer.confirm("Delete every cache entry?", abort=True)
    _run(lambda cache: cache.flush(), uri, database, collection, ignore_store_error)
    console.print("[green]Cache flushed[/green]")


if __name__ == "__main__":
    app()
