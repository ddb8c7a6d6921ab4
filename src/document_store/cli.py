"""CLI entry points: docstore search, docstore show, docstore status, docstore init."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

import click

from . import Document, DocumentStore, SearchRequest
from .config import Config
from .loader import parse_timestamp, seed_store

_LOGGER = logging.getLogger(__name__)


def _timestamp_option(ctx: click.Context, param: click.Parameter, value: str | None) -> datetime | None:
    if value is None:
        return None
    try:
        return parse_timestamp(value)
    except ValueError as exc:
        raise click.BadParameter(f"{value!r} is not an ISO 8601 timestamp ({exc})") from exc


def _document_to_json(document: Document) -> dict:
    return {
        "id": document.id,
        "title": document.title,
        "content": document.content,
        "author": {"id": document.author.id, "name": document.author.name},
        "created": document.created.isoformat(),
    }


def _echo_document(document: Document) -> None:
    click.echo(f"\n--- {document.title} [{document.id}] ---")
    click.echo(f"  Author: {document.author.name or document.author.id} ({document.author.id})")
    click.echo(f"  Created: {document.created.isoformat()}")
    lines = document.content.strip().splitlines()
    for line in lines[:5]:
        click.echo(f"  {line}")
    if len(lines) > 5:
        click.echo(f"  ... ({len(lines) - 5} more lines)")


@click.group()
@click.option(
    "--seed",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON or JSONL file to load into the store (default: $DOCSTORE_SEED_FILE)",
)
@click.pass_context
def cli(ctx: click.Context, seed: Path | None) -> None:
    """In-memory document store: load documents from a file and query them."""
    ctx.ensure_object(dict)
    Config().load_env_file()  # Seed os.environ before constructing final config
    config = Config()
    if not config.log_level_valid:
        click.echo(
            f"Unknown DOCSTORE_LOG_LEVEL {config.log_level!r}, using {config.effective_log_level()}",
            err=True,
        )
    logging.basicConfig(level=config.effective_log_level(), format="%(levelname)s %(name)s: %(message)s")

    store = DocumentStore()
    seed_file = seed or config.seed_file
    if seed_file is not None:
        if seed_file.exists():
            seed_store(store, seed_file)
        else:
            _LOGGER.warning("Seed file %s does not exist", seed_file)

    ctx.obj["config"] = config
    ctx.obj["store"] = store
    ctx.obj["seed_file"] = seed_file


@cli.command()
@click.option("--title-prefix", "title_prefixes", multiple=True, help="Title starts with (repeatable, any match)")
@click.option("--contains", "contains_contents", multiple=True, help="Content contains (repeatable, any match)")
@click.option("--author", "author_ids", multiple=True, help="Author id (repeatable, any match)")
@click.option("--from", "created_from", callback=_timestamp_option, help="Created strictly after (ISO 8601)")
@click.option("--to", "created_to", callback=_timestamp_option, help="Created strictly before (ISO 8601)")
@click.option("--json", "as_json", is_flag=True, help="Output results as JSON")
@click.pass_context
def search(
    ctx: click.Context,
    title_prefixes: tuple[str, ...],
    contains_contents: tuple[str, ...],
    author_ids: tuple[str, ...],
    created_from: datetime | None,
    created_to: datetime | None,
    as_json: bool,
) -> None:
    """Search stored documents. Without filters, every document is listed."""
    store = ctx.obj["store"]

    request = SearchRequest(
        title_prefixes=list(title_prefixes),
        contains_contents=list(contains_contents),
        author_ids=list(author_ids),
        created_from=created_from,
        created_to=created_to,
    )
    results = store.search(request)

    if as_json:
        click.echo(json.dumps([_document_to_json(d) for d in results], indent=2))
    elif results:
        for document in results:
            _echo_document(document)
        click.echo(f"\n{len(results)} document(s) found.")
    else:
        click.echo("No results found.")


@cli.command()
@click.argument("document_id")
@click.option("--json", "as_json", is_flag=True, help="Output the document as JSON")
@click.pass_context
def show(ctx: click.Context, document_id: str, as_json: bool) -> None:
    """Show a single document by id."""
    store = ctx.obj["store"]

    document = store.find_by_id(document_id)
    if document is None:
        click.echo(f"Document not found: {document_id}", err=True)
        ctx.exit(1)

    if as_json:
        click.echo(json.dumps(_document_to_json(document), indent=2))
    else:
        _echo_document(document)


@cli.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the seed file, configuration, and number of stored documents."""
    config = ctx.obj["config"]
    store = ctx.obj["store"]
    seed_file = ctx.obj["seed_file"]

    click.echo("Document Store Status")
    click.echo("=" * 40)

    if seed_file is None:
        click.echo("\nSeed file: none (use --seed or set DOCSTORE_SEED_FILE)")
    else:
        click.echo(f"\nSeed file: {seed_file}")
        click.echo(f"  Exists: {seed_file.exists()}")

    click.echo(f"\nDocuments: {len(store)}")
    authors = {d.author.id for d in store}
    if authors:
        click.echo(f"  Authors: {len(authors)}")

    click.echo(f"\nEnv file: {config.env_file}")
    click.echo(f"  Exists: {'yes' if config.env_file.exists() else 'no'}")
    click.echo(f"Log level: {config.log_level}")


@cli.command()
@click.pass_context
def init(ctx: click.Context) -> None:
    """Create the settings env file if it doesn't exist."""
    config = ctx.obj["config"]
    if config.ensure_env_file():
        click.echo(f"Created {config.env_file}")
    else:
        click.echo(f"Env file: {config.env_file} (already exists)")
