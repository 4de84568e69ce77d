#!/usr/bin/env python
"""
CLI management commands for the socialgraph GraphQL service.
"""

import asyncio
import sys
from pathlib import Path

import click

from socialgraph.service.db import dispose_engine, init_db
from socialgraph.service.logging import setup_logging
from socialgraph.service.settings import settings


@click.group()
def cli() -> None:
    """Socialgraph GraphQL service CLI."""
    setup_logging()


@cli.command()
def init_database() -> None:
    """Create tables and seed member types."""

    async def _init() -> None:
        try:
            await init_db()
        finally:
            await dispose_engine()

    click.echo("Initializing database...")
    asyncio.run(_init())
    click.echo("Database initialized successfully!")


@cli.command()
def export_schema() -> None:
    """Print the GraphQL schema in SDL."""
    from socialgraph.service.graphql import schema

    click.echo(schema.as_str())


@cli.command()
@click.argument("query_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--max-depth",
    type=click.IntRange(min=1),
    default=None,
    help="Override the configured maximum query depth",
)
def check_query(query_file: Path, max_depth: int | None) -> None:
    """Parse, validate and depth-check a query without executing it."""
    from socialgraph.service.graphql import schema, validate_query

    errors = validate_query(
        schema,
        query_file.read_text(encoding="utf-8"),
        max_depth=max_depth if max_depth is not None else settings.graphql.max_query_depth,
    )
    if not errors:
        click.echo("Query is valid")
        return

    for error in errors:
        location = ""
        if error.locations:
            first = error.locations[0]
            location = f"{first.line}:{first.column}: "
        click.echo(f"{location}{error.message}", err=True)
    sys.exit(1)


@cli.command()
@click.option("--host", default=None, help="Bind host (defaults to settings)")
@click.option("--port", type=int, default=None, help="Bind port (defaults to settings)")
def serve(host: str | None, port: int | None) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(
        "socialgraph.service.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=settings.reload,
        log_level=settings.observability.log_level.value.lower(),
    )


if __name__ == "__main__":
    cli()
