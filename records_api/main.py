from __future__ import annotations

import asyncio
import sys
from typing import Optional

import typer

from records_api.config import get_settings
from records_api.infrastructure.db_factory import connect
from records_api.repository import RecordRepository
from records_api.server import create_app, run_app
from records_api.utils.logging import configure_logging

app = typer.Typer(help="Records API: a minimal PostgreSQL-backed JSON service.")


def _format_rows(rows: list[dict]) -> list[str]:
    """Tab-separated header line followed by one line per row."""
    if not rows:
        return []
    lines = ["\t".join(rows[0].keys())]
    lines.extend("\t".join(str(value) for value in row.values()) for row in rows)
    return lines


async def _setup_table() -> None:
    session = await connect(get_settings())
    try:
        await RecordRepository(session).ensure_table()
    finally:
        await session.end()


async def _add(name: str) -> int:
    session = await connect(get_settings())
    try:
        return await RecordRepository(session).insert(name)
    finally:
        await session.end()


async def _read(name: str) -> list[dict]:
    session = await connect(get_settings())
    try:
        result = await RecordRepository(session).fetch_by_name(name)
    finally:
        await session.end()
    return result.rows


@app.callback()
def _configure() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(
        f"DB={settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name} "
        f"ssl={settings.db_ssl} | HTTP={settings.http_host}:{settings.http_port} "
        f"default_name={settings.default_name}"
    )


@app.command()
def serve(
    host: Optional[str] = typer.Option(
        None, "--host", "-h", help="Listener host (default from settings)."
    ),
    port: Optional[int] = typer.Option(
        None, "--port", "-p", help="Listener port (default from settings)."
    ),
) -> None:
    """
    Start the HTTP server.
    """
    settings = get_settings()
    overrides = {}
    if host is not None:
        overrides["http_host"] = host
    if port is not None:
        overrides["http_port"] = port
    settings = settings.model_copy(update=overrides)
    run_app(
        create_app(settings=settings),
        host=settings.http_host,
        port=settings.http_port,
        log_level=settings.log_level.lower(),
    )


@app.command("setup-table")
def setup_table() -> None:
    """
    Create the records table if it does not exist.
    """
    asyncio.run(_setup_table())
    typer.echo("Created table.")


@app.command()
def add(
    name: Optional[str] = typer.Argument(None, help="Name to insert (default from settings)."),
) -> None:
    """
    Insert one record.
    """
    if name is None:
        name = get_settings().default_name
    inserted = asyncio.run(_add(name))
    typer.echo(f"Inserted {inserted} row")


@app.command()
def read(
    name: Optional[str] = typer.Argument(None, help="Name to look up (default from settings)."),
) -> None:
    """
    Print the records matching a name.
    """
    if name is None:
        name = get_settings().default_name
    rows = asyncio.run(_read(name))
    typer.echo(f"Database entries for {name}: {len(rows)} row(s)")
    for line in _format_rows(rows):
        typer.echo(line)


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
