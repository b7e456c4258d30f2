"""CLI entry point for TrainDesk."""

from __future__ import annotations

import sys
from dataclasses import replace

import click

from traindesk.config import ConfigError, Settings
from traindesk.logging import sanitize_for_log, setup_logging
from traindesk.registrations import (
    Database,
    RegistrationKind,
    RegistrationRepository,
    StoreError,
)


def _load_settings(database_url: str | None) -> Settings:
    try:
        settings = Settings.from_env()
    except ConfigError as e:
        click.echo(f"Configuration error: {e}", err=True)
        sys.exit(1)
    if database_url:
        settings = replace(settings, database_url=database_url)
    return settings


@click.group()
@click.version_option(package_name="traindesk")
def main() -> None:
    """TrainDesk - registration approvals for the training department."""
    pass


@main.command()
@click.option("--host", default=None, help="Bind address (default: TRAINDESK_HOST or 127.0.0.1)")
@click.option("--port", type=int, default=None, help="Bind port (default: TRAINDESK_PORT or 8000)")
@click.option("--database-url", default=None, help="SQLAlchemy URL of the registration store")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
def serve(host: str | None, port: int | None, database_url: str | None, verbose: bool) -> None:
    """Run the HTTP API."""
    import uvicorn  # noqa: PLC0415

    from traindesk.api.app import create_app  # noqa: PLC0415

    settings = _load_settings(database_url)
    settings = replace(
        settings,
        host=host or settings.host,
        port=port or settings.port,
    )
    setup_logging(level="DEBUG" if verbose else None)

    uvicorn.run(create_app(settings), host=settings.host, port=settings.port, log_config=None)


@main.command("init-db")
@click.option("--database-url", default=None, help="SQLAlchemy URL of the registration store")
def init_db(database_url: str | None) -> None:
    """Create the registration tables if they don't exist."""
    settings = _load_settings(database_url)
    database = Database(settings.database_url)
    try:
        database.create_tables()
    finally:
        database.close()
    click.echo(f"Tables ready in {sanitize_for_log(settings.database_url)}")


@main.command()
@click.option("--database-url", default=None, help="SQLAlchemy URL of the registration store")
def stats(database_url: str | None) -> None:
    """Print registration counts per kind and status."""
    settings = _load_settings(database_url)
    database = Database(settings.database_url)
    try:
        database.create_tables()
        click.echo(f"{'kind':<22}{'pending':>9}{'approved':>10}{'rejected':>10}")
        for kind in RegistrationKind:
            counts = RegistrationRepository(
                database, kind, retries=settings.store_retries
            ).count_by_status()
            click.echo(
                f"{kind.value:<22}{counts.pending:>9}{counts.approved:>10}{counts.rejected:>10}"
            )
    except StoreError as e:
        click.echo(f"Store error: {e}", err=True)
        sys.exit(1)
    finally:
        database.close()
