"""Store inspection and maintenance commands."""

import logging
from typing import Optional

import click
from rich.console import Console

from ...config import Config
from ...database import DatabaseService, ModelRegistry
from ..display import display_links, display_status

console = Console()
logger = logging.getLogger(__name__)


def _open_store(config: Config) -> DatabaseService:
    registry = (
        ModelRegistry.from_file(config.models_file)
        if config.models_file
        else ModelRegistry()
    )
    return DatabaseService(db_path=config.database_path, registry=registry)


@click.command(name="status")
@click.pass_obj
def status_command(config: Config) -> None:
    """Show what the local store holds and where the last sync stopped."""
    db_service = _open_store(config)
    try:
        token, locale = db_service.get_sync_state()
        display_status(db_service.get_statistics(), token, locale)
    finally:
        db_service.close()


@click.command(name="links")
@click.argument("parent", required=False)
@click.option("--field", help="Only show links of this field")
@click.pass_obj
def links_command(config: Config, parent: Optional[str], field: Optional[str]) -> None:
    """List link edges, optionally those of one PARENT entry."""
    db_service = _open_store(config)
    try:
        display_links(db_service.get_links(parent=parent, field=field))
    finally:
        db_service.close()


@click.command(name="reset")
@click.confirmation_option(prompt="Discard all local content and the sync token?")
@click.pass_obj
def reset_command(config: Config) -> None:
    """Clear the local store so the next sync is a full sync."""
    db_service = _open_store(config)
    try:
        db_service.reset()
        console.print("[green]✓ Local store cleared[/green]")
    finally:
        db_service.close()
