"""Sync command running one delta-sync cycle."""

import logging
from typing import Optional

import click
from rich.console import Console

from ...config import Config
from ...vault import Vault
from ..display import display_sync_result

console = Console()
logger = logging.getLogger(__name__)


@click.command(name="sync")
@click.option(
    "--locale",
    help="Locale to store field values in (overrides CONTENT_VAULT_LOCALE)",
)
@click.option(
    "--invalidate",
    is_flag=True,
    help="Discard local content and run a full sync",
)
@click.option("--tag", help="Tag identifying this sync in the logs")
@click.pass_obj
def sync_command(
    config: Config, locale: Optional[str], invalidate: bool, tag: Optional[str]
) -> None:
    """Fetch remote changes and apply them to the local store.

    The first sync, and any sync after a locale change, fetches the whole
    space. Later syncs only fetch what changed since the previous one.

    Examples:
        content-vault sync

        content-vault sync --locale de-DE

        content-vault sync --invalidate
    """
    if not config.space_id or not config.access_token:
        raise click.ClickException(
            "CONTENT_VAULT_SPACE_ID and CONTENT_VAULT_ACCESS_TOKEN must be set"
        )

    vault = Vault.from_config(config)
    try:
        console.print("\n[bold cyan]🔄 Syncing space...[/bold cyan]")
        sync_config = Vault.sync_config(config, locale=locale, invalidate=invalidate)
        result = vault.sync(sync_config, tag=tag)
    finally:
        vault.close()

    display_sync_result(result.get_summary())
    if not result.success:
        raise click.ClickException(str(result.error))
