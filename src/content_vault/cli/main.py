"""Command-line interface for the content vault.

This is the main entry point that delegates to command modules.
"""

from pathlib import Path
from typing import Any, Optional

import click

from ..config import Config
from ..utils.logging_config import configure_third_party_loggers, setup_logging
from .commands import links_command, reset_command, status_command, sync_command


@click.group()
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    help="Set logging level",
)
@click.option("--log-file", type=click.Path(), help="Log to file")
@click.option(
    "--database",
    type=click.Path(dir_okay=False),
    help="SQLite store to sync into (overrides CONTENT_VAULT_DATABASE_PATH)",
)
@click.option(
    "--models",
    type=click.Path(exists=True, dir_okay=False),
    help="JSON file of locally modeled content types",
)
@click.pass_context
def cli(
    ctx: Any,
    log_level: str,
    log_file: Optional[str],
    database: Optional[str],
    models: Optional[str],
) -> None:
    """Content Vault.

    Keeps a local SQLite copy of a remote content space up to date.
    """
    setup_logging(log_level=log_level, log_file=Path(log_file) if log_file else None)
    configure_third_party_loggers()

    config = Config()
    if database:
        config.database_path = Path(database)
        config.database_path.parent.mkdir(parents=True, exist_ok=True)
    if models:
        config.models_file = Path(models)
    ctx.obj = config


# Register commands
cli.add_command(sync_command)
cli.add_command(status_command)
cli.add_command(links_command)
cli.add_command(reset_command)


if __name__ == "__main__":
    cli()
