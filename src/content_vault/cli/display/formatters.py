"""Display formatters and UI helpers for CLI."""

import logging
from typing import Any, Dict, List, Optional, Tuple

from rich.console import Console
from rich.table import Table

console = Console()
logger = logging.getLogger(__name__)


def _metric_table(title: str) -> Table:
    table = Table(show_header=True, header_style="bold magenta", title=title)
    table.add_column("Metric", style="cyan")
    table.add_column("Count", style="green", justify="right")
    return table


def display_sync_result(summary: Dict[str, Any]) -> None:
    """Display the summary of a sync cycle.

    Args:
        summary: Dictionary from SyncResult.get_summary()
    """
    if not summary["success"]:
        console.print(f"\n[red]✗ Sync failed: {summary.get('error')}[/red]")
        return

    mode = "Full sync" if summary["mode"] == "full" else "Delta sync"
    console.print(f"\n[bold green]✓ {mode} completed[/bold green]")
    if summary.get("invalidated"):
        console.print("[yellow]Local content was discarded before applying[/yellow]")
    console.print()

    table = _metric_table("Changes Applied")
    table.add_row("Assets Written", str(summary["assets"]["written"]))
    table.add_row("Assets Deleted", str(summary["assets"]["deleted"]))
    table.add_row("Entries Written", str(summary["entries"]["written"]))
    table.add_row("Entries Deleted", str(summary["entries"]["deleted"]))
    table.add_row("Entries Skipped (unmodeled)", str(summary["entries"]["skipped"]))
    console.print(table)


def display_status(
    stats: Dict[str, Any], token: Optional[str], locale: Optional[str]
) -> None:
    """Display store statistics and the stored sync state.

    Args:
        stats: Dictionary from DatabaseService.get_statistics()
        token: Stored continuation token
        locale: Locale of the last sync
    """
    console.print(f"\n[bold]Store:[/bold] {stats['database_path']}")
    if token:
        console.print(f"[bold]Locale:[/bold] {locale or '(resource default)'}")
        console.print(f"[bold]Token:[/bold] [dim]{token}[/dim]\n")
    else:
        console.print("[yellow]Never synced, next sync will be a full sync[/yellow]\n")

    table = _metric_table("Cached Content")
    table.add_row("Assets", str(stats["assets"]))
    for table_name, count in sorted(stats["entries_by_table"].items()):
        table.add_row(f"Entries ({table_name})", str(count))
    table.add_row("Links", str(stats["links"]))
    console.print(table)


def display_links(links: List[Tuple[str, str, str, bool]]) -> None:
    """Display link edges as a table."""
    if not links:
        console.print("[dim]No links found[/dim]")
        return

    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Parent", style="cyan")
    table.add_column("Field")
    table.add_column("Child", style="green")
    table.add_column("Kind")
    for parent, field, child, is_asset in links:
        table.add_row(parent, field, child, "Asset" if is_asset else "Entry")
    console.print(table)
