"""
CLI helper utilities for consistent error handling, service validation and result rendering.
"""
import functools
import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from typing import List, Optional, Any
from models.results import ImportSummary, RefreshAllResult

console = Console()

SERVICE_SUGGESTIONS = {
    'tmdb': [
        "Check your configuration file for the [tmdb] section",
        "Required: api_key (get from https://www.themoviedb.org/settings/api)",
        "Or set WATCHSYNC_TMDB_API_KEY",
    ],
    'db': [
        "Check your configuration file for the [database] and [sqlite] sections",
        "Supported types: sqlite",
        "Or set WATCHSYNC_DB_FILE",
    ],
}


def _suggest_service_fixes(missing_services: List[str]) -> None:
    """Provide specific suggestions for fixing missing services."""
    console.print("💡 Configuration suggestions:", style="yellow")
    for service in missing_services:
        for suggestion in SERVICE_SUGGESTIONS.get(service, [f"Check configuration for {service} service"]):
            console.print(f"   - {escape(suggestion)}", style="yellow")


def get_service_from_context(ctx: click.Context, service_name: str, required: bool = True) -> Optional[Any]:
    """
    Get a service from context with proper error handling.

    Args:
        ctx: Click context object
        service_name: Name of the service to retrieve
        required: Whether the service is required (affects error handling)

    Returns:
        Service instance or None if not available
    """
    service = (ctx.obj or {}).get(service_name)
    if not service and required:
        console.print(f"❌ {service_name.upper()} service not available. Please check your configuration.", style="red")
        _suggest_service_fixes([service_name])
        raise click.Abort()
    return service


def pass_watchsync_context(f):
    """
    Decorator that validates the WatchSync context is available before executing command.

    Note: This should be used AFTER @click.pass_context decorator.
    """
    @functools.wraps(f)
    def wrapper(ctx: click.Context, *args, **kwargs):
        if not ctx.obj:
            console.print("❌ No context available. Configuration may not be loaded properly.", style="red")
            raise click.Abort()
        return f(ctx, *args, **kwargs)

    return wrapper


def print_import_summary(summary: ImportSummary, title: str = "Import summary") -> None:
    """Render a bulk import summary as a table, followed by any unmatched titles."""
    table = Table(title=title)
    table.add_column("Total", justify="right")
    table.add_column("Imported", justify="right", style="green")
    table.add_column("TV shows", justify="right")
    table.add_column("Movies", justify="right")
    table.add_column("Existing", justify="right")
    table.add_column("Skipped", justify="right", style="yellow")
    table.add_column("Errors", justify="right", style="red")
    table.add_row(
        str(summary.total), str(summary.imported), str(summary.tv_shows), str(summary.movies),
        str(summary.existing), str(summary.skipped), str(summary.errors),
    )
    console.print(table)

    if summary.not_found:
        console.print(f"Not found on TMDB ({len(summary.not_found)}):", style="yellow")
        for title_not_found in summary.not_found:
            console.print(f"   - {escape(title_not_found)}", style="yellow")


def print_refresh_summary(summary: RefreshAllResult) -> None:
    """Render per-show refresh results."""
    table = Table(title=f"Episode refresh: {summary.successful}/{summary.total} succeeded")
    table.add_column("ID", justify="right")
    table.add_column("Show")
    table.add_column("New", justify="right", style="green")
    table.add_column("Updated", justify="right")
    table.add_column("Status")
    for result in summary.results:
        status = "[green]ok[/green]" if result.success else f"[red]{escape(result.error or '')}[/red]"
        table.add_row(
            str(result.tv_show_id), escape(result.tv_show_title),
            str(result.new_episodes), str(result.updated_episodes), status,
        )
    console.print(table)
