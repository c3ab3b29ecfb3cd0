"""
CLI command to refresh episodes for one or all tracked shows from TMDB.
"""
import click
import logging
from utils.cli_helpers import console, get_service_from_context, pass_watchsync_context, print_refresh_summary
from utils.errors import NotFoundError
from utils.metadata_fetcher import MetadataFetcher
from utils.show_refresher import ShowRefresher

logger = logging.getLogger(__name__)

@click.command("refresh-episodes", help="Refresh episodes for a show (or all shows) from TMDB, keeping watched state.")
@click.option("--show-id", type=int, help="Database ID of the show to refresh")
@click.option("--all", "refresh_all", is_flag=True, help="Refresh every tracked show")
@click.option("--include-archived", is_flag=True, help="With --all, also refresh archived shows")
@click.pass_context
@pass_watchsync_context
def refresh_episodes(ctx: click.Context, show_id: int, refresh_all: bool, include_archived: bool) -> None:
    """
    Refresh episodes for a show from TMDB and reconcile them into the local database.

    Args:
        ctx (click.Context): Click context containing shared config and services.
        show_id (int): Database ID of a single show to refresh.
        refresh_all (bool): Refresh every show instead.
        include_archived (bool): Include archived shows when refreshing all.
    """
    if bool(show_id) == bool(refresh_all):
        console.print("❌ Provide exactly one of --show-id or --all", style="red")
        raise click.exceptions.Exit(2)

    db = get_service_from_context(ctx, "db")
    tmdb = get_service_from_context(ctx, "tmdb")
    pacing = ctx.obj["pacing"]
    refresher = ShowRefresher(
        db,
        MetadataFetcher(tmdb, season_delay=pacing.season_delay),
        show_delay=pacing.show_delay,
        dry_run=ctx.obj["dry_run"],
    )

    if refresh_all:
        summary = refresher.refresh_all(include_archived=include_archived)
        print_refresh_summary(summary)
        if summary.failed:
            raise click.exceptions.Exit(1)
        return

    try:
        result = refresher.refresh_one(show_id)
    except NotFoundError as e:
        logger.warning(f"No show found in DB for id={show_id}")
        console.print(f"❌ {e}", style="red")
        raise click.exceptions.Exit(1)

    if not result.success:
        console.print(f"❌ Failed to refresh episodes for {result.tv_show_title}: {result.error}", style="red")
        raise click.exceptions.Exit(1)

    console.print(
        f"✅ {result.tv_show_title}: {result.new_episodes} new, {result.updated_episodes} updated episodes",
        style="green",
    )
