"""
CLI command to import saved shows and movies from a feed file of TMDB or IMDb IDs.
"""
import click
import logging
from models.media import IdSpace
from utils.bulk_importer import BulkImporter
from utils.metadata_fetcher import MetadataFetcher
from utils.cli_helpers import console, get_service_from_context, pass_watchsync_context, print_import_summary

logger = logging.getLogger(__name__)

@click.command("import-feed", help="Import saved shows and movies from a feed JSON file.")
@click.argument("feed_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--id-space", type=click.Choice([space.value for space in IdSpace]), default=IdSpace.TMDB.value,
              show_default=True, help="Identifier space of the entries in the file")
@click.pass_context
@pass_watchsync_context
def import_feed(ctx: click.Context, feed_file: str, id_space: str) -> None:
    """
    Import every entry of a feed file, resolving each ID to a TMDB show or movie.

    Args:
        ctx (click.Context): Click context containing shared config and services.
        feed_file (str): Path to the feed JSON file.
        id_space (str): "tmdb" or "imdb".
    """
    db = get_service_from_context(ctx, "db")
    tmdb = get_service_from_context(ctx, "tmdb")
    pacing = ctx.obj["pacing"]

    importer = BulkImporter(
        db,
        tmdb,
        fetcher=MetadataFetcher(tmdb, season_delay=pacing.season_delay),
        entry_delay=pacing.entry_delay,
        progress_every=pacing.progress_every,
        dry_run=ctx.obj["dry_run"],
    )
    try:
        summary = importer.import_from_feed_file(feed_file, IdSpace(id_space))
    except ValueError as e:
        logger.error(f"Could not read feed file {feed_file}: {e}")
        console.print(f"❌ {e}", style="red")
        raise click.exceptions.Exit(1)

    print_import_summary(summary, title=f"Import from {feed_file}")
    if ctx.obj["dry_run"]:
        console.print("[DRY RUN] No changes were written.", style="yellow")
