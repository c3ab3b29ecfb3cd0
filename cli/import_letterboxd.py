"""
CLI command to import movies from a Letterboxd CSV export by title and release year.
"""
import click
import logging
from utils.bulk_importer import BulkImporter
from utils.metadata_fetcher import MetadataFetcher
from utils.cli_helpers import console, get_service_from_context, pass_watchsync_context, print_import_summary

logger = logging.getLogger(__name__)

@click.command("import-letterboxd", help="Import movies from a Letterboxd watchlist CSV export.")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_context
@pass_watchsync_context
def import_letterboxd(ctx: click.Context, csv_file: str) -> None:
    """Match each CSV row to a TMDB movie by title and year and import it."""
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
        summary = importer.import_from_letterboxd_file(csv_file)
    except ValueError as e:
        logger.error(f"Could not read Letterboxd export {csv_file}: {e}")
        console.print(f"❌ {e}", style="red")
        raise click.exceptions.Exit(1)

    print_import_summary(summary, title=f"Letterboxd import from {csv_file}")
