"""
CLI command to import the YouTube watch-later playlist.
"""
import click
import logging
from utils.cli_helpers import console, get_service_from_context, pass_watchsync_context
from utils.errors import AuthenticationRequiredError, NotFoundError, YouTubeError
from utils.watch_later_importer import WatchLaterImporter

logger = logging.getLogger(__name__)

@click.command("import-watch-later", help="Import videos from your YouTube Watch later playlist.")
@click.pass_context
@pass_watchsync_context
def import_watch_later(ctx: click.Context) -> None:
    """Create new videos in the feed and refresh details of known ones."""
    db = get_service_from_context(ctx, "db")
    provider = get_service_from_context(ctx, "credential_provider")
    importer = WatchLaterImporter(db, provider, dry_run=ctx.obj["dry_run"])

    try:
        result = importer.import_videos()
    except AuthenticationRequiredError as e:
        console.print(f"❌ YouTube authentication required: {e.message}", style="red")
        console.print("💡 Reconnect your account and update the youtube token_file setting", style="yellow")
        raise click.exceptions.Exit(1)
    except (NotFoundError, YouTubeError) as e:
        logger.error(f"Watch-later import failed: {e}")
        console.print(f"❌ {e}", style="red")
        raise click.exceptions.Exit(1)

    console.print(f"✅ Imported {result.imported} new videos, updated {result.updated}", style="green")
