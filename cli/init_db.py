"""
CLI command to initialize the WatchSync database.
"""
import click
import logging
from utils.cli_helpers import console, get_service_from_context, pass_watchsync_context

logger = logging.getLogger(__name__)

@click.command("init-db", help="Create the shows, movies, episodes and videos tables.")
@click.pass_context
@pass_watchsync_context
def init_db(ctx):
    """Initialize the SQLite database."""
    if ctx.obj["dry_run"]:
        logger.info("DRY RUN: Would initialize the database (read-only mode)")
        console.print("[DRY RUN] Would initialize the database.", style="yellow")
        return

    db = get_service_from_context(ctx, "db")
    db.initialize()
    logger.info("Database initialized successfully.")
    console.print("✅ Database initialized successfully.", style="green")
