import click
import logging
from utils.cli_helpers import console, get_service_from_context, pass_watchsync_context

logger = logging.getLogger(__name__)

"""
CLI command to back up the database, with dry-run support.
"""

@click.command('backup-db', help='Backs up the database.')
@click.pass_context
@pass_watchsync_context
def backup_db(ctx):
    """Backs up the database."""
    if ctx.obj["dry_run"]:
        logger.info("[DRY RUN] Simulating database backup.")
        console.print("[DRY RUN] Would back up the database.", style="yellow")
        return

    db_service = get_service_from_context(ctx, "db")
    try:
        backup_path = db_service.backup_database()
    except (OSError, FileNotFoundError) as e:
        logger.error(f"Database backup failed: {e}")
        console.print(f"❌ Database backup failed: {e}", style="red")
        raise click.exceptions.Exit(1)
    logger.info(f"Database backup created successfully: {backup_path}")
    console.print(f"✅ Backup written to {backup_path}", style="green")
