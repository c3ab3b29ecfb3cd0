"""
Main entry point for the WatchSync CLI.
- Sets up the Click command group and context object.
- Dynamically loads all CLI commands from this directory.
"""
import os
import importlib
import click
import logging
import rich_click as rclick
from utils.watchsync_config import DEFAULT_CONFIG_PATH, load_configuration, get_config_value, get_pacing_settings
from utils.logging_config import setup_logging
from services.auth_service import TokenFileCredentialProvider
from services.db_factory import create_db_service
from services.tmdb_service import TMDBService

logger = logging.getLogger(__name__)

@rclick.group()
@click.option('--logfile', '-l', type=click.Path(writable=True), help="Log to file")
@click.option('--verbose', '-v', count=True, help="Set verbosity level (-v = INFO, -vv = DEBUG)")
@click.option('--config', '-c', type=click.Path(), default=DEFAULT_CONFIG_PATH, help="Path to config file")
@click.option('--dry-run', is_flag=True, help="Run in dry-run mode (read-only database, nothing is written)")
@click.pass_context
def watchsync_cli(ctx: click.Context, verbose: int, logfile: str, config: str, dry_run: bool) -> None:
    """
    Main CLI group. Sets up the context object with configuration, database, TMDB
    and YouTube credential services. All subcommands share this context.

    Args:
        ctx (click.Context): Click context for Click command group.
        verbose (int): Verbosity level (-v = INFO, -vv = DEBUG).
        logfile (str): Path to log file.
        config (str): Path to configuration file.
        dry_run (bool): Run in dry-run mode (read-only operations).

    Returns:
        None
    """
    # If the context object is already set (tests inject one), do not reinitialize it
    if ctx.obj and all(k in ctx.obj for k in ("config", "db", "tmdb", "credential_provider", "pacing", "dry_run")):
        return

    if logfile and os.path.dirname(logfile):
        os.makedirs(os.path.dirname(logfile), exist_ok=True)

    setup_logging(verbosity=verbose, logfile=logfile)

    logger.info("Loading configuration and initializing services")
    cfg = load_configuration(config)

    db_service = None
    tmdb_service = None

    try:
        db_service = create_db_service(cfg, read_only=dry_run)
        logger.info("Database service initialized successfully")
    except (ValueError, KeyError) as e:
        logger.warning(f"Database service initialization failed: {e}")

    tmdb_api_key = get_config_value(cfg, 'tmdb', 'api_key')
    if tmdb_api_key:
        tmdb_service = TMDBService(tmdb_api_key, timeout=get_config_value(cfg, 'tmdb', 'timeout', 10.0, float))
        logger.info("TMDB service initialized successfully")
    else:
        logger.warning("TMDB service not configured: missing [tmdb] api_key")

    credential_provider = TokenFileCredentialProvider(
        get_config_value(cfg, 'youtube', 'token_file'),
        client_secret_file=get_config_value(cfg, 'youtube', 'client_secret_file'),
    )

    ctx.obj = {
        "config": cfg,
        "db": db_service,
        "tmdb": tmdb_service,
        "credential_provider": credential_provider,
        "pacing": get_pacing_settings(cfg),
        "dry_run": dry_run,
    }


# Dynamic discovery loop: auto-register all CLI commands in this directory
COMMAND_DIR = os.path.dirname(__file__)
for filename in sorted(os.listdir(COMMAND_DIR)):
    # Only import .py files that are not main.py or __init__.py
    if filename.endswith(".py") and filename not in {"main.py", "__init__.py"}:
        command_name = filename[:-3]
        module_name = f"cli.{command_name}"
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.warning(f"Failed to import {module_name}: {e}")
            continue
        cli_function = getattr(module, command_name, None)
        if cli_function:
            watchsync_cli.add_command(cli_function)
        else:
            logger.debug(f"No command function found in {module_name}")

if __name__ == '__main__':
    watchsync_cli()
