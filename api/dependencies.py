# Dependency injection setup for WatchSync FastAPI application
# Provides functions to initialize and retrieve core services for API endpoints

from fastapi import Request
from services.auth_service import TokenFileCredentialProvider
from services.db_factory import create_db_service
from services.tmdb_service import TMDBService
from api.services.import_service import ImportService
from api.services.show_service import ShowService
from api.services.video_service import VideoService
from utils.bulk_importer import BulkImporter
from utils.metadata_fetcher import MetadataFetcher
from utils.show_refresher import ShowRefresher
from utils.watch_later_importer import WatchLaterImporter
from utils.watchsync_config import get_config_value, get_pacing_settings


def get_services(config):
    """
    Initialize and return all core services as a dictionary.
    This is called once at API startup and attached to app.state.services.
    """
    db = create_db_service(config)
    tmdb = TMDBService(
        get_config_value(config, "tmdb", "api_key", ""),
        timeout=get_config_value(config, "tmdb", "timeout", 10.0, float),
    )
    credential_provider = TokenFileCredentialProvider(
        get_config_value(config, "youtube", "token_file"),
        client_secret_file=get_config_value(config, "youtube", "client_secret_file"),
    )

    return {
        "db": db,
        "tmdb": tmdb,
        "credential_provider": credential_provider,
        "pacing": get_pacing_settings(config),
        "config": config,
    }


def get_import_service(request: Request) -> ImportService:
    """
    Dependency for import service.
    Returns an ImportService wired to the shared database and TMDB client.
    """
    services = request.app.state.services
    pacing = services["pacing"]
    importer = BulkImporter(
        services["db"],
        services["tmdb"],
        fetcher=MetadataFetcher(services["tmdb"], season_delay=pacing.season_delay),
        entry_delay=pacing.entry_delay,
        progress_every=pacing.progress_every,
    )
    return ImportService(importer)


def get_show_service(request: Request) -> ShowService:
    """
    Dependency for show service.
    Returns a ShowService for episode refresh endpoints.
    """
    services = request.app.state.services
    pacing = services["pacing"]
    refresher = ShowRefresher(
        services["db"],
        MetadataFetcher(services["tmdb"], season_delay=pacing.season_delay),
        show_delay=pacing.show_delay,
    )
    return ShowService(refresher)


def get_video_service(request: Request) -> VideoService:
    """
    Dependency for video service.
    Returns a VideoService for the watch-later import endpoint.
    """
    services = request.app.state.services
    return VideoService(WatchLaterImporter(services["db"], services["credential_provider"]))
