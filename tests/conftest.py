import os
import sys
import pytest

# Add project root to sys.path for local imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from utils.watchsync_config import load_configuration, write_temp_config, PacingSettings
from utils.errors import TMDBError
from services.db_factory import create_db_service
from services.tmdb_service import TMDBService
from services.auth_service import CredentialProvider

# ────────────────────────────────────────────────
# TMDB PAYLOADS
# ────────────────────────────────────────────────

SHOW_PAYLOAD = {
    "id": 1399,
    "name": "Mock Show",
    "overview": "Test Overview",
    "poster_path": "/poster.jpg",
    "backdrop_path": "",
    "first_air_date": "2011-04-17",
    "last_air_date": "2019-05-19",
    "status": "Ended",
    "number_of_seasons": 1,
}

MOVIE_PAYLOAD = {
    "id": 550,
    "imdb_id": "tt0137523",
    "title": "Fight Club",
    "overview": "An insomniac office worker...",
    "poster_path": "/fight.jpg",
    "backdrop_path": "/fight_backdrop.jpg",
    "release_date": "1999-10-15",
}

SEASON_PAYLOAD = {
    "id": 3624,
    "air_date": "2011-04-17",
    "season_number": 1,
    "episodes": [
        {
            "episode_number": 1,
            "season_number": 1,
            "name": "Episode 1",
            "overview": "Overview 1",
            "air_date": "2011-04-17",
            "runtime": 62,
            "still_path": "/still1.jpg",
        },
        {
            "episode_number": 2,
            "season_number": 1,
            "name": "Episode 2",
            "overview": "Overview 2",
            "air_date": "2011-04-24",
            "runtime": 56,
            "still_path": "/still2.jpg",
        },
    ],
}


def tmdb_not_found():
    return TMDBError("The resource you requested could not be found.", status_code=404)


# ────────────────────────────────────────────────
# CONFIGURATION FIXTURES
# ────────────────────────────────────────────────

@pytest.fixture
def test_config_path(tmp_path):
    """Create a temporary configuration file for WatchSync tests."""
    return write_temp_config({
        "Database": {"type": "sqlite"},
        "SQLite": {"db_file": str(tmp_path / "database" / "test.db")},
        "TMDB": {"api_key": "test_api_key"},
        "YouTube": {"token_file": str(tmp_path / "token.json")},
        "Pacing": {"entry_delay": 0, "season_delay": 0, "show_delay": 0},
    }, str(tmp_path))


@pytest.fixture
def config(test_config_path):
    """Load the configuration from the test config path."""
    return load_configuration(str(test_config_path))


@pytest.fixture
def zero_pacing():
    return PacingSettings(entry_delay=0, season_delay=0, show_delay=0, progress_every=10)


# ────────────────────────────────────────────────
# DATABASE FIXTURES
# ────────────────────────────────────────────────

@pytest.fixture
def db_service(config):
    """Return a database service initialized with the test database."""
    db = create_db_service(config)
    db.initialize()
    return db


# ────────────────────────────────────────────────
# MOCK FIXTURES
# ────────────────────────────────────────────────

@pytest.fixture
def mock_tmdb_service(mocker):
    """
    Mocked TMDBService knowing one show (1399) and one movie (550).
    Any other ID is a 404.
    """
    mock = mocker.Mock(spec=TMDBService)
    mock.api_key = "test_api_key"

    def get_show(tmdb_id):
        if tmdb_id == SHOW_PAYLOAD["id"]:
            return dict(SHOW_PAYLOAD)
        raise tmdb_not_found()

    def get_movie(tmdb_id):
        if tmdb_id == MOVIE_PAYLOAD["id"]:
            return dict(MOVIE_PAYLOAD)
        raise tmdb_not_found()

    def find_by_imdb_id(imdb_id):
        results = {"movie_results": [], "tv_results": []}
        if imdb_id == "tt0137523":
            results["movie_results"] = [{"id": 550, "title": "Fight Club"}]
        elif imdb_id == "tt0944947":
            results["tv_results"] = [{"id": 1399, "name": "Mock Show"}]
        return results

    mock.get_show.side_effect = get_show
    mock.get_movie.side_effect = get_movie
    mock.get_season.return_value = SEASON_PAYLOAD
    mock.find_by_imdb_id.side_effect = find_by_imdb_id
    mock.search_movies.return_value = {
        "results": [
            {"id": 550, "title": "Fight Club", "release_date": "1999-10-15", "popularity": 61.4},
        ]
    }
    return mock


@pytest.fixture
def mock_credential_provider(mocker):
    provider = mocker.Mock(spec=CredentialProvider)
    provider.get_valid_credential.return_value = object()
    return provider


@pytest.fixture
def sleeps(mocker):
    """Stand-in for time.sleep that records the requested delays."""
    return mocker.Mock(return_value=None)


@pytest.fixture
def cli_obj(config, db_service, mock_tmdb_service, mock_credential_provider, zero_pacing):
    """Context object as built by the CLI group, with mocked upstream services."""
    return {
        "config": config,
        "db": db_service,
        "tmdb": mock_tmdb_service,
        "credential_provider": mock_credential_provider,
        "pacing": zero_pacing,
        "dry_run": False,
    }
