import tmdbsimple as tmdb
import logging
import requests
from utils.errors import TMDBError

logger = logging.getLogger(__name__)

class TMDBService:
    """
    Service for interacting with the TMDB API: show, movie and season details,
    IMDb cross-reference lookups and movie title search.

    Every call is a single bounded HTTP request. Failures raise TMDBError carrying
    the HTTP status code (None for network failures) and the upstream status_message,
    so callers can tell "not found" (404) apart from other failures.

    Methods:
        get_show(id): Get raw details for a TV show.
        get_movie(id): Get raw details for a movie.
        get_season(id, season): Get raw details (including episodes) for one season of a show.
        find_by_imdb_id(imdb_id): Cross-reference an IMDb ID to TMDB movie/tv results.
        search_movies(query): Search for movies by title.
    """
    def __init__(self, api_key: str, timeout: float = 10.0):
        self.api_key = api_key
        self.timeout = timeout
        tmdb.API_KEY = self.api_key
        tmdb.REQUESTS_TIMEOUT = self.timeout
        tmdb.REQUESTS_SESSION = requests.Session()

    @staticmethod
    def _to_error(e: requests.exceptions.RequestException, context: str) -> TMDBError:
        response = getattr(e, "response", None)
        if response is None:
            logger.error(f"TMDB request failed for {context}: {e}")
            return TMDBError(str(e))
        message = response.reason or str(e)
        try:
            message = response.json().get("status_message") or message
        except ValueError:
            pass
        logger.warning(f"TMDB returned {response.status_code} for {context}: {message}")
        return TMDBError(message, status_code=response.status_code)

    def get_show(self, id: int) -> dict:
        """ Get the details of a specific show

        Args:
            id: The TMDB ID of the show

        Returns:
            The TMDB tv details response. Keys used by WatchSync:
            - id, name, original_name, overview, poster_path, backdrop_path
            - first_air_date, last_air_date, status
            - number_of_seasons: The number of seasons of the show

        Raises:
            TMDBError: If the request fails.
        """
        try:
            return tmdb.TV(id=id).info()
        except requests.exceptions.RequestException as e:
            raise self._to_error(e, f"show {id}") from e

    def get_movie(self, id: int) -> dict:
        """ Get the details of a specific movie

        Args:
            id: The TMDB ID of the movie

        Returns:
            The TMDB movie details response. Keys used by WatchSync:
            - id, imdb_id, title, original_title, overview
            - poster_path, backdrop_path, release_date

        Raises:
            TMDBError: If the request fails.
        """
        try:
            return tmdb.Movies(id=id).info()
        except requests.exceptions.RequestException as e:
            raise self._to_error(e, f"movie {id}") from e

    def get_season(self, id: int, season: int) -> dict:
        """ Get the details of a specific season for a show

        Args:
            id: The TMDB ID of the show
            season: The season number

        Returns:
            A dictionary containing the details of the season with the following keys:
            - id: The ID of the season
            - air_date: The air date of the season
            - episodes: A list of dicts containing episode details
                - air_date, episode_number, season_number, name, overview
                - runtime: The runtime of the episode in minutes
                - still_path: The still path of the episode

        Raises:
            TMDBError: If the request fails.
        """
        try:
            return tmdb.TV_Seasons(tv_id=id, season_number=season).info()
        except requests.exceptions.RequestException as e:
            raise self._to_error(e, f"show {id} season {season}") from e

    def find_by_imdb_id(self, imdb_id: str) -> dict:
        """ Cross-reference an IMDb ID to TMDB records

        Args:
            imdb_id: The full IMDb ID, including the "tt" prefix

        Returns:
            A dictionary with movie_results, tv_results, tv_episode_results,
            tv_season_results and person_results lists.

        Raises:
            TMDBError: If the request fails.
        """
        try:
            return tmdb.Find(id=imdb_id).info(external_source="imdb_id")
        except requests.exceptions.RequestException as e:
            raise self._to_error(e, f"IMDb ID {imdb_id}") from e

    def search_movies(self, query: str) -> dict:
        """ Search for movies by title

        Args:
            query: The title to search for

        Returns:
            A dictionary containing page, results, total_pages and total_results.
            Each result has id, title, overview, poster_path, release_date and popularity.

        Raises:
            TMDBError: If the request fails.
        """
        try:
            return tmdb.Search().movie(query=query, include_adult=False)
        except requests.exceptions.RequestException as e:
            raise self._to_error(e, f"movie search '{query}'") from e
