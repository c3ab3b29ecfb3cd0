"""
Metadata fetching: normalized show, movie and episode records from TMDB.
"""
import time
import logging
from typing import Callable, List
from models.metadata import EpisodeDetails, MovieDetails, ShowDetails
from services.tmdb_service import TMDBService
from utils.errors import TMDBError
from utils.pacing import paced

logger = logging.getLogger(__name__)

DEFAULT_SEASON_DELAY = 0.25


class MetadataFetcher:
    """
    Fetches and normalizes TMDB records.

    Upstream failures surface as TMDBError (status_code 404 means "not found").
    Only fetch_episodes swallows errors, and only per season.

    Attributes:
        tmdb (TMDBService): Metadata client.
        season_delay (float): Seconds to wait between season fetches.
    """

    def __init__(
        self,
        tmdb: TMDBService,
        season_delay: float = DEFAULT_SEASON_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.tmdb = tmdb
        self.season_delay = season_delay
        self.sleep = sleep

    def fetch_movie(self, tmdb_id: int) -> MovieDetails:
        return MovieDetails.from_tmdb(self.tmdb.get_movie(tmdb_id))

    def fetch_show(self, tmdb_id: int) -> ShowDetails:
        return ShowDetails.from_tmdb(self.tmdb.get_show(tmdb_id))

    def fetch_episodes(self, tmdb_id: int) -> List[EpisodeDetails]:
        """
        Fetch every episode of seasons 1..N of a show, one season at a time.

        Season 0 (specials) is not fetched. A failing season is logged and its
        episodes are left out of the result; the remaining seasons still run.

        Args:
            tmdb_id (int): TMDB ID of the show.

        Returns:
            List[EpisodeDetails]: Episodes in season order.

        Raises:
            TMDBError: If the show details (season count) cannot be fetched.
        """
        show = self.fetch_show(tmdb_id)
        seasons = list(range(1, show.number_of_seasons + 1))
        logger.debug(f"Fetching {len(seasons)} seasons for TMDB ID {tmdb_id}")

        episodes: List[EpisodeDetails] = []
        for _, season_number in paced(seasons, self.season_delay, sleep=self.sleep):
            try:
                season = self.tmdb.get_season(tmdb_id, season_number)
            except TMDBError as e:
                logger.warning(f"Failed to fetch season {season_number} for TMDB ID {tmdb_id}: {e}")
                continue

            for raw in season.get("episodes") or []:
                try:
                    episodes.append(EpisodeDetails.from_tmdb(raw, season_number))
                except (KeyError, ValueError) as e:
                    logger.warning(f"Skipping malformed episode in season {season_number} of {tmdb_id}: {e}")

        logger.info(f"Fetched {len(episodes)} episodes across {len(seasons)} seasons for TMDB ID {tmdb_id}")
        return episodes
