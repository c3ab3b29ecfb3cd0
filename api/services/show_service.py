"""
Show Service Module

Business logic behind the episode refresh endpoints. Refreshes are blocking
(paced TMDB calls), so they run in the threadpool.
"""

import logging
from starlette.concurrency import run_in_threadpool
from models.results import RefreshAllResult, RefreshResult
from utils.show_refresher import ShowRefresher

logger = logging.getLogger(__name__)


class ShowService:
    """
    Service class for show episode refreshes.

    Attributes:
        refresher (ShowRefresher): Configured show refresher.
    """

    def __init__(self, refresher: ShowRefresher):
        self.refresher = refresher

    async def refresh_episodes(self, show_id: int) -> RefreshResult:
        """
        Refresh one show's episodes.

        Raises:
            NotFoundError: If the show does not exist.
        """
        return await run_in_threadpool(self.refresher.refresh_one, show_id)

    async def refresh_all_episodes(self, include_archived: bool = False) -> RefreshAllResult:
        return await run_in_threadpool(self.refresher.refresh_all, include_archived)
