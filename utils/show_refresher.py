"""
Show refresh utility for re-fetching episodes from TMDB and reconciling them into the local database.
"""
import time
import logging
from typing import Callable
from models.results import RefreshAllResult, RefreshResult
from models.show import Show
from services.db_implementations.db_interface import DatabaseInterface
from utils.episode_reconciler import reconcile
from utils.errors import NotFoundError
from utils.metadata_fetcher import MetadataFetcher
from utils.pacing import paced

logger = logging.getLogger(__name__)

DEFAULT_SHOW_DELAY = 0.5


class ShowRefresher:
    """
    Refreshes the episodes of one show or of every tracked show.

    Attributes:
        db (DatabaseInterface): Local repository.
        fetcher (MetadataFetcher): Episode source.
        show_delay (float): Seconds to wait between shows in refresh_all.
        dry_run (bool): If True, do not write to the database.
    """

    def __init__(
        self,
        db: DatabaseInterface,
        fetcher: MetadataFetcher,
        show_delay: float = DEFAULT_SHOW_DELAY,
        sleep: Callable[[float], None] = time.sleep,
        dry_run: bool = False,
    ):
        self.db = db
        self.fetcher = fetcher
        self.show_delay = show_delay
        self.sleep = sleep
        self.dry_run = dry_run

    def refresh_one(self, show_id: int) -> RefreshResult:
        """
        Refresh episodes for a single show.

        Args:
            show_id (int): Database ID of the show.

        Returns:
            RefreshResult: Success with counts, or a failure carrying the error message.

        Raises:
            NotFoundError: If no show with that ID exists locally.
        """
        record = self.db.get_show_by_id(show_id)
        if not record:
            raise NotFoundError(f"TV show {show_id} not found")
        show = Show.from_db_record(record)

        logger.info(f"Starting update for show {show.title} (tmdb_id={show.tmdb_id})")
        try:
            existing = self.db.get_episodes_by_show_id(show_id)
            fetched = self.fetcher.fetch_episodes(show.tmdb_id)
            counts = reconcile(self.db, show_id, existing, fetched, dry_run=self.dry_run)
        except Exception as e:
            logger.error(f"Failed to refresh episodes for {show.title} (id={show_id}): {e}")
            return RefreshResult(
                tv_show_id=show_id,
                tv_show_title=show.title,
                success=False,
                error=str(e),
            )

        logger.info(f"Completed update for {show.title}: {counts.created} new, {counts.updated} updated")
        return RefreshResult(
            tv_show_id=show_id,
            tv_show_title=show.title,
            success=True,
            new_episodes=counts.created,
            updated_episodes=counts.updated,
        )

    def refresh_all(self, include_archived: bool = False) -> RefreshAllResult:
        """
        Refresh every tracked show sequentially. One show's failure never stops the batch.

        Args:
            include_archived (bool): Also refresh archived shows.

        Returns:
            RefreshAllResult: Totals plus one result per show.
        """
        shows = self.db.get_all_shows(include_archived=include_archived)
        summary = RefreshAllResult(total=len(shows))
        logger.info(f"Refreshing episodes for {len(shows)} shows")

        for _, record in paced(shows, self.show_delay, sleep=self.sleep):
            try:
                result = self.refresh_one(record["id"])
            except NotFoundError as e:
                # Deleted between listing and refresh
                result = RefreshResult(
                    tv_show_id=record["id"],
                    tv_show_title=record.get("title") or "",
                    success=False,
                    error=str(e),
                )
            summary.results.append(result)
            if result.success:
                summary.successful += 1
            else:
                summary.failed += 1

        logger.info(f"Refresh complete: {summary.successful} succeeded, {summary.failed} failed")
        return summary
