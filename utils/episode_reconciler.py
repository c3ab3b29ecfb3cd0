"""
Episode reconciliation: merge freshly fetched episodes into local storage
without losing the user's watched state.
"""
import logging
from typing import Any, Dict, Iterable, Optional, Tuple
from models.episode import Episode
from models.metadata import EpisodeDetails
from models.results import ReconcileResult
from services.db_implementations.db_interface import DatabaseInterface
from utils.errors import UniqueConstraintError

logger = logging.getLogger(__name__)

WatchState = Tuple[bool, Optional[Any]]


def _watch_state_by_key(existing: Iterable[Dict[str, Any]]) -> Dict[Tuple[int, int], WatchState]:
    lookup = {}
    for record in existing:
        key = (record["season_number"], record["episode_number"])
        lookup[key] = (bool(record.get("is_watched")), record.get("watched_at"))
    return lookup


def reconcile(
    db: DatabaseInterface,
    tv_show_id: int,
    existing_episodes: Iterable[Dict[str, Any]],
    fetched_episodes: Iterable[EpisodeDetails],
    dry_run: bool = False,
) -> ReconcileResult:
    """
    Create or update a show's episodes from a fresh fetch.

    New keys are inserted unwatched. Known keys get the fetched descriptive
    fields only. Their watch state is whatever storage holds at write time.
    Episodes missing from the fetch are left in place.

    Args:
        db (DatabaseInterface): Repository to write to.
        tv_show_id (int): Database ID of the show.
        existing_episodes: Episode records currently stored for the show.
        fetched_episodes: Normalized episodes from TMDB.
        dry_run (bool): Count only, do not write.

    Returns:
        ReconcileResult: created/updated counts.
    """
    known = _watch_state_by_key(existing_episodes)
    result = ReconcileResult()

    for details in fetched_episodes:
        state = known.get(details.key)
        if state is None:
            episode = Episode.from_details(tv_show_id, details)
            if not dry_run:
                try:
                    db.add_episode(episode)
                except UniqueConstraintError:
                    # Inserted concurrently by another refresh
                    logger.debug(f"Episode S{details.season_number:02d}E{details.episode_number:02d} already exists for show {tv_show_id}")
                    continue
            known[details.key] = (False, None)
            result.created += 1
        else:
            is_watched, watched_at = state
            episode = Episode.from_details(tv_show_id, details, is_watched=is_watched, watched_at=watched_at)
            if not dry_run:
                db.upsert_episode(episode)
            result.updated += 1

    logger.debug(f"Reconciled show {tv_show_id}: {result.created} created, {result.updated} updated")
    return result
