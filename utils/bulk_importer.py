"""
Bulk importer for adding saved shows and movies to the database from feed files and Letterboxd exports.
"""
import time
import datetime
import logging
from typing import Callable, List, Optional, Sequence, Union
from models.episode import Episode
from models.media import CanonicalMediaRef, IdSpace, ImportEntry, LetterboxdEntry, MediaKind, Skipped
from models.metadata import MovieSearchResult, get_image_url
from models.movie import Movie
from models.results import ImportSummary, ItemOutcome
from models.show import Show
from services.db_implementations.db_interface import DatabaseInterface
from services.tmdb_service import TMDBService
from utils.errors import UniqueConstraintError
from utils.feed_parser import load_feed_file, load_letterboxd_file
from utils.identifier_resolver import resolve
from utils.metadata_fetcher import MetadataFetcher
from utils.pacing import paced

logger = logging.getLogger(__name__)

DEFAULT_ENTRY_DELAY = 0.5
DEFAULT_PROGRESS_EVERY = 10


def _as_utc(value: Optional[datetime.datetime]) -> Optional[datetime.datetime]:
    if value is None:
        return None
    if isinstance(value, str):
        value = datetime.datetime.fromisoformat(value)
    if value.tzinfo is None:
        return value.replace(tzinfo=datetime.timezone.utc)
    return value


def is_newer(candidate: datetime.datetime, current: Optional[datetime.datetime]) -> bool:
    """True when `current` is unset or `candidate` is strictly later."""
    current = _as_utc(current)
    return current is None or _as_utc(candidate) > current


class BulkImporter:
    """
    Imports batches of saved items, one entry at a time with a fixed delay between entries.

    Each entry is isolated: a failure is recorded in the summary and the batch
    continues. Entries already tracked locally only get their saved_at moved
    forward, never back.

    Attributes:
        db (DatabaseInterface): Local repository.
        tmdb (TMDBService): Metadata client (identifier resolution and title search).
        fetcher (MetadataFetcher): Normalized detail and episode fetches.
        entry_delay (float): Seconds between entries.
        progress_every (int): Log progress after this many entries.
        dry_run (bool): If True, do not write to the database.
    """

    def __init__(
        self,
        db: DatabaseInterface,
        tmdb: TMDBService,
        fetcher: Optional[MetadataFetcher] = None,
        entry_delay: float = DEFAULT_ENTRY_DELAY,
        progress_every: int = DEFAULT_PROGRESS_EVERY,
        sleep: Callable[[float], None] = time.sleep,
        dry_run: bool = False,
    ):
        self.db = db
        self.tmdb = tmdb
        self.fetcher = fetcher or MetadataFetcher(tmdb, sleep=sleep)
        self.entry_delay = entry_delay
        self.progress_every = max(1, progress_every)
        self.sleep = sleep
        self.dry_run = dry_run

    def _log_progress(self, index: int, total: int) -> None:
        if (index + 1) % self.progress_every == 0:
            logger.info(f"Progress: {index + 1}/{total} entries processed")

    def _log_summary(self, summary: ImportSummary) -> None:
        logger.info(
            f"Import completed: total={summary.total}, imported={summary.imported} "
            f"({summary.tv_shows} TV shows, {summary.movies} movies), existing={summary.existing}, "
            f"skipped={summary.skipped}, errors={summary.errors}"
        )

    # --------------------- Per-kind upserts ---------------------
    def _add_episodes(self, tv_show_id: int, show: Show) -> int:
        """Fetch and insert every episode of a newly created show. Never raises."""
        try:
            fetched = self.fetcher.fetch_episodes(show.tmdb_id)
        except Exception as e:
            logger.warning(f"Error fetching episodes for TV show {show.tmdb_id}: {e}")
            return 0

        added = 0
        for details in fetched:
            try:
                self.db.add_episode(Episode.from_details(tv_show_id, details))
                added += 1
            except UniqueConstraintError:
                pass
            except Exception as e:
                logger.warning(
                    f"Error importing episode S{details.season_number:02d}E{details.episode_number:02d} "
                    f"for {show.title}: {e}"
                )
        logger.info(f"Imported {added} episodes for {show.title}")
        return added

    def import_show(self, ref: str, tmdb_id: int, saved_at: Optional[datetime.datetime]) -> ItemOutcome:
        existing = self.db.get_show_by_tmdb_id(tmdb_id)
        if existing:
            if saved_at and is_newer(saved_at, existing.get("saved_at")) and not self.dry_run:
                self.db.update_show(existing["id"], {"saved_at": saved_at})
            logger.info(f"TV show already exists: {existing['title']} (TMDB: {tmdb_id})")
            return ItemOutcome.ok(ref, MediaKind.TV, tmdb_id, created=False, title=existing["title"],
                                  poster_url=get_image_url(existing.get("poster_path")))

        show = Show.from_tmdb(self.fetcher.fetch_show(tmdb_id), saved_at=saved_at)
        if self.dry_run:
            logger.info(f"[DRY RUN] Would insert show: {show.title} (TMDB: {tmdb_id})")
            return ItemOutcome.ok(ref, MediaKind.TV, tmdb_id, created=True, title=show.title,
                                  poster_url=get_image_url(show.poster_path))

        try:
            tv_show_id = self.db.add_show(show)
        except UniqueConstraintError:
            logger.info(f"TV show {tmdb_id} was added concurrently, treating as existing")
            return ItemOutcome.ok(ref, MediaKind.TV, tmdb_id, created=False, title=show.title,
                                  poster_url=get_image_url(show.poster_path))

        logger.info(f"Imported TV show: {show.title} (TMDB: {tmdb_id}, DB ID: {tv_show_id})")
        self._add_episodes(tv_show_id, show)
        return ItemOutcome.ok(ref, MediaKind.TV, tmdb_id, created=True, title=show.title,
                              poster_url=get_image_url(show.poster_path))

    def import_movie(self, ref: str, tmdb_id: int, saved_at: Optional[datetime.datetime]) -> ItemOutcome:
        existing = self.db.get_movie_by_tmdb_id(tmdb_id)
        if existing:
            if saved_at and is_newer(saved_at, existing.get("saved_at")) and not self.dry_run:
                self.db.update_movie(existing["id"], {"saved_at": saved_at})
            logger.info(f"Movie already exists: {existing['title']} (TMDB: {tmdb_id})")
            return ItemOutcome.ok(ref, MediaKind.MOVIE, tmdb_id, created=False, title=existing["title"],
                                  poster_url=get_image_url(existing.get("poster_path")))

        movie = Movie.from_tmdb(self.fetcher.fetch_movie(tmdb_id), saved_at=saved_at)
        if self.dry_run:
            logger.info(f"[DRY RUN] Would insert movie: {movie.title} (TMDB: {tmdb_id})")
            return ItemOutcome.ok(ref, MediaKind.MOVIE, tmdb_id, created=True, title=movie.title,
                                  poster_url=get_image_url(movie.poster_path))

        try:
            movie_id = self.db.add_movie(movie)
        except UniqueConstraintError:
            logger.info(f"Movie {tmdb_id} was added concurrently, treating as existing")
            return ItemOutcome.ok(ref, MediaKind.MOVIE, tmdb_id, created=False, title=movie.title,
                                  poster_url=get_image_url(movie.poster_path))

        logger.info(f"Imported movie: {movie.title} (TMDB: {tmdb_id}, DB ID: {movie_id})")
        return ItemOutcome.ok(ref, MediaKind.MOVIE, tmdb_id, created=True, title=movie.title,
                              poster_url=get_image_url(movie.poster_path))

    def _import_ref(self, ref: str, resolved: CanonicalMediaRef, saved_at: Optional[datetime.datetime]) -> ItemOutcome:
        if resolved.media_kind == MediaKind.TV:
            return self.import_show(ref, resolved.canonical_id, saved_at)
        return self.import_movie(ref, resolved.canonical_id, saved_at)

    # --------------------- Batch entry points ---------------------
    def import_entry(self, entry: ImportEntry, expected_kind: Optional[Union[IdSpace, str]] = None) -> ItemOutcome:
        """Resolve and import a single feed entry. Exceptions propagate."""
        resolved = resolve(self.tmdb, entry.external_ref, expected_kind)
        if isinstance(resolved, Skipped):
            return ItemOutcome.skipped(entry.external_ref, resolved.reason)
        return self._import_ref(entry.external_ref, resolved, entry.saved_at)

    def import_batch(
        self,
        entries: Sequence[ImportEntry],
        expected_kind: Optional[Union[IdSpace, str]] = None,
    ) -> ImportSummary:
        """
        Import feed entries sequentially.

        Args:
            entries: Parsed feed entries.
            expected_kind: Identifier space of every entry, or None to detect per entry.

        Returns:
            ImportSummary: Counters plus one ItemOutcome per entry.
        """
        summary = ImportSummary(total=len(entries))
        logger.info(f"Starting import of {len(entries)} entries")

        for index, entry in paced(entries, self.entry_delay, sleep=self.sleep):
            try:
                outcome = self.import_entry(entry, expected_kind)
            except Exception as e:
                logger.error(f"Error processing entry {entry.external_ref}: {e}")
                outcome = ItemOutcome.failed(entry.external_ref, str(e))
            summary.record(outcome)
            self._log_progress(index, len(entries))

        self._log_summary(summary)
        return summary

    def _match_title(self, entry: LetterboxdEntry) -> Optional[MovieSearchResult]:
        response = self.tmdb.search_movies(entry.title)
        year = str(entry.year)
        for raw in response.get("results") or []:
            candidate = MovieSearchResult.from_tmdb(raw)
            if candidate.release_year == year:
                return candidate
        return None

    def import_csv_entry(self, entry: LetterboxdEntry, summary: ImportSummary) -> ItemOutcome:
        ref = f"{entry.title} ({entry.year})"
        match = self._match_title(entry)
        if match is None:
            logger.warning(f"No TMDB match for {ref}")
            summary.not_found.append(entry.title)
            return ItemOutcome.skipped(ref, "not_found")
        return self.import_movie(ref, match.tmdb_id, entry.watched_date)

    def import_from_csv(self, entries: Sequence[LetterboxdEntry]) -> ImportSummary:
        """
        Import Letterboxd entries as movies by title + release year match.

        Unmatched titles are listed in `not_found` and counted as skipped, not as errors.
        """
        summary = ImportSummary(total=len(entries))
        logger.info(f"Starting Letterboxd import of {len(entries)} entries")

        for index, entry in paced(entries, self.entry_delay, sleep=self.sleep):
            try:
                outcome = self.import_csv_entry(entry, summary)
            except Exception as e:
                logger.error(f"Error processing Letterboxd entry {entry.title} ({entry.year}): {e}")
                outcome = ItemOutcome.failed(f"{entry.title} ({entry.year})", str(e))
            summary.record(outcome)
            self._log_progress(index, len(entries))

        self._log_summary(summary)
        return summary

    def import_from_feed_file(self, path: str, id_space: Union[IdSpace, str]) -> ImportSummary:
        """Parse a feed file and import every entry as the given identifier space."""
        entries: List[ImportEntry] = load_feed_file(path)
        logger.info(f"Found {len(entries)} entries to process in {path} ({str(getattr(id_space, 'value', id_space)).upper()} IDs)")
        return self.import_batch(entries, id_space)

    def import_from_letterboxd_file(self, path: str) -> ImportSummary:
        """Parse a Letterboxd CSV export and import it."""
        return self.import_from_csv(load_letterboxd_file(path))
