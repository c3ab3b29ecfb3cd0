# db_implementations/sqlite_implementation.py
import os
import sqlite3
import datetime
import logging
import shutil
from typing import List, Dict, Any, Optional, Iterable
from contextlib import contextmanager
from models.episode import Episode
from models.movie import Movie
from models.show import Show
from models.video import Video
from services.db_implementations.db_interface import DatabaseInterface
from utils.errors import UniqueConstraintError

logger = logging.getLogger(__name__)

SHOW_UPDATABLE_FIELDS = frozenset({
    "title", "overview", "poster_path", "backdrop_path",
    "first_air_date", "last_air_date", "status", "saved_at", "is_archived",
})
MOVIE_UPDATABLE_FIELDS = frozenset({
    "imdb_id", "title", "overview", "poster_path", "backdrop_path", "release_date", "saved_at",
})
VIDEO_UPDATABLE_FIELDS = frozenset({
    "title", "description", "thumbnail_url", "duration_seconds", "published_at", "channel_title",
})

class SQLiteDBService(DatabaseInterface):
    """
    SQLite implementation of the DatabaseInterface for WatchSync.

    Stores tracked shows, movies, episodes and watch-later videos. Unique keys are
    tv_shows.tmdb_id, movies.tmdb_id, videos.youtube_id and
    episodes(tv_show_id, season_number, episode_number); violating one on insert
    raises UniqueConstraintError.

    Attributes:
        db_file (str): Path to the SQLite database file.
        read_only (bool): Whether connections are opened read-only.

    Methods:
        initialize(): Initialize the database schema.
        add_show(show) / update_show(id, fields) / get_show_by_tmdb_id(tmdb_id)
        get_show_by_id(show_id) / get_all_shows(include_archived)
        add_movie(movie) / update_movie(id, fields) / get_movie_by_tmdb_id(tmdb_id) / get_all_movies()
        get_episodes_by_show_id(show_id) / add_episode(episode) / upsert_episode(episode)
        add_video(video) / update_video(id, fields) / get_video_by_youtube_id(youtube_id) / get_all_videos(state)
        backup_database(): Backup the database.
    """

    def __init__(self, db_file: str, read_only: bool = False) -> None:
        """Initialize the repository with a database file path.

        Args:
            db_file: Path to the SQLite database file
            read_only: If True, database will be opened in read-only mode
        """
        self.db_file = db_file
        self.read_only = read_only
        self._register_sqlite_datetime_adapters()

    @contextmanager
    def _connection(self):
        """Context manager to get a connection to the database."""
        if self.read_only:
            try:
                conn = sqlite3.connect(
                    f"file:{self.db_file}?mode=ro", uri=True,
                    detect_types=sqlite3.PARSE_DECLTYPES, timeout=10.0
                )
            except sqlite3.OperationalError:
                conn = sqlite3.connect(self.db_file, detect_types=sqlite3.PARSE_DECLTYPES, timeout=10.0)
        else:
            conn = sqlite3.connect(self.db_file, detect_types=sqlite3.PARSE_DECLTYPES, timeout=10.0)
        conn.execute("PRAGMA foreign_keys = ON")

        try:
            yield conn
            if not self.read_only:
                conn.commit()
        except sqlite3.IntegrityError as e:
            if not self.read_only:
                conn.rollback()
            if "UNIQUE constraint failed" in str(e):
                logger.debug(f"Unique constraint violated: {e}")
                raise UniqueConstraintError(str(e)) from e
            logger.exception(f"Integrity error in database operation: {e}")
            raise
        except sqlite3.Error as e:
            logger.exception(f"Error in database operation: {e}")
            if not self.read_only:
                conn.rollback()
            raise
        finally:
            conn.close()

    def __str__(self):
        """Return a string representation of the repository."""
        return f"SQLiteDBService(db_file={self.db_file})"

    @staticmethod
    def _datetime_to_iso(dt):
        """Convert a date or datetime object to ISO format string."""
        return dt.isoformat()

    @staticmethod
    def _iso_to_datetime(iso_str):
        """Convert an ISO format string to a datetime object."""
        if isinstance(iso_str, bytes):
            try:
                iso_str = iso_str.decode("utf-8")
            except UnicodeDecodeError:
                raise ValueError("Invalid byte sequence for datetime conversion")
        return datetime.datetime.fromisoformat(iso_str)

    @staticmethod
    def _iso_to_date(iso_str):
        """Convert an ISO format string to a date object."""
        if isinstance(iso_str, bytes):
            iso_str = iso_str.decode("utf-8")
        return datetime.date.fromisoformat(iso_str[:10])

    def _register_sqlite_datetime_adapters(self):
        """Register SQLite adapters and converters for date and datetime handling."""
        try:
            sqlite3.register_adapter(datetime.datetime, self._datetime_to_iso)
            sqlite3.register_adapter(datetime.date, self._datetime_to_iso)
            sqlite3.register_converter("DATETIME", self._iso_to_datetime)
            sqlite3.register_converter("DATE", self._iso_to_date)
        except sqlite3.Error as e:
            logger.exception(f"Error registering SQLite adapters: {e}")

    def _check_database_path(self):
        """Create the database directory if it does not exist yet."""
        logger.debug(f"Resolved DB path: {os.path.abspath(self.db_file)}")
        db_dir = os.path.dirname(self.db_file)
        if db_dir and not os.path.exists(db_dir):
            os.makedirs(db_dir, exist_ok=True)
            logger.info(f"Created database directory: {db_dir}")

    def _create_table_tv_shows(self, conn: sqlite3.Connection) -> None:
        conn.execute('''CREATE TABLE IF NOT EXISTS tv_shows (
                            id INTEGER PRIMARY KEY AUTOINCREMENT,
                            tmdb_id INTEGER NOT NULL UNIQUE,
                            title TEXT NOT NULL,
                            overview TEXT,
                            poster_path TEXT,
                            backdrop_path TEXT,
                            first_air_date DATE,
                            last_air_date DATE,
                            status TEXT,
                            saved_at DATETIME,
                            is_archived BOOLEAN NOT NULL DEFAULT 0,
                            created_at DATETIME NOT NULL)''')

    def _create_table_movies(self, conn: sqlite3.Connection) -> None:
        conn.execute('''CREATE TABLE IF NOT EXISTS movies (
                            id INTEGER PRIMARY KEY AUTOINCREMENT,
                            tmdb_id INTEGER NOT NULL UNIQUE,
                            imdb_id TEXT,
                            title TEXT NOT NULL,
                            overview TEXT,
                            poster_path TEXT,
                            backdrop_path TEXT,
                            release_date DATE,
                            saved_at DATETIME,
                            created_at DATETIME NOT NULL)''')

    def _create_table_episodes(self, conn: sqlite3.Connection) -> None:
        conn.execute('''CREATE TABLE IF NOT EXISTS episodes (
                            id INTEGER PRIMARY KEY AUTOINCREMENT,
                            tv_show_id INTEGER NOT NULL,
                            season_number INTEGER NOT NULL,
                            episode_number INTEGER NOT NULL,
                            name TEXT,
                            overview TEXT,
                            air_date DATE,
                            runtime INTEGER,
                            still_path TEXT,
                            is_watched BOOLEAN NOT NULL DEFAULT 0,
                            watched_at DATETIME,
                            UNIQUE (tv_show_id, season_number, episode_number),
                            CONSTRAINT FK_episodes_tv_shows FOREIGN KEY (tv_show_id) REFERENCES tv_shows(id) ON DELETE CASCADE)''')

    def _create_table_videos(self, conn: sqlite3.Connection) -> None:
        conn.execute('''CREATE TABLE IF NOT EXISTS videos (
                            id INTEGER PRIMARY KEY AUTOINCREMENT,
                            youtube_id TEXT NOT NULL UNIQUE,
                            title TEXT NOT NULL,
                            description TEXT,
                            thumbnail_url TEXT,
                            duration_seconds INTEGER,
                            published_at DATETIME,
                            channel_title TEXT,
                            youtube_url TEXT NOT NULL,
                            added_to_playlist_at DATETIME,
                            state TEXT NOT NULL DEFAULT 'feed')''')

    def initialize(self) -> None:
        """Create every table if it does not already exist."""
        if self.read_only:
            raise RuntimeError("Cannot initialize a read-only database")
        self._check_database_path()
        with self._connection() as conn:
            self._create_table_tv_shows(conn)
            self._create_table_movies(conn)
            self._create_table_episodes(conn)
            self._create_table_videos(conn)
        logger.info(f"Database initialized at {self.db_file}")

    def _fetch_one(self, query: str, params: tuple) -> Optional[Dict[str, Any]]:
        with self._connection() as conn:
            conn.row_factory = sqlite3.Row
            row = conn.execute(query, params).fetchone()
            return dict(row) if row else None

    def _fetch_all(self, query: str, params: tuple = ()) -> List[Dict[str, Any]]:
        with self._connection() as conn:
            conn.row_factory = sqlite3.Row
            return [dict(row) for row in conn.execute(query, params).fetchall()]

    def _update(self, table: str, row_id: int, fields: Dict[str, Any], allowed: Iterable[str]) -> None:
        unknown = set(fields) - set(allowed)
        if unknown:
            raise ValueError(f"Cannot update {table} field(s): {', '.join(sorted(unknown))}")
        if not fields:
            return
        assignments = ", ".join(f"{name} = ?" for name in fields)
        with self._connection() as conn:
            conn.execute(f"UPDATE {table} SET {assignments} WHERE id = ?", (*fields.values(), row_id))
        logger.debug(f"Updated {table} id={row_id}: {sorted(fields)}")

    # --------------------- Show methods ---------------------
    def add_show(self, show: Show) -> int:
        """Insert a show and return its database ID."""
        with self._connection() as conn:
            cursor = conn.execute('''
                INSERT INTO tv_shows (
                    tmdb_id, title, overview, poster_path, backdrop_path,
                    first_air_date, last_air_date, status, saved_at, is_archived, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', show.to_db_tuple())
            logger.info(f"Inserted show: {show.title} (tmdb_id={show.tmdb_id})")
            return cursor.lastrowid

    def update_show(self, show_id: int, fields: Dict[str, Any]) -> None:
        self._update("tv_shows", show_id, fields, SHOW_UPDATABLE_FIELDS)

    def get_show_by_tmdb_id(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        """Return the show with the given TMDB ID, or None."""
        return self._fetch_one("SELECT * FROM tv_shows WHERE tmdb_id = ?", (tmdb_id,))

    def get_show_by_id(self, show_id: int) -> Optional[Dict[str, Any]]:
        """Return the show with the given database ID, or None."""
        return self._fetch_one("SELECT * FROM tv_shows WHERE id = ?", (show_id,))

    def get_all_shows(self, include_archived: bool = True) -> List[Dict[str, Any]]:
        """Return all shows ordered by ID, optionally excluding archived ones."""
        if include_archived:
            shows = self._fetch_all("SELECT * FROM tv_shows ORDER BY id")
        else:
            shows = self._fetch_all("SELECT * FROM tv_shows WHERE is_archived = 0 ORDER BY id")
        logger.debug(f"Fetched {len(shows)} shows from tv_shows")
        return shows

    # --------------------- Movie methods ---------------------
    def add_movie(self, movie: Movie) -> int:
        """Insert a movie and return its database ID."""
        with self._connection() as conn:
            cursor = conn.execute('''
                INSERT INTO movies (
                    tmdb_id, imdb_id, title, overview, poster_path, backdrop_path,
                    release_date, saved_at, created_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', movie.to_db_tuple())
            logger.info(f"Inserted movie: {movie.title} (tmdb_id={movie.tmdb_id})")
            return cursor.lastrowid

    def update_movie(self, movie_id: int, fields: Dict[str, Any]) -> None:
        self._update("movies", movie_id, fields, MOVIE_UPDATABLE_FIELDS)

    def get_movie_by_tmdb_id(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        """Return the movie with the given TMDB ID, or None."""
        return self._fetch_one("SELECT * FROM movies WHERE tmdb_id = ?", (tmdb_id,))

    def get_all_movies(self) -> List[Dict[str, Any]]:
        movies = self._fetch_all("SELECT * FROM movies ORDER BY id")
        logger.debug(f"Fetched {len(movies)} movies")
        return movies

    # --------------------- Episode methods ---------------------
    def get_episodes_by_show_id(self, show_id: int) -> List[Dict[str, Any]]:
        """Return all episodes of a show ordered by season and episode number."""
        episodes = self._fetch_all(
            "SELECT * FROM episodes WHERE tv_show_id = ? ORDER BY season_number, episode_number",
            (show_id,)
        )
        logger.debug(f"Fetched {len(episodes)} episodes for tv_show_id={show_id}")
        return episodes

    def add_episode(self, episode: Episode) -> None:
        """Insert a new episode. Raises UniqueConstraintError if the key exists."""
        with self._connection() as conn:
            conn.execute('''
                INSERT INTO episodes (
                    tv_show_id, season_number, episode_number, name, overview,
                    air_date, runtime, still_path, is_watched, watched_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            ''', episode.to_db_tuple())

    def upsert_episode(self, episode: Episode) -> None:
        """
        Insert an episode, or refresh the descriptive columns of the existing row with the same key.
        The stored is_watched and watched_at always win over the incoming values on conflict.
        """
        with self._connection() as conn:
            conn.execute('''
                INSERT INTO episodes (
                    tv_show_id, season_number, episode_number, name, overview,
                    air_date, runtime, still_path, is_watched, watched_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(tv_show_id, season_number, episode_number) DO UPDATE SET
                    name = excluded.name,
                    overview = excluded.overview,
                    air_date = excluded.air_date,
                    runtime = excluded.runtime,
                    still_path = excluded.still_path
            ''', episode.to_db_tuple())

    # --------------------- Video methods ---------------------
    def add_video(self, video: Video) -> int:
        """Insert a video and return its database ID."""
        with self._connection() as conn:
            cursor = conn.execute('''
                INSERT INTO videos (
                    youtube_id, title, description, thumbnail_url, duration_seconds,
                    published_at, channel_title, youtube_url, added_to_playlist_at, state
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, COALESCE(?, 'feed'))
            ''', video.to_db_tuple())
            logger.debug(f"Inserted video: {video.youtube_id}")
            return cursor.lastrowid

    def update_video(self, video_id: int, fields: Dict[str, Any]) -> None:
        self._update("videos", video_id, fields, VIDEO_UPDATABLE_FIELDS)

    def get_video_by_youtube_id(self, youtube_id: str) -> Optional[Dict[str, Any]]:
        """Return the video with the given YouTube ID, or None."""
        return self._fetch_one("SELECT * FROM videos WHERE youtube_id = ?", (youtube_id,))

    def get_all_videos(self, state: Optional[str] = None) -> List[Dict[str, Any]]:
        if state is None:
            return self._fetch_all("SELECT * FROM videos ORDER BY id")
        return self._fetch_all("SELECT * FROM videos WHERE state = ? ORDER BY id", (state,))

    def is_read_only(self) -> bool:
        """Check if database is in read-only mode."""
        return self.read_only

    def backup_database(self) -> str:
        """
        Creates a backup of the SQLite database file.
        The backup is stored in a 'backups/sqlite' directory relative to the db file path,
        with a timestamp in the filename.
        """
        if not self.db_file or not os.path.exists(self.db_file):
            raise FileNotFoundError("Database file not found.")

        timestamp = datetime.datetime.now().strftime("%Y-%m-%d_%H-%M")
        db_dir = os.path.dirname(os.path.abspath(self.db_file))
        backup_dir = os.path.join(db_dir, "..", "backups", "sqlite")
        os.makedirs(backup_dir, exist_ok=True)

        db_filename = os.path.basename(self.db_file)
        backup_filename = f"{os.path.splitext(db_filename)[0]}_{timestamp}.db"
        backup_path = os.path.join(backup_dir, backup_filename)

        shutil.copy2(self.db_file, backup_path)
        logger.info(f"SQLite database backed up to {backup_path}")
        return backup_path
