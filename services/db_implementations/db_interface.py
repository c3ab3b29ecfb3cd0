from abc import ABC, abstractmethod
from typing import List, Dict, Any, Optional
import logging

logger = logging.getLogger(__name__)

class DatabaseInterface(ABC):
    """
    Abstract base class defining the repository contract for WatchSync.

    Every create method raises UniqueConstraintError when a record with the same
    unique key already exists. Every update method takes a dict of mutable fields
    and rejects fields outside the table's whitelist with ValueError.

    Methods:
        initialize(): Initialize the database schema.
        add_show(show): Insert a show, returning its database ID.
        update_show(show_id, fields): Update mutable show fields.
        get_show_by_tmdb_id(tmdb_id): Fetch a show record by TMDB ID.
        get_show_by_id(show_id): Fetch a show record by database ID.
        get_all_shows(include_archived): List shows.
        add_movie(movie): Insert a movie, returning its database ID.
        update_movie(movie_id, fields): Update mutable movie fields.
        get_movie_by_tmdb_id(tmdb_id): Fetch a movie record by TMDB ID.
        get_all_movies(): List movies.
        get_episodes_by_show_id(show_id): List a show's episodes.
        add_episode(episode): Insert a new episode.
        upsert_episode(episode): Insert an episode or refresh its descriptive fields, keeping watch state.
        add_video(video): Insert a video, returning its database ID.
        update_video(video_id, fields): Update descriptive video fields.
        get_video_by_youtube_id(youtube_id): Fetch a video record by YouTube ID.
        get_all_videos(state): List videos, optionally filtered by state.
        backup_database(): Backup the database.
        is_read_only(): Check if database is in read-only mode.
    """

    @abstractmethod
    def initialize(self) -> None:
        """Initialize the database schema."""
        pass

    @abstractmethod
    def add_show(self, show: Any) -> int:
        """Add a show to the database and return its ID."""
        pass

    @abstractmethod
    def update_show(self, show_id: int, fields: Dict[str, Any]) -> None:
        """Update mutable fields of a show."""
        pass

    @abstractmethod
    def get_show_by_tmdb_id(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        """Fetch a show record by TMDB ID."""
        pass

    @abstractmethod
    def get_show_by_id(self, show_id: int) -> Optional[Dict[str, Any]]:
        """Get a show by its database ID."""
        pass

    @abstractmethod
    def get_all_shows(self, include_archived: bool = True) -> List[Dict[str, Any]]:
        """Get all shows from the database."""
        pass

    @abstractmethod
    def add_movie(self, movie: Any) -> int:
        """Add a movie to the database and return its ID."""
        pass

    @abstractmethod
    def update_movie(self, movie_id: int, fields: Dict[str, Any]) -> None:
        """Update mutable fields of a movie."""
        pass

    @abstractmethod
    def get_movie_by_tmdb_id(self, tmdb_id: int) -> Optional[Dict[str, Any]]:
        """Fetch a movie record by TMDB ID."""
        pass

    @abstractmethod
    def get_all_movies(self) -> List[Dict[str, Any]]:
        """Get all movies from the database."""
        pass

    @abstractmethod
    def get_episodes_by_show_id(self, show_id: int) -> List[Dict[str, Any]]:
        """Get all episodes for a show by its database ID."""
        pass

    @abstractmethod
    def add_episode(self, episode: Any) -> None:
        """Insert a new episode."""
        pass

    @abstractmethod
    def upsert_episode(self, episode: Any) -> None:
        """Insert an episode, or update the descriptive fields of the existing one without touching its watch state."""
        pass

    @abstractmethod
    def add_video(self, video: Any) -> int:
        """Add a video to the database and return its ID."""
        pass

    @abstractmethod
    def update_video(self, video_id: int, fields: Dict[str, Any]) -> None:
        """Update descriptive fields of a video. The workflow state is never updated here."""
        pass

    @abstractmethod
    def get_video_by_youtube_id(self, youtube_id: str) -> Optional[Dict[str, Any]]:
        """Fetch a video record by YouTube ID."""
        pass

    @abstractmethod
    def get_all_videos(self, state: Optional[str] = None) -> List[Dict[str, Any]]:
        """Get all videos, optionally filtered by workflow state."""
        pass

    @abstractmethod
    def backup_database(self) -> str:
        """
        Backs up the database.
        Returns the path or identifier of the backup.
        """
        pass

    @abstractmethod
    def is_read_only(self) -> bool:
        """Check if database is in read-only mode."""
        pass
