"""
Models package for WatchSync.

This package contains Pydantic-based models for tracked shows, movies, episodes
and videos, the import entry types, normalized TMDB metadata and result records.
"""

from .show import Show
from .movie import Movie
from .episode import Episode
from .video import Video, VideoState
from .media import MediaKind, IdSpace, ImportEntry, LetterboxdEntry, CanonicalMediaRef, Skipped

__all__ = [
    "Show", "Movie", "Episode", "Video", "VideoState",
    "MediaKind", "IdSpace", "ImportEntry", "LetterboxdEntry", "CanonicalMediaRef", "Skipped",
]
