"""
Movie model for WatchSync, representing a locally tracked movie and its database serialization logic.
"""
import datetime
import logging
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from models.metadata import MovieDetails

logger = logging.getLogger(__name__)

class Movie(BaseModel):
    """
    Represents a movie tracked locally, keyed by its TMDB ID.

    Attributes:
        id (Optional[int]): Database ID (None until persisted).
        tmdb_id (int): TMDB ID of the movie (unique).
        imdb_id (Optional[str]): IMDb ID reported by TMDB.
        title (str): Movie title.
        overview (Optional[str]): Movie overview.
        poster_path (Optional[str]): TMDB poster path.
        backdrop_path (Optional[str]): TMDB backdrop path.
        release_date (Optional[datetime.date]): Release date.
        saved_at (Optional[datetime.datetime]): When the user added the movie.
        created_at (datetime.datetime): Record creation timestamp.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        extra='forbid'
    )

    id: Optional[int] = Field(None, description="Database ID")
    tmdb_id: int = Field(..., gt=0, description="TMDB ID of the movie")
    imdb_id: Optional[str] = Field(None, description="IMDb ID")
    title: str = Field(..., description="Movie title")
    overview: Optional[str] = Field(None, description="Movie overview")
    poster_path: Optional[str] = Field(None, description="TMDB poster path")
    backdrop_path: Optional[str] = Field(None, description="TMDB backdrop path")
    release_date: Optional[datetime.date] = Field(None, description="Release date")
    saved_at: Optional[datetime.datetime] = Field(None, description="When the user added the movie")
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now, description="Record creation timestamp")

    def to_db_tuple(self) -> tuple:
        """Serialize the Movie object as a tuple for database insertion."""
        return (
            self.tmdb_id,
            self.imdb_id,
            self.title,
            self.overview,
            self.poster_path,
            self.backdrop_path,
            self.release_date,
            self.saved_at,
            self.created_at
        )

    @classmethod
    def from_tmdb(cls, details: MovieDetails, saved_at: Optional[datetime.datetime] = None) -> "Movie":
        """Construct a Movie object from normalized TMDB movie details."""
        return cls(
            tmdb_id=details.tmdb_id,
            imdb_id=details.imdb_id,
            title=details.title,
            overview=details.overview,
            poster_path=details.poster_path,
            backdrop_path=details.backdrop_path,
            release_date=details.release_date,
            saved_at=saved_at
        )

    @classmethod
    def from_db_record(cls, record: dict) -> "Movie":
        """Construct a Movie object from a database record."""
        return cls(
            id=record.get("id"),
            tmdb_id=record["tmdb_id"],
            imdb_id=record.get("imdb_id"),
            title=record["title"],
            overview=record.get("overview"),
            poster_path=record.get("poster_path"),
            backdrop_path=record.get("backdrop_path"),
            release_date=record.get("release_date"),
            saved_at=record.get("saved_at"),
            created_at=record.get("created_at") or datetime.datetime.now()
        )
