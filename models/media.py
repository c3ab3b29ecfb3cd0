"""
Import-side models for WatchSync: raw import entries and canonical media references.
"""
import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict


class MediaKind(str, Enum):
    """Kind of record in the metadata API."""
    MOVIE = "movie"
    TV = "tv"


class IdSpace(str, Enum):
    """Identifier space an import entry is known to belong to."""
    TMDB = "tmdb"
    IMDB = "imdb"


class ImportEntry(BaseModel):
    """
    A single entry from a structured feed file.

    Attributes:
        external_ref (str): Raw reference, e.g. "tmdb:550", "550" or "tt0137523".
        saved_at_millis (int): Time the user saved the item, in epoch milliseconds.
    """

    model_config = ConfigDict(frozen=True)

    external_ref: str = Field(..., description="Raw external reference")
    saved_at_millis: int = Field(..., description="Saved-at timestamp in epoch milliseconds")

    @property
    def saved_at(self) -> datetime.datetime:
        return datetime.datetime.fromtimestamp(self.saved_at_millis / 1000, tz=datetime.timezone.utc)


class LetterboxdEntry(BaseModel):
    """
    A single row from a Letterboxd CSV export.

    Attributes:
        watched_date (datetime.datetime): Date the entry was added.
        title (str): Film title.
        year (int): Release year.
        source_uri (str): Letterboxd URI of the film.
    """

    model_config = ConfigDict(frozen=True)

    watched_date: datetime.datetime
    title: str = Field(..., min_length=1)
    year: int
    source_uri: str = ""


class CanonicalMediaRef(BaseModel):
    """Resolved identity of one metadata API record."""

    model_config = ConfigDict(frozen=True)

    canonical_id: int = Field(..., gt=0, description="TMDB ID")
    media_kind: MediaKind


class Skipped(BaseModel):
    """An identifier that could not be mapped to a canonical reference."""

    model_config = ConfigDict(frozen=True)

    reason: str
    raw: Optional[str] = None
