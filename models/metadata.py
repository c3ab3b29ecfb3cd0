"""
Normalized metadata records built from TMDB API responses.

Every optional upstream field is defaulted to None; empty strings and zero
runtimes coming from TMDB are treated as missing.
"""
import datetime
import logging
from typing import Any, Optional
from pydantic import BaseModel, Field, ConfigDict, field_validator

logger = logging.getLogger(__name__)

TMDB_IMAGE_BASE = "https://image.tmdb.org/t/p"


def get_image_url(path: Optional[str], size: str = "w500") -> Optional[str]:
    """Build a full TMDB image URL from a poster/backdrop/still path."""
    if not path:
        return None
    return f"{TMDB_IMAGE_BASE}/{size}{path}"


def _or_none(value: Any) -> Any:
    return value if value else None


def _parse_date(value: Any) -> Optional[datetime.date]:
    if not value:
        return None
    if isinstance(value, datetime.date):
        return value
    try:
        return datetime.date.fromisoformat(str(value)[:10])
    except ValueError:
        logger.debug(f"Ignoring unparseable date value: {value!r}")
        return None


class _Normalized(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ShowDetails(_Normalized):
    tmdb_id: int
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    first_air_date: Optional[datetime.date] = None
    last_air_date: Optional[datetime.date] = None
    status: Optional[str] = None
    number_of_seasons: int = Field(0, ge=0)

    @field_validator("first_air_date", "last_air_date", mode="before")
    @classmethod
    def coerce_dates(cls, value):
        return _parse_date(value)

    @classmethod
    def from_tmdb(cls, data: dict) -> "ShowDetails":
        return cls(
            tmdb_id=data["id"],
            title=data.get("name") or data.get("original_name") or "",
            overview=_or_none(data.get("overview")),
            poster_path=_or_none(data.get("poster_path")),
            backdrop_path=_or_none(data.get("backdrop_path")),
            first_air_date=data.get("first_air_date"),
            last_air_date=data.get("last_air_date"),
            status=_or_none(data.get("status")),
            number_of_seasons=data.get("number_of_seasons") or 0,
        )


class MovieDetails(_Normalized):
    tmdb_id: int
    imdb_id: Optional[str] = None
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    backdrop_path: Optional[str] = None
    release_date: Optional[datetime.date] = None

    @field_validator("release_date", mode="before")
    @classmethod
    def coerce_dates(cls, value):
        return _parse_date(value)

    @classmethod
    def from_tmdb(cls, data: dict) -> "MovieDetails":
        return cls(
            tmdb_id=data["id"],
            imdb_id=_or_none(data.get("imdb_id")),
            title=data.get("title") or data.get("original_title") or "",
            overview=_or_none(data.get("overview")),
            poster_path=_or_none(data.get("poster_path")),
            backdrop_path=_or_none(data.get("backdrop_path")),
            release_date=data.get("release_date"),
        )


class EpisodeDetails(_Normalized):
    season_number: int = Field(..., ge=0)
    episode_number: int = Field(..., ge=0)
    name: Optional[str] = None
    overview: Optional[str] = None
    air_date: Optional[datetime.date] = None
    runtime: Optional[int] = None
    still_path: Optional[str] = None

    @field_validator("air_date", mode="before")
    @classmethod
    def coerce_dates(cls, value):
        return _parse_date(value)

    @classmethod
    def from_tmdb(cls, data: dict, season_number: int) -> "EpisodeDetails":
        return cls(
            season_number=data.get("season_number") or season_number,
            episode_number=data["episode_number"],
            name=_or_none(data.get("name")),
            overview=_or_none(data.get("overview")),
            air_date=data.get("air_date"),
            runtime=_or_none(data.get("runtime")),
            still_path=_or_none(data.get("still_path")),
        )

    @property
    def key(self) -> tuple:
        return (self.season_number, self.episode_number)


class MovieSearchResult(_Normalized):
    tmdb_id: int
    title: str
    overview: Optional[str] = None
    poster_path: Optional[str] = None
    release_date: Optional[str] = None
    popularity: Optional[float] = None

    @classmethod
    def from_tmdb(cls, data: dict) -> "MovieSearchResult":
        return cls(
            tmdb_id=data["id"],
            title=data.get("title") or "",
            overview=_or_none(data.get("overview")),
            poster_path=_or_none(data.get("poster_path")),
            release_date=_or_none(data.get("release_date")),
            popularity=data.get("popularity"),
        )

    @property
    def release_year(self) -> Optional[str]:
        """First four characters of the release date, as TMDB reports it."""
        return self.release_date[:4] if self.release_date else None
