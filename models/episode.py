"""
Episode model for WatchSync, representing episode metadata, user watch state and database serialization logic.
"""
import datetime
import logging
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from models.metadata import EpisodeDetails

logger = logging.getLogger(__name__)

class Episode(BaseModel):
    """
    Represents a TV episode belonging to a locally tracked show.

    Descriptive fields (name, overview, air_date, runtime, still_path) are
    replaced on every reconciliation; user state (is_watched, watched_at) is not.

    Attributes:
        id (Optional[int]): Database ID (None until persisted).
        tv_show_id (int): Database ID of the owning show.
        season_number (int): Season number.
        episode_number (int): Episode number.
        name (Optional[str]): Episode title.
        overview (Optional[str]): Episode overview.
        air_date (Optional[datetime.date]): Air date.
        runtime (Optional[int]): Runtime in minutes.
        still_path (Optional[str]): TMDB still image path.
        is_watched (bool): Whether the user watched the episode.
        watched_at (Optional[datetime.datetime]): When the user watched it.

    Methods:
        to_db_tuple(): Serialize for DB insertion.
        from_details(): Construct from normalized TMDB episode details.
        from_db_record(): Construct from DB record.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        extra='forbid'
    )

    id: Optional[int] = Field(None, description="Database ID")
    tv_show_id: int = Field(..., gt=0, description="Database ID of the show")
    season_number: int = Field(..., ge=0, description="Season number")
    episode_number: int = Field(..., ge=0, description="Episode number")
    name: Optional[str] = Field(None, description="Episode title")
    overview: Optional[str] = Field(None, description="Episode overview")
    air_date: Optional[datetime.date] = Field(None, description="Air date")
    runtime: Optional[int] = Field(None, ge=0, description="Runtime in minutes")
    still_path: Optional[str] = Field(None, description="TMDB still path")
    is_watched: bool = Field(False, description="Watched flag")
    watched_at: Optional[datetime.datetime] = Field(None, description="Watched timestamp")

    @property
    def key(self) -> tuple:
        return (self.season_number, self.episode_number)

    def to_db_tuple(self) -> tuple:
        """
        Serialize the Episode object as a tuple for database insertion.

        Returns:
            tuple: Values for DB insertion.
        """
        return (
            self.tv_show_id,
            self.season_number,
            self.episode_number,
            self.name,
            self.overview,
            self.air_date,
            self.runtime,
            self.still_path,
            self.is_watched,
            self.watched_at
        )

    @classmethod
    def from_details(
        cls,
        tv_show_id: int,
        details: EpisodeDetails,
        is_watched: bool = False,
        watched_at: Optional[datetime.datetime] = None
    ) -> "Episode":
        """
        Construct an Episode from freshly fetched details plus the given user state.

        Args:
            tv_show_id (int): Database ID of the owning show.
            details (EpisodeDetails): Normalized TMDB episode details.
            is_watched (bool): Watched flag to store.
            watched_at (Optional[datetime.datetime]): Watched timestamp to store.

        Returns:
            Episode: Instantiated Episode object.
        """
        return cls(
            tv_show_id=tv_show_id,
            season_number=details.season_number,
            episode_number=details.episode_number,
            name=details.name,
            overview=details.overview,
            air_date=details.air_date,
            runtime=details.runtime,
            still_path=details.still_path,
            is_watched=is_watched,
            watched_at=watched_at
        )

    @classmethod
    def from_db_record(cls, record: dict) -> "Episode":
        """
        Construct an Episode object from a database record.

        Args:
            record (dict): Database record for the episode.

        Returns:
            Episode: Instantiated Episode object.
        """
        return cls(
            id=record.get("id"),
            tv_show_id=record["tv_show_id"],
            season_number=record["season_number"],
            episode_number=record["episode_number"],
            name=record.get("name"),
            overview=record.get("overview"),
            air_date=record.get("air_date"),
            runtime=record.get("runtime"),
            still_path=record.get("still_path"),
            is_watched=bool(record.get("is_watched")),
            watched_at=record.get("watched_at")
        )
