"""
Show model for WatchSync, representing a locally tracked TV show and its database serialization logic.
"""
import datetime
import logging
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from models.metadata import ShowDetails

logger = logging.getLogger(__name__)

class Show(BaseModel):
    """
    Represents a TV show tracked locally, keyed by its TMDB ID.

    Attributes:
        id (Optional[int]): Database ID (None until persisted).
        tmdb_id (int): TMDB ID of the show (unique).
        title (str): Show title.
        overview (Optional[str]): Show overview.
        poster_path (Optional[str]): TMDB poster path.
        backdrop_path (Optional[str]): TMDB backdrop path.
        first_air_date (Optional[datetime.date]): First air date.
        last_air_date (Optional[datetime.date]): Last air date.
        status (Optional[str]): TMDB status string.
        saved_at (Optional[datetime.datetime]): When the user added the show.
        is_archived (bool): Whether the show is archived.
        created_at (datetime.datetime): Record creation timestamp.

    Methods:
        to_db_tuple(): Serialize for DB insertion.
        from_tmdb(): Construct from normalized TMDB details.
        from_db_record(): Construct from DB record.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        extra='forbid'
    )

    id: Optional[int] = Field(None, description="Database ID")
    tmdb_id: int = Field(..., gt=0, description="TMDB ID of the show")
    title: str = Field(..., description="Show title")
    overview: Optional[str] = Field(None, description="Show overview")
    poster_path: Optional[str] = Field(None, description="TMDB poster path")
    backdrop_path: Optional[str] = Field(None, description="TMDB backdrop path")
    first_air_date: Optional[datetime.date] = Field(None, description="First air date")
    last_air_date: Optional[datetime.date] = Field(None, description="Last air date")
    status: Optional[str] = Field(None, description="TMDB status string")
    saved_at: Optional[datetime.datetime] = Field(None, description="When the user added the show")
    is_archived: bool = Field(False, description="Archived shows are skipped by bulk refresh")
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now, description="Record creation timestamp")

    def to_db_tuple(self) -> tuple:
        """
        Serialize the Show object as a tuple for database insertion.

        Returns:
            tuple: Values for DB insertion.
        """
        return (
            self.tmdb_id,
            self.title,
            self.overview,
            self.poster_path,
            self.backdrop_path,
            self.first_air_date,
            self.last_air_date,
            self.status,
            self.saved_at,
            self.is_archived,
            self.created_at
        )

    @classmethod
    def from_tmdb(cls, details: ShowDetails, saved_at: Optional[datetime.datetime] = None) -> "Show":
        """
        Construct a Show object from normalized TMDB show details.

        Args:
            details (ShowDetails): Normalized TMDB details.
            saved_at (Optional[datetime.datetime]): When the user added the show.

        Returns:
            Show: Instantiated Show object.
        """
        return cls(
            tmdb_id=details.tmdb_id,
            title=details.title,
            overview=details.overview,
            poster_path=details.poster_path,
            backdrop_path=details.backdrop_path,
            first_air_date=details.first_air_date,
            last_air_date=details.last_air_date,
            status=details.status,
            saved_at=saved_at
        )

    @classmethod
    def from_db_record(cls, record: dict) -> "Show":
        """
        Construct a Show object from a database record.

        Args:
            record (dict): Database record for the show.

        Returns:
            Show: Instantiated Show object.
        """
        created_at = record.get("created_at") or datetime.datetime.now()

        return cls(
            id=record.get("id"),
            tmdb_id=record["tmdb_id"],
            title=record["title"],
            overview=record.get("overview"),
            poster_path=record.get("poster_path"),
            backdrop_path=record.get("backdrop_path"),
            first_air_date=record.get("first_air_date"),
            last_air_date=record.get("last_air_date"),
            status=record.get("status"),
            saved_at=record.get("saved_at"),
            is_archived=bool(record.get("is_archived")),
            created_at=created_at
        )
