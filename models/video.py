"""
Video model for WatchSync, representing a watch-later video and its database serialization logic.
"""
import datetime
import logging
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict
from utils.duration import parse_iso8601_duration

logger = logging.getLogger(__name__)

THUMBNAIL_PREFERENCE = ("medium", "high", "default")


class VideoState(str, Enum):
    """Workflow state of a video. New videos always start in FEED."""
    FEED = "feed"
    INBOX = "inbox"
    ARCHIVE = "archive"


class Video(BaseModel):
    """
    Represents a YouTube video imported from the watch-later playlist.

    Attributes:
        id (Optional[int]): Database ID (None until persisted).
        youtube_id (str): YouTube video ID (unique).
        title (str): Video title.
        description (Optional[str]): Video description.
        thumbnail_url (Optional[str]): Best available thumbnail URL.
        duration_seconds (Optional[int]): Parsed duration.
        published_at (Optional[datetime.datetime]): Upload time.
        channel_title (Optional[str]): Uploading channel name.
        youtube_url (str): Watch URL.
        added_to_playlist_at (Optional[datetime.datetime]): When the video was added to the playlist.
        state (Optional[VideoState]): Workflow state; only set at creation.
    """

    model_config = ConfigDict(
        from_attributes=True,
        validate_assignment=True,
        extra='forbid'
    )

    id: Optional[int] = Field(None, description="Database ID")
    youtube_id: str = Field(..., min_length=1, description="YouTube video ID")
    title: str = Field(..., description="Video title")
    description: Optional[str] = Field(None, description="Video description")
    thumbnail_url: Optional[str] = Field(None, description="Thumbnail URL")
    duration_seconds: Optional[int] = Field(None, ge=0, description="Duration in seconds")
    published_at: Optional[datetime.datetime] = Field(None, description="Upload time")
    channel_title: Optional[str] = Field(None, description="Channel name")
    youtube_url: str = Field("", description="Watch URL")
    added_to_playlist_at: Optional[datetime.datetime] = Field(None, description="Playlist insertion time")
    state: Optional[VideoState] = Field(None, description="Workflow state")

    def descriptive_fields(self) -> dict:
        """Fields replaced wholesale on every re-import."""
        return {
            "title": self.title,
            "description": self.description,
            "thumbnail_url": self.thumbnail_url,
            "duration_seconds": self.duration_seconds,
            "published_at": self.published_at,
            "channel_title": self.channel_title,
        }

    def to_db_tuple(self) -> tuple:
        """Serialize the Video object as a tuple for database insertion."""
        return (
            self.youtube_id,
            self.title,
            self.description,
            self.thumbnail_url,
            self.duration_seconds,
            self.published_at,
            self.channel_title,
            self.youtube_url,
            self.added_to_playlist_at,
            self.state.value if self.state else None
        )

    @staticmethod
    def _pick_thumbnail(thumbnails: dict) -> Optional[str]:
        for size in THUMBNAIL_PREFERENCE:
            url = (thumbnails.get(size) or {}).get("url")
            if url:
                return url
        return None

    @staticmethod
    def _parse_timestamp(value: Optional[str]) -> Optional[datetime.datetime]:
        if not value:
            return None
        try:
            return datetime.datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None

    @classmethod
    def from_youtube(cls, item: dict, added_to_playlist_at: Optional[str] = None) -> "Video":
        """
        Construct a Video object from a videos.list API item.

        Args:
            item (dict): Item with "id", "snippet" and "contentDetails" parts.
            added_to_playlist_at (Optional[str]): Playlist item publishedAt timestamp.

        Returns:
            Video: Instantiated Video object (state unset).
        """
        snippet = item.get("snippet") or {}
        content_details = item.get("contentDetails") or {}
        video_id = item["id"]
        return cls(
            youtube_id=video_id,
            title=snippet.get("title") or "Untitled Video",
            description=snippet.get("description") or None,
            thumbnail_url=cls._pick_thumbnail(snippet.get("thumbnails") or {}),
            duration_seconds=parse_iso8601_duration(content_details.get("duration")),
            published_at=cls._parse_timestamp(snippet.get("publishedAt")),
            channel_title=snippet.get("channelTitle") or None,
            youtube_url=f"https://www.youtube.com/watch?v={video_id}",
            added_to_playlist_at=cls._parse_timestamp(added_to_playlist_at)
        )

    @classmethod
    def from_db_record(cls, record: dict) -> "Video":
        """Construct a Video object from a database record."""
        return cls(
            id=record.get("id"),
            youtube_id=record["youtube_id"],
            title=record["title"],
            description=record.get("description"),
            thumbnail_url=record.get("thumbnail_url"),
            duration_seconds=record.get("duration_seconds"),
            published_at=record.get("published_at"),
            channel_title=record.get("channel_title"),
            youtube_url=record.get("youtube_url") or "",
            added_to_playlist_at=record.get("added_to_playlist_at"),
            state=record.get("state")
        )
