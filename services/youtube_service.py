import logging
from typing import Any, Dict, List, Optional
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from utils.errors import AuthenticationRequiredError, YouTubeError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 50


class YouTubeService:
    """
    Thin wrapper over the YouTube Data API v3 for the calls WatchSync needs.

    Pagination is exposed as-is: list calls return the raw response, whose
    "nextPageToken" the caller passes back in. HttpError is translated into
    YouTubeError, except 401 which becomes AuthenticationRequiredError.

    Methods:
        get_channel_related_playlists(): relatedPlaylists of the authenticated channel.
        list_playlist_items(playlist_id, page_token, max_results): One page of playlist items.
        list_video_details(ids): Full details for up to 50 videos.
        list_owned_playlists(page_token): One page of the user's own playlists.
    """

    def __init__(self, client: Any):
        self.client = client

    @classmethod
    def from_credentials(cls, credentials: Any) -> "YouTubeService":
        """Build a service object for the given OAuth credentials."""
        return cls(build("youtube", "v3", credentials=credentials, cache_discovery=False))

    @staticmethod
    def _execute(request: Any, context: str) -> Dict[str, Any]:
        try:
            return request.execute()
        except HttpError as e:
            status = getattr(e.resp, "status", None)
            status = int(status) if status is not None else None
            reason = e.reason if hasattr(e, "reason") and e.reason else str(e)
            if status == 401:
                logger.warning(f"YouTube rejected credentials during {context}")
                raise AuthenticationRequiredError("YouTube session is no longer valid") from e
            logger.warning(f"YouTube returned {status} during {context}: {reason}")
            raise YouTubeError(reason, status_code=status) from e

    def get_channel_related_playlists(self) -> Dict[str, str]:
        """
        Return the relatedPlaylists mapping (e.g. likes, uploads, watchLater) of the
        authenticated user's channel, or an empty dict when there is none.
        """
        response = self._execute(
            self.client.channels().list(part="contentDetails", mine=True, maxResults=1),
            "channels.list",
        )
        items = response.get("items") or []
        if not items:
            return {}
        return (items[0].get("contentDetails") or {}).get("relatedPlaylists") or {}

    def list_playlist_items(
        self,
        playlist_id: str,
        page_token: Optional[str] = None,
        max_results: int = MAX_PAGE_SIZE,
    ) -> Dict[str, Any]:
        """Return one page of playlistItems.list for the playlist."""
        params = {
            "part": "snippet,contentDetails",
            "playlistId": playlist_id,
            "maxResults": max(1, min(MAX_PAGE_SIZE, max_results)),
        }
        if page_token:
            params["pageToken"] = page_token
        return self._execute(self.client.playlistItems().list(**params), f"playlistItems.list {playlist_id}")

    def list_video_details(self, ids: List[str]) -> List[Dict[str, Any]]:
        """Return videos.list items (snippet + contentDetails) for up to 50 IDs."""
        if not ids:
            return []
        if len(ids) > MAX_PAGE_SIZE:
            raise ValueError(f"Cannot fetch more than {MAX_PAGE_SIZE} videos at once")
        response = self._execute(
            self.client.videos().list(part="snippet,contentDetails", id=",".join(ids), maxResults=MAX_PAGE_SIZE),
            "videos.list",
        )
        return response.get("items") or []

    def list_owned_playlists(self, page_token: Optional[str] = None) -> Dict[str, Any]:
        """Return one page of playlists.list for the authenticated user."""
        params = {"part": "snippet", "mine": True, "maxResults": MAX_PAGE_SIZE}
        if page_token:
            params["pageToken"] = page_token
        return self._execute(self.client.playlists().list(**params), "playlists.list")
