"""
Watch-later importer: mirrors the user's YouTube "Watch later" playlist into the videos table.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple
from models.results import VideoImportResult
from models.video import Video, VideoState
from services.auth_service import CredentialProvider
from services.db_implementations.db_interface import DatabaseInterface
from services.youtube_service import MAX_PAGE_SIZE, YouTubeService
from utils.duration import format_duration
from utils.errors import PlaylistNotFoundError, UniqueConstraintError, YouTubeError

logger = logging.getLogger(__name__)

WATCH_LATER_PLAYLIST_ID = "WL"
WATCH_LATER_TITLE = "watch later"
MAX_PLAYLIST_PAGES = 10

PlaylistStrategy = Callable[[YouTubeService], Optional[str]]


def from_related_playlists(youtube: YouTubeService) -> Optional[str]:
    """Read the watch-later ID from the channel's relatedPlaylists."""
    return youtube.get_channel_related_playlists().get("watchLater") or None


def from_reserved_id(youtube: YouTubeService) -> Optional[str]:
    """Probe the reserved "WL" playlist ID directly."""
    youtube.list_playlist_items(WATCH_LATER_PLAYLIST_ID, max_results=1)
    return WATCH_LATER_PLAYLIST_ID


def from_owned_playlists(youtube: YouTubeService, max_pages: int = MAX_PLAYLIST_PAGES) -> Optional[str]:
    """Scan the user's own playlists for one titled "Watch later"."""
    page_token = None
    for _ in range(max_pages):
        response = youtube.list_owned_playlists(page_token)
        for playlist in response.get("items") or []:
            title = ((playlist.get("snippet") or {}).get("title") or "").strip().lower()
            if title == WATCH_LATER_TITLE:
                return playlist.get("id")
        page_token = response.get("nextPageToken")
        if not page_token:
            break
    return None


DEFAULT_STRATEGIES: Tuple[PlaylistStrategy, ...] = (
    from_related_playlists,
    from_reserved_id,
    from_owned_playlists,
)


def resolve_watch_later_playlist(
    youtube: YouTubeService,
    strategies: Sequence[PlaylistStrategy] = DEFAULT_STRATEGIES,
) -> str:
    """
    Try each strategy in order and return the first playlist ID found.

    A YouTubeError inside a strategy counts as "no result" for that strategy.
    AuthenticationRequiredError is not caught.

    Raises:
        PlaylistNotFoundError: If every strategy comes up empty.
    """
    for strategy in strategies:
        name = getattr(strategy, "__name__", repr(strategy))
        try:
            playlist_id = strategy(youtube)
        except YouTubeError as e:
            logger.debug(f"Watch-later strategy {name} failed: {e}")
            continue
        if playlist_id:
            logger.info(f"Resolved watch-later playlist via {name}: {playlist_id}")
            return playlist_id
        logger.debug(f"Watch-later strategy {name} found nothing")
    raise PlaylistNotFoundError("Watch later playlist not found")


def _video_id(item: Dict[str, Any]) -> Optional[str]:
    content_details = item.get("contentDetails") or {}
    snippet = item.get("snippet") or {}
    return content_details.get("videoId") or (snippet.get("resourceId") or {}).get("videoId")


def fetch_playlist_videos(youtube: YouTubeService, playlist_id: str) -> List[Video]:
    """
    Page through a playlist and return full Video records for every item.

    Details are fetched per page with one batched videos.list call. Items whose
    details are unavailable (deleted or private videos) are left out.
    """
    videos: List[Video] = []
    seen: Set[str] = set()
    page_token = None
    page = 0
    while True:
        page += 1
        response = youtube.list_playlist_items(playlist_id, page_token=page_token, max_results=MAX_PAGE_SIZE)
        added_at: Dict[str, Optional[str]] = {}
        for item in response.get("items") or []:
            video_id = _video_id(item)
            # The first occurrence wins, also across pages
            if video_id and video_id not in seen:
                seen.add(video_id)
                added_at[video_id] = (item.get("snippet") or {}).get("publishedAt")

        if added_at:
            for details in youtube.list_video_details(list(added_at)):
                videos.append(Video.from_youtube(details, added_to_playlist_at=added_at.get(details.get("id"))))
        logger.debug(f"Playlist {playlist_id} page {page}: {len(added_at)} items")

        page_token = response.get("nextPageToken")
        if not page_token:
            break

    logger.info(f"Fetched {len(videos)} videos from playlist {playlist_id}")
    return videos


class WatchLaterImporter:
    """
    Imports the watch-later playlist for the current session.

    Attributes:
        db (DatabaseInterface): Local repository.
        credential_provider (CredentialProvider): Supplies a valid OAuth credential per run.
        client_factory: Builds a YouTubeService from a credential.
        strategies: Ordered playlist resolution strategies.
        dry_run (bool): If True, do not write to the database.
    """

    def __init__(
        self,
        db: DatabaseInterface,
        credential_provider: CredentialProvider,
        client_factory: Callable[[Any], YouTubeService] = YouTubeService.from_credentials,
        strategies: Sequence[PlaylistStrategy] = DEFAULT_STRATEGIES,
        dry_run: bool = False,
    ):
        self.db = db
        self.credential_provider = credential_provider
        self.client_factory = client_factory
        self.strategies = strategies
        self.dry_run = dry_run

    def upsert(self, video: Video) -> bool:
        """Create or update one video. Returns True if it was created."""
        existing = self.db.get_video_by_youtube_id(video.youtube_id)
        if existing:
            if not self.dry_run:
                self.db.update_video(existing["id"], video.descriptive_fields())
            return False

        label = f"{video.youtube_id}: {video.title} ({format_duration(video.duration_seconds)})"
        if self.dry_run:
            logger.info(f"[DRY RUN] Would add video {label}")
            return True
        try:
            self.db.add_video(video.model_copy(update={"state": VideoState.FEED}))
        except UniqueConstraintError:
            logger.debug(f"Video {video.youtube_id} was added concurrently")
            return False
        logger.info(f"Added video {label}")
        return True

    def import_videos(self) -> VideoImportResult:
        """
        Import every video in the watch-later playlist.

        Raises:
            AuthenticationRequiredError: If there is no usable session.
            PlaylistNotFoundError: If the playlist cannot be located.
            YouTubeError: If paging the playlist fails.
        """
        credentials = self.credential_provider.get_valid_credential()
        youtube = self.client_factory(credentials)

        playlist_id = resolve_watch_later_playlist(youtube, self.strategies)
        videos = fetch_playlist_videos(youtube, playlist_id)

        result = VideoImportResult()
        for video in videos:
            if self.upsert(video):
                result.imported += 1
            else:
                result.updated += 1

        logger.info(f"Watch-later import complete: {result.imported} imported, {result.updated} updated")
        return result
