"""
Video Service Module

Business logic behind the watch-later import endpoint.
"""

import logging
from starlette.concurrency import run_in_threadpool
from models.results import VideoImportResult
from utils.watch_later_importer import WatchLaterImporter

logger = logging.getLogger(__name__)


class VideoService:
    """Service class for video imports."""

    def __init__(self, importer: WatchLaterImporter):
        self.importer = importer

    async def import_watch_later(self) -> VideoImportResult:
        """
        Import the watch-later playlist.

        Raises:
            AuthenticationRequiredError: If there is no usable YouTube session.
            PlaylistNotFoundError: If the playlist cannot be located.
        """
        return await run_in_threadpool(self.importer.import_videos)
