"""
Error taxonomy for WatchSync synchronization and import operations.
"""
from typing import Optional


class WatchSyncError(Exception):
    """Base class for all WatchSync errors."""


class NotFoundError(WatchSyncError):
    """A local record (or an upstream entity) does not exist."""


class UniqueConstraintError(WatchSyncError):
    """A create hit an existing record with the same unique key."""


class AuthenticationRequiredError(WatchSyncError):
    """No usable session exists for the video platform; the user must reconnect."""

    def __init__(self, message: str = "No authenticated session found"):
        super().__init__(message)
        self.message = message


class UpstreamError(WatchSyncError):
    """
    An external API call failed.

    Attributes:
        status_code (Optional[int]): HTTP status code, or None for network failures.
        message (str): Upstream error message.
        service (str): Name of the upstream service.
    """

    service = "upstream"

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        self.message = message
        if status_code is not None:
            super().__init__(f"{self.service} API error: {status_code} - {message}")
        else:
            super().__init__(f"{self.service} API request failed: {message}")

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class TMDBError(UpstreamError):
    service = "TMDB"


class YouTubeError(UpstreamError):
    service = "YouTube"


class PlaylistNotFoundError(NotFoundError):
    """The watch-later playlist could not be located by any resolution strategy."""
