from .responses import (
    ImportResponse,
    RefreshEpisodesResponse,
    RefreshAllEpisodesResponse,
    VideoImportResponse,
    ErrorResponse,
)

__all__ = [
    "ImportResponse",
    "RefreshEpisodesResponse",
    "RefreshAllEpisodesResponse",
    "VideoImportResponse",
    "ErrorResponse",
]
